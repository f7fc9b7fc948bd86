"""
Provides AWS4Auth class for handling Amazon Web Services version 4
authentication with the Requests module.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import logging

from requests.auth import AuthBase
from requests.structures import CaseInsensitiveDict

from .aws4querysigner import MAX_EXPIRES
from .aws4signer import AWS4RequestSigner
from .chunkedpayload import ChunkedUploadPayload
from .credentials import Credentials
from .hostnames import AWSServiceAndRegion, StaticServiceAndRegion
from .request import SignableRequest, BytesPayload, StreamPayload, \
    IteratorStream


logger = logging.getLogger(__name__)


class AWS4Auth(AuthBase):
    """
    Requests authentication class for providing AWS version 4 authentication
    for HTTP requests.

    Bodies that can be read more than once (bytes, str, seekable files) are
    hashed and signed in full. Single pass bodies, such as generators or
    pipes, with a Content-Length header are sent as S3 aws-chunked uploads,
    signed chunk by chunk as Requests streams them.

    You can reuse AWS4Auth instances to sign as many requests as you need.

    Basic usage
    -----------

    >>> import requests
    >>> from requests_aws4signer import AWS4Auth
    >>> auth = AWS4Auth('<ACCESS ID>', '<SECRET KEY>', 'eu-west-1', 's3')
    >>> endpoint = 'https://s3.eu-west-1.amazonaws.com'
    >>> response = requests.get(endpoint, auth=auth)
    >>> response.status_code
    200

    Class attributes
    ----------------

    AWS4Auth.signer             -- AWS4RequestSigner doing the signing
    AWS4Auth.service_and_region -- where service and region come from

    """

    def __init__(self, *args, **kwargs):
        """
        AWS4Auth instances can be created with a fixed region:

        >>> auth = AWS4Auth(access_id, secret_key, region, service)

          or with the region taken from each request's host:

        >>> auth = AWS4Auth(access_id, secret_key, service)

          or from a credentials supplier:

        >>> auth = AWS4Auth(credentials=EnvironmentCredentialsProvider(),
        ...                 service='s3')

        access_id     -- This is your AWS access key ID
        secret_key    -- This is your AWS secret access key
        region        -- The region you're connecting to, e.g. us-east-1.
        service       -- The name of the service you're connecting to,
                         e.g. s3.

        Keyword arguments:
        session_token -- Session token for temporary credentials
        credentials   -- Credentials, or callable returning Credentials,
                         instead of the positional access_id and secret_key
        region        -- as above, with credentials=
        service       -- as above, with credentials=
        include_hdrs  -- further headers to sign when present, e.g. ['range']
        header_tag    -- provider tag of x-<tag>-* headers, default 'amz'
        chunk_size    -- bytes per chunk of chunked uploads, default 65536
        clock         -- callable returning the signing time

        """
        l = len(args)
        if l not in [0, 3, 4]:
            msg = 'AWS4Auth() takes 0, 3 or 4 arguments, {} given'.format(l)
            raise TypeError(msg)
        if l == 0:
            if 'credentials' not in kwargs or 'service' not in kwargs:
                raise TypeError('AWS4Auth() requires credentials and service '
                                'keyword arguments when no positional '
                                'arguments are given')
            credentials = kwargs['credentials']
            region = kwargs.get('region')
            service = kwargs['service']
        else:
            credentials = Credentials(args[0], args[1],
                                      kwargs.get('session_token'))
            region = args[2] if l == 4 else None
            service = args[-1]
        if region is None:
            self.service_and_region = AWSServiceAndRegion(service=service)
        else:
            self.service_and_region = StaticServiceAndRegion(service, region)
        signer_kwargs = {}
        for name in ('include_hdrs', 'header_tag', 'chunk_size', 'clock'):
            if name in kwargs:
                signer_kwargs[name] = kwargs[name]
        self.signer = AWS4RequestSigner(credentials, self.service_and_region,
                                        **signer_kwargs)
        AuthBase.__init__(self)

    @property
    def include_hdrs(self):
        return self.signer.header_signer.include_hdrs

    def __call__(self, req):
        """
        Interface used by Requests module to apply authentication to HTTP
        requests.

        Add Authorization, x-amz-date and x-amz-content-sha256 headers to the
        request, replacing the body with a chunked upload stream where the
        body can only be read once.

        If request body is not already encoded to bytes, encode to charset
        specified in Content-Type header, or UTF-8 if not specified.

        req -- Requests PreparedRequest object

        """
        if hasattr(req, 'body') and req.body is not None:
            self.encode_body(req)
        keep_host = 'host' in req.headers
        signed = self.signer.sign(self.signable_request(req))
        self.apply_signed_request(req, signed, keep_host)
        return req

    def presign(self, url, expires=3600, method='GET'):
        """
        Return url with a presigned query string, valid for expires seconds.

        """
        if not 1 <= expires <= MAX_EXPIRES:
            raise ValueError('expires must be between 1 and {} seconds, got '
                             '{}'.format(MAX_EXPIRES, expires))
        return self.signer.presign(SignableRequest(method, url),
                                   expires).endpoint

    @staticmethod
    def signable_request(req):
        """Build a SignableRequest from a Requests PreparedRequest."""
        return SignableRequest(req.method, req.url, req.headers.items(),
                               AWS4Auth.payload_for(req))

    @staticmethod
    def payload_for(req):
        body = getattr(req, 'body', None)
        if body is None:
            return None
        if isinstance(body, bytes):
            return BytesPayload(body)
        length = req.headers.get('content-length')
        length = int(length) if length is not None else None
        if hasattr(body, 'read'):
            return StreamPayload(body, content_length=length)
        return StreamPayload(IteratorStream(body), content_length=length)

    @staticmethod
    def apply_signed_request(req, signed, keep_host=False):
        """Copy the URL, headers and body of signed back into req."""
        chunked = isinstance(signed.payload, ChunkedUploadPayload)
        headers = CaseInsensitiveDict()
        for hdr, val in signed.headers:
            # Requests sends Host from the URL, the same value as signed
            if hdr.lower() == 'host' and not keep_host:
                continue
            # Content-Length is sent up front instead
            if hdr.lower() == 'transfer-encoding' and chunked:
                continue
            headers[hdr] = val
        req.headers = headers
        req.url = signed.endpoint
        if chunked:
            logger.debug('streaming %s as aws-chunked upload', req.url)
            req.body = signed.payload.open_stream()

    @staticmethod
    def encode_body(req):
        """
        Encode body of request to bytes and update content-type if required.

        If the body of req is str then encode to the charset found in
        content-type header if present, otherwise UTF-8, or ASCII if
        content-type is application/x-www-form-urlencoded. If encoding to UTF-8
        then add charset to content-type. Modifies req directly, does not
        return a modified copy.

        req -- Requests PreparedRequest object

        """
        if isinstance(req.body, str):
            split = req.headers.get('content-type', 'text/plain').split(';')
            if len(split) == 2:
                ct, cs = split
                cs = cs.split('=')[1]
                req.body = req.body.encode(cs)
            else:
                ct = split[0]
                if (ct == 'application/x-www-form-urlencoded' or
                        'x-amz-' in ct):
                    req.body = req.body.encode()
                else:
                    req.body = req.body.encode('utf-8')
                    req.headers['content-type'] = ct + '; charset=utf-8'
