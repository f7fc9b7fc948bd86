"""
Canonicalization and plumbing shared by all AWS4 signer variants.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import base64
import logging
from datetime import datetime, timezone
from urllib.parse import unquote, unquote_plus, quote

from .aws4signingkey import AWS4SigningKey, credential_scope
from .credentials import as_credentials_supplier
from .digest import hash_string, hex_encode, hmac_sha256
from .exceptions import SigningPreconditionError
from .request import UNRESERVED


logger = logging.getLogger(__name__)

AMZ_ALGORITHM_HMAC_SHA256 = 'AWS4-HMAC-SHA256'

AUTHORIZATION = 'Authorization'
DATE = 'Date'
HOST = 'Host'
USER_AGENT = 'User-Agent'
CONTENT_TYPE = 'Content-Type'
CONTENT_LENGTH = 'Content-Length'
CONTENT_MD5 = 'Content-MD5'
CONTENT_ENCODING = 'Content-Encoding'

AMZ_DATE_HEADER = 'X-Amz-Date'
AMZ_CONTENT_SHA256_HEADER = 'x-amz-content-sha256'
AMZ_SECURITY_TOKEN_HEADER = 'X-Amz-Security-Token'
AMZ_DECODED_CONTENT_LENGTH_HEADER = 'x-amz-decoded-content-length'

DEFAULT_PORTS = {'http': 80, 'https': 443}


def utc_now():
    return datetime.now(timezone.utc)


class AWS4SignerBase:
    """
    Common methods and properties for all AWS4 signer variants.

    credentials        -- Credentials, or a callable returning Credentials.
                          Called once per signed request.
    service_and_region -- object with service() and region(host) methods,
                          see hostnames.AWSServiceAndRegion
    header_tag         -- provider tag of the x-<tag>-* headers to sign
    clock              -- callable returning the signing time as a datetime.
                          Naive datetimes are taken to be UTC.
    include_hdrs       -- names of further headers to sign when present on
                          the request, e.g. ['range']

    """

    def __init__(self, credentials, service_and_region, header_tag='amz',
                 clock=None, include_hdrs=None):
        self.credentials = as_credentials_supplier(credentials)
        self.service_and_region = service_and_region
        self.header_tag = header_tag
        self.clock = clock or utc_now
        self.include_hdrs = self.normalize_include_headers(include_hdrs)

    @staticmethod
    def normalize_include_headers(include_hdrs):
        try:
            return {str(hdr).lower() for hdr in include_hdrs}
        except TypeError:
            return set()

    def check_request(self, request):
        if request is None:
            raise SigningPreconditionError('request is not ready to sign')
        if not request.endpoint or not request.host:
            raise SigningPreconditionError(
                'request is not ready to sign, request.endpoint not present.')
        try:
            request.url.port
        except ValueError as e:
            raise SigningPreconditionError(
                'request is not ready to sign, invalid endpoint port: '
                '{}'.format(e)) from e

    def timestamps(self):
        """Return (timestamp, datestamp), e.g. 20130721T201207Z, 20130721."""
        date = self.clock()
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        else:
            date = date.astimezone(timezone.utc)
        return date.strftime('%Y%m%dT%H%M%SZ'), date.strftime('%Y%m%d')

    def scope_for(self, request, datestamp):
        """Return (service, region, credential scope) for request."""
        service = self.service_and_region.service()
        region = self.service_and_region.region(request.host)
        return service, region, credential_scope(datestamp, region, service)

    @staticmethod
    def host_header_for(request):
        """Host header value, with the port only if not the scheme default."""
        url = request.url
        host = url.hostname
        port = url.port
        if port is not None and DEFAULT_PORTS.get(url.scheme.lower()) != port:
            host += ':{}'.format(port)
        return host

    @staticmethod
    def get_content_type(request):
        payload = request.payload
        if payload is not None and payload.content_type:
            return payload.content_type
        return request.get_first_header(CONTENT_TYPE)

    @staticmethod
    def get_content_length(request):
        payload = request.payload
        if payload is not None and payload.content_length is not None:
            return str(payload.content_length)
        return request.get_first_header(CONTENT_LENGTH)

    @staticmethod
    def get_content_md5(request):
        payload = request.payload
        if payload is not None and payload.content_md5 is not None:
            return base64.b64encode(payload.content_md5).decode('ascii')
        return request.get_first_header(CONTENT_MD5)

    def append_amz_headers(self, request, signed_headers):
        """Add every x-<header_tag>-* header on request to signed_headers."""
        prefix = 'x-{}-'.format(self.header_tag).lower()
        for hdr, val in request.headers:
            if hdr.lower().startswith(prefix):
                signed_headers[hdr.lower()] = val

    def append_included_headers(self, request, signed_headers):
        # headers already computed, such as host, keep their computed value
        for hdr, val in request.headers:
            if hdr.lower() in signed_headers:
                continue
            if hdr.lower() in self.include_hdrs:
                signed_headers[hdr.lower()] = val

    def populate_signed_headers(self, request, builder, signed_headers):
        """
        Content-Type, Content-Length, Content-MD5, Host, User-Agent and the
        provider headers, in that order. Values are set on both the request
        being built and the signed header dict.

        Returns the updated request builder.

        """
        content_type = self.get_content_type(request)
        if content_type:
            builder = builder.with_header(CONTENT_TYPE, content_type)
            signed_headers['content-type'] = content_type

        content_length = self.get_content_length(request)
        if content_length:
            builder = builder.with_header(CONTENT_LENGTH, content_length)
            signed_headers['content-length'] = content_length

        content_md5 = self.get_content_md5(request)
        if content_md5 is not None:
            builder = builder.with_header(CONTENT_MD5, content_md5)
            signed_headers['content-md5'] = content_md5

        host = self.host_header_for(request)
        builder = builder.with_header(HOST, host)
        signed_headers['host'] = host

        # signed but not set, the transport may rewrite it otherwise
        user_agent = request.get_first_header(USER_AGENT)
        if user_agent is not None:
            signed_headers['user-agent'] = user_agent

        self.append_included_headers(request, signed_headers)
        self.append_amz_headers(request, signed_headers)
        return builder

    @classmethod
    def get_canonical_headers(cls, signed_headers):
        """
        Generate the Canonical Headers section of the Canonical Request.

        Return the Canonical Headers and the Signed Headers strs as a tuple
        (canonical_headers, signed_headers).

        signed_headers -- dict of header name to value. Names are lowercased
                          and sorted, values trimmed with runs of whitespace
                          collapsed.

        """
        lowered = {}
        for hdr, val in signed_headers.items():
            lowered[hdr.strip().lower()] = cls.amz_norm_whitespace(val)
        cano_headers = ''
        for hdr in sorted(lowered):
            cano_headers += '{}:{}\n'.format(hdr, lowered[hdr])
        return cano_headers, ';'.join(sorted(lowered))

    @classmethod
    def get_canonical_request(cls, method, endpoint_url, cano_headers,
                              signed_headers, payload_hash):
        """
        Create the AWS authentication Canonical Request string.

        method         -- HTTP method
        endpoint_url   -- urllib.parse.SplitResult of the request endpoint
        cano_headers   -- Canonical Headers section of Canonical Request, as
                          returned by get_canonical_headers()
        signed_headers -- Signed Headers, as returned by
                          get_canonical_headers()
        payload_hash   -- hex SHA256 of the payload or one of the
                          UNSIGNED-PAYLOAD/STREAMING-* placeholders

        """
        path = cls.amz_cano_path(endpoint_url.path)
        qs = cls.amz_cano_querystring(endpoint_url.query)
        req_parts = [method.upper(), path, qs, cano_headers,
                     signed_headers, payload_hash]
        return '\n'.join(req_parts)

    @staticmethod
    def get_sig_string(timestamp, scope, cano_req):
        """
        Generate the AWS4 auth string to sign.

        timestamp -- ISO8601 basic timestamp, e.g. 20130524T000000Z
        scope     -- credential scope
        cano_req  -- the Canonical Request, as returned by
                     get_canonical_request()

        """
        sig_items = [AMZ_ALGORITHM_HMAC_SHA256, timestamp, scope,
                     hex_encode(hash_string(cano_req))]
        return '\n'.join(sig_items)

    def create_string_to_sign(self, request, signed_headers, timestamp,
                              scope, payload_hash):
        cano_headers, signed = self.get_canonical_headers(signed_headers)
        cano_req = self.get_canonical_request(request.method, request.url,
                                              cano_headers, signed,
                                              payload_hash)
        logger.debug('<< %s', cano_req)
        sig_string = self.get_sig_string(timestamp, scope, cano_req)
        logger.debug('<< %s', sig_string)
        return sig_string, signed

    @staticmethod
    def signing_key(credentials, datestamp, region, service):
        return AWS4SigningKey.generate_key(credentials.secret_key, region,
                                           service, datestamp)

    @staticmethod
    def sign_string(key, sig_string):
        return hex_encode(hmac_sha256(key, sig_string))

    @staticmethod
    def authorization_header(credentials, scope, signed_headers, signature):
        auth_str = AMZ_ALGORITHM_HMAC_SHA256 + ' '
        auth_str += 'Credential={}/{}, '.format(credentials.access_id, scope)
        auth_str += 'SignedHeaders={}, '.format(signed_headers)
        auth_str += 'Signature={}'.format(signature)
        return auth_str

    @staticmethod
    def amz_cano_path(path):
        """
        Percent-encode every byte of the path that is not unreserved or /.

        The path is decoded first so already escaped characters are not
        escaped twice. An empty path is /.

        """
        return quote(unquote(path), safe='/' + UNRESERVED) or '/'

    @staticmethod
    def amz_cano_querystring(qs):
        """
        Parse and format querystring as per AWS4 auth requirements.

        Names and values are decoded, percent-encoded independently and
        sorted by encoded name, then value. Parameters without a value get
        an empty one, e.g. ?acl gives acl=

        qs -- raw querystring, without the leading ?

        """
        pairs = []
        for param in qs.split('&'):
            if not param:
                continue
            name, _, val = param.partition('=')
            pairs.append((quote(unquote_plus(name), safe=UNRESERVED),
                          quote(unquote_plus(val), safe=UNRESERVED)))
        return '&'.join('='.join(pair) for pair in sorted(pairs))

    @staticmethod
    def amz_norm_whitespace(text):
        """Trim text and replace runs of whitespace with a single space."""
        return ' '.join(text.split())
