"""
Provides AWS4RequestSigner, which picks the signing method for a request.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import logging

from .aws4chunkedsigner import AWS4ChunkedSigner, DEFAULT_CHUNK_SIZE
from .aws4headersigner import AWS4HeaderSigner
from .aws4querysigner import AWS4QuerySigner
from .exceptions import SigningError
from .result import Signed, Failed


logger = logging.getLogger(__name__)


class AWS4RequestSigner:
    """
    Sign requests with the Authorization header signer, or the chunked
    upload signer for payloads that can only be read once.

    A request goes through the chunked upload signer if and only if it has
    a payload of known, positive length that is not repeatable. Everything
    else, including requests without a payload, is signed with a full
    payload hash.

    Takes the same arguments as AWS4SignerBase, plus chunk_size.

    """

    def __init__(self, credentials, service_and_region, header_tag='amz',
                 clock=None, include_hdrs=None, chunk_size=DEFAULT_CHUNK_SIZE):
        kwargs = dict(header_tag=header_tag, clock=clock,
                      include_hdrs=include_hdrs)
        self.header_signer = AWS4HeaderSigner(credentials, service_and_region,
                                              **kwargs)
        self.chunked_signer = AWS4ChunkedSigner(credentials,
                                                service_and_region,
                                                chunk_size=chunk_size,
                                                **kwargs)
        self.query_signer = AWS4QuerySigner(credentials, service_and_region,
                                            **kwargs)

    @staticmethod
    def use_chunked_upload(request):
        payload = request.payload
        return (payload is not None and
                payload.content_length is not None and
                payload.content_length > 0 and
                not payload.is_repeatable)

    def sign(self, request):
        """Return a signed copy of request. Raises SigningError."""
        if request is not None and self.use_chunked_upload(request):
            logger.debug('signing %s %s as chunked upload', request.method,
                         request.endpoint)
            return self.chunked_signer.sign(request)
        return self.header_signer.sign(request)

    def try_sign(self, request):
        """Return Signed(request), or Failed(kind, error) on SigningError."""
        try:
            return Signed(self.sign(request))
        except SigningError as e:
            logger.debug('signing failed: %s', e)
            return Failed(e.kind, e)

    def presign(self, request, expires):
        """Return a copy of request with a presigned endpoint URL."""
        return self.query_signer.sign(request, expires)
