"""
AWS4 signer for 'chunked' uploads, where the payload is streamed once as
aws-chunked frames each carrying its own signature.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from .aws4signerbase import (AWS4SignerBase, AUTHORIZATION, DATE,
                             CONTENT_ENCODING, CONTENT_LENGTH, CONTENT_TYPE,
                             AMZ_CONTENT_SHA256_HEADER, AMZ_DATE_HEADER,
                             AMZ_DECODED_CONTENT_LENGTH_HEADER,
                             AMZ_SECURITY_TOKEN_HEADER)
from .chunkedpayload import (ChunkedUploadPayload,
                             calculate_chunked_content_length)
from .exceptions import SigningPreconditionError


STREAMING_BODY_SHA256 = 'STREAMING-AWS4-HMAC-SHA256-PAYLOAD'
CONTENT_ENCODING_AWS_CHUNKED = 'aws-chunked'
DEFAULT_CHUNK_SIZE = 64 * 1024


class AWS4ChunkedSigner(AWS4SignerBase):
    """
    Sign the headers of a request and replace its payload with a
    ChunkedUploadPayload that signs the body chunk by chunk as it is read.

    The payload is never read during signing, so single pass streams can be
    uploaded. Its content length must be known and positive: the framed
    Content-Length is sent before any of the body.

    chunk_size -- bytes of payload per chunk, default 64KiB

    """

    def __init__(self, credentials, service_and_region,
                 chunk_size=DEFAULT_CHUNK_SIZE, **kwargs):
        super().__init__(credentials, service_and_region, **kwargs)
        if chunk_size < 1:
            raise SigningPreconditionError(
                'chunk size must be at least 1, got {}'.format(chunk_size))
        self.chunk_size = chunk_size

    def sign(self, request):
        """Return a copy of request ready to be sent as an aws-chunked upload."""
        self.check_request(request)
        payload = request.payload
        if payload is None:
            raise SigningPreconditionError(
                'request is not ready to sign, payload not present.')
        content_length = payload.content_length
        # chunked upload required content-length.
        if content_length is None:
            raise SigningPreconditionError(
                'request is not ready to sign, payload contentLength not '
                'present.')
        if content_length <= 0:
            raise SigningPreconditionError(
                'chunked upload requires a positive content length, got '
                '{}'.format(content_length))

        timestamp, datestamp = self.timestamps()
        service, region, scope = self.scope_for(request, datestamp)

        builder = request.without_headers(AUTHORIZATION, DATE,
                                          CONTENT_LENGTH)
        signed_headers = {}
        builder = self.populate_signed_headers(request, builder,
                                               signed_headers)
        if 'content-type' not in signed_headers:
            builder = builder.without_headers(CONTENT_TYPE)

        content_encoding = CONTENT_ENCODING_AWS_CHUNKED
        if payload.content_encoding:
            content_encoding += ',' + payload.content_encoding
        builder = builder.with_header(CONTENT_ENCODING, content_encoding)
        signed_headers['content-encoding'] = content_encoding

        decoded_length = str(content_length)
        builder = builder.with_header(AMZ_DECODED_CONTENT_LENGTH_HEADER,
                                      decoded_length)
        signed_headers['x-amz-decoded-content-length'] = decoded_length

        # how big the body is once every chunk carries its signature
        total_length = str(calculate_chunked_content_length(
            content_length, self.chunk_size))
        builder = builder.with_header(CONTENT_LENGTH, total_length)
        signed_headers['content-length'] = total_length

        credentials = self.credentials()
        if credentials.session_token:
            builder = builder.with_header(AMZ_SECURITY_TOKEN_HEADER,
                                          credentials.session_token)
            signed_headers['x-amz-security-token'] = credentials.session_token

        builder = builder.with_header(AMZ_CONTENT_SHA256_HEADER,
                                      STREAMING_BODY_SHA256)
        signed_headers['x-amz-content-sha256'] = STREAMING_BODY_SHA256

        builder = builder.with_header(AMZ_DATE_HEADER, timestamp)
        signed_headers['x-amz-date'] = timestamp

        sig_string, signed = self.create_string_to_sign(
            request, signed_headers, timestamp, scope, STREAMING_BODY_SHA256)
        key = self.signing_key(credentials, datestamp, region, service)
        seed_signature = self.sign_string(key, sig_string)
        auth_str = self.authorization_header(credentials, scope, signed,
                                             seed_signature)

        chunked_payload = ChunkedUploadPayload(payload, self.chunk_size,
                                               timestamp, scope, key,
                                               seed_signature)
        return builder.with_header(AUTHORIZATION, auth_str) \
                      .with_payload(chunked_payload)
