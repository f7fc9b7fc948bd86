"""
AWS4 signer that signs requests with an Authorization header.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from .aws4signerbase import (AWS4SignerBase, AUTHORIZATION, DATE,
                             AMZ_CONTENT_SHA256_HEADER, AMZ_DATE_HEADER,
                             AMZ_SECURITY_TOKEN_HEADER)
from .digest import EMPTY_SHA256, hash_stream, hex_encode
from .exceptions import SigningError, IO


class AWS4HeaderSigner(AWS4SignerBase):
    """
    Sign a request in full, including a SHA256 of its whole payload.

    The payload must be repeatable or absent: it is read once to hash it and
    then reset so it can be sent. Use AWS4ChunkedSigner for single pass
    streams.

    >>> signer = AWS4HeaderSigner(Credentials(access_id, secret_key),
    ...                           StaticServiceAndRegion('s3', 'us-east-1'))
    >>> signed = signer.sign(SignableRequest('GET', url))
    >>> signed.get_first_header('Authorization')
    'AWS4-HMAC-SHA256 Credential=...'

    """

    def sign(self, request):
        """Return a copy of request with Authorization and x-amz-* set."""
        self.check_request(request)

        timestamp, datestamp = self.timestamps()
        service, region, scope = self.scope_for(request, datestamp)

        builder = request.without_headers(AUTHORIZATION, DATE)
        signed_headers = {}
        builder = self.populate_signed_headers(request, builder,
                                               signed_headers)

        credentials = self.credentials()
        if credentials.session_token:
            builder = builder.with_header(AMZ_SECURITY_TOKEN_HEADER,
                                          credentials.session_token)
            signed_headers['x-amz-security-token'] = credentials.session_token

        content_sha256 = self.get_payload_hash(request)
        builder = builder.with_header(AMZ_CONTENT_SHA256_HEADER,
                                      content_sha256)
        signed_headers['x-amz-content-sha256'] = content_sha256

        builder = builder.with_header(AMZ_DATE_HEADER, timestamp)
        signed_headers['x-amz-date'] = timestamp

        sig_string, signed = self.create_string_to_sign(
            request, signed_headers, timestamp, scope, content_sha256)
        key = self.signing_key(credentials, datestamp, region, service)
        signature = self.sign_string(key, sig_string)
        auth_str = self.authorization_header(credentials, scope, signed,
                                             signature)
        return builder.with_header(AUTHORIZATION, auth_str)

    def get_payload_hash(self, request):
        payload = request.payload
        if payload is None:
            return EMPTY_SHA256
        return self.calculate_payload_content_hash(payload)

    @staticmethod
    def calculate_payload_content_hash(payload):
        try:
            stream = payload.open_stream()
        except OSError as e:
            raise SigningError('unable to open payload stream to calculate '
                               'AWS4 signature.', IO) from e
        try:
            return hex_encode(hash_stream(stream))
        finally:
            payload.close_or_reset(stream)
