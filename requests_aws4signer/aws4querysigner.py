"""
AWS4 signer that puts the signature in the query string, producing
presigned URLs.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from .aws4signerbase import (AWS4SignerBase, AMZ_ALGORITHM_HMAC_SHA256,
                             AUTHORIZATION, DATE, HOST,
                             AMZ_CONTENT_SHA256_HEADER, AMZ_DATE_HEADER)


UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'

AMZ_SECURITY_TOKEN_PARAM = 'X-Amz-Security-Token'
AMZ_ALGORITHM_PARAM = 'X-Amz-Algorithm'
AMZ_CREDENTIAL_PARAM = 'X-Amz-Credential'
AMZ_DATE_PARAM = 'X-Amz-Date'
AMZ_EXPIRES_PARAM = 'X-Amz-Expires'
AMZ_SIGNEDHEADERS_PARAM = 'X-Amz-SignedHeaders'
AMZ_SIGNATURE_PARAM = 'X-Amz-Signature'

MAX_EXPIRES = 604800


class AWS4QuerySigner(AWS4SignerBase):
    """
    Sign a request by adding X-Amz-* query parameters to its endpoint.

    Only the Host header is signed and the payload is never read, so the
    resulting URL can be handed to another client to use until it expires.

    """

    def sign(self, request, expires):
        """
        Return a copy of request whose endpoint carries the signature.

        expires -- validity of the URL in seconds. AWS accepts 1 to 604800
                   (7 days); the value is passed through unchecked.

        """
        self.check_request(request)

        timestamp, datestamp = self.timestamps()
        service, region, scope = self.scope_for(request, datestamp)

        builder = request.without_headers(AUTHORIZATION, DATE,
                                          AMZ_CONTENT_SHA256_HEADER,
                                          AMZ_DATE_HEADER)
        host = self.host_header_for(request)
        builder = builder.with_header(HOST, host)
        signed_headers = {'host': host}

        credentials = self.credentials()
        if credentials.session_token:
            builder = builder.with_query_param(AMZ_SECURITY_TOKEN_PARAM,
                                               credentials.session_token)
        credential = '{}/{}'.format(credentials.access_id, scope)
        builder = builder.with_query_param(AMZ_ALGORITHM_PARAM,
                                           AMZ_ALGORITHM_HMAC_SHA256)
        builder = builder.with_query_param(AMZ_CREDENTIAL_PARAM, credential)
        builder = builder.with_query_param(AMZ_DATE_PARAM, timestamp)
        builder = builder.with_query_param(AMZ_EXPIRES_PARAM, int(expires))
        builder = builder.with_query_param(AMZ_SIGNEDHEADERS_PARAM, 'host')

        sig_string, _ = self.create_string_to_sign(
            builder, signed_headers, timestamp, scope, UNSIGNED_PAYLOAD)
        key = self.signing_key(credentials, datestamp, region, service)
        signature = self.sign_string(key, sig_string)
        return builder.with_query_param(AMZ_SIGNATURE_PARAM, signature)
