"""
Provides AWS4HttpxAuth, AWS version 4 authentication for httpx clients.

Requires the httpx extra:

    $ pip install requests-aws4signer[httpx]

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import httpx

from .aws4signer import AWS4RequestSigner
from .request import SignableRequest, BytesPayload


class AWS4HttpxAuth(httpx.Auth):
    """
    httpx authentication class signing requests with an Authorization
    header. httpx reads the request body before signing, so the payload is
    always hashed in full.

    >>> auth = AWS4HttpxAuth(Credentials(access_id, secret_key),
    ...                      StaticServiceAndRegion('sqs', 'eu-west-1'))
    >>> httpx.get('https://sqs.eu-west-1.amazonaws.com/?Action=ListQueues',
    ...           auth=auth)

    Takes the same arguments as AWS4RequestSigner.

    """

    requires_request_body = True

    def __init__(self, credentials, service_and_region, **kwargs):
        self.signer = AWS4RequestSigner(credentials, service_and_region,
                                        **kwargs)

    def auth_flow(self, request):
        content = request.content
        payload = BytesPayload(content) if content else None
        signable = SignableRequest(request.method, str(request.url),
                                   request.headers.multi_items(), payload)
        signed = self.signer.sign(signable)
        request.headers = httpx.Headers(list(signed.headers))
        yield request
