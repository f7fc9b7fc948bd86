"""
Amazon Web Services signature version 4 request signing, with S3 chunked
upload support, for the Python Requests_ library.

.. _Requests: https://github.com/psf/requests

Features
--------
* Authorization header signing for all AWS services that support AWS auth v4
* Streaming S3 uploads of single pass bodies as aws-chunked payloads, each
  chunk signed as it is sent
* Presigned URLs
* Service and region worked out from the request host
* Credentials looked up on every request, so rotated keys are picked up

Installation
------------
Install via pip:

.. code-block:: bash

    $ pip install requests-aws4signer

requests-aws4signer requires the Requests_ library. An httpx_ adapter is
available with the ``httpx`` extra.

.. _httpx: https://www.python-httpx.org

Basic usage
-----------
.. code-block:: python

    >>> import requests
    >>> from requests_aws4signer import AWS4Auth
    >>> endpoint = 'https://s3.eu-west-1.amazonaws.com'
    >>> auth = AWS4Auth('<ACCESS ID>', '<SECRET KEY>', 'eu-west-1', 's3')
    >>> response = requests.get(endpoint, auth=auth)
    >>> response.status_code
    200

This example would list your buckets in the ``eu-west-1`` region of the Amazon
S3 service.

Chunked uploads
---------------
A body that can only be read once is signed without reading it: give
Requests a generator or pipe along with its length and it is sent with
``Content-Encoding: aws-chunked``, in chunks of ``chunk_size`` bytes:

.. code-block:: python

    >>> auth = AWS4Auth(access_id, secret_key, 's3', chunk_size=64 * 1024)
    >>> with open('/dev/stdin', 'rb') as body:
    ...     requests.put(url, data=iter(lambda: body.read(8192), b''),
    ...                  headers={'Content-Length': str(length)}, auth=auth)

Bytes, strings and seekable files are hashed and signed in full instead.

Presigned URLs
--------------
.. code-block:: python

    >>> auth.presign('https://examplebucket.s3.amazonaws.com/test.txt',
    ...              expires=86400)
    'https://examplebucket.s3.amazonaws.com/test.txt?X-Amz-Algorithm=...'

``expires`` is in seconds, from 1 up to 604800 (7 days).

Lower level API
---------------
``AWS4RequestSigner`` signs ``SignableRequest`` values, which are immutable:
signing returns a new request. ``try_sign()`` returns ``Signed`` or
``Failed`` instead of raising ``SigningError``. The individual signers are
``AWS4HeaderSigner``, ``AWS4ChunkedSigner`` and ``AWS4QuerySigner``.

Testing
-------
A test suite is included in the test folder. It uses the example requests and
signatures published in the AWS documentation.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from .aws4auth import AWS4Auth
from .aws4signingkey import AWS4SigningKey
from .aws4signer import AWS4RequestSigner
from .aws4headersigner import AWS4HeaderSigner
from .aws4chunkedsigner import AWS4ChunkedSigner
from .aws4querysigner import AWS4QuerySigner
from .chunkedpayload import (ChunkedUploadPayload, ChunkedUploadStream,
                             calculate_chunked_content_length)
from .credentials import (Credentials, StaticCredentialsProvider,
                          EnvironmentCredentialsProvider)
from .exceptions import (SigningError, SigningPreconditionError,
                         ChunkedUploadError)
from .hostnames import (AWSServiceAndRegion, StaticServiceAndRegion,
                        parse_region_name, parse_service_name)
from .request import SignableRequest, BytesPayload, StreamPayload
from .result import Signed, Failed

__version__ = '0.1'
