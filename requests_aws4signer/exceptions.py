"""
Exceptions raised while signing requests.

Every failure carries a kind, one of:

PRECONDITION -- the request or configuration cannot be signed as given
IO           -- reading the payload stream failed
CRYPTO       -- the HMAC could not be initialised with the key material
STREAM_RESET -- a hashed payload stream could not be restored afterwards

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


PRECONDITION = 'precondition'
IO = 'io'
CRYPTO = 'crypto'
STREAM_RESET = 'stream-reset'


class SigningError(Exception):
    """The request could not be signed. No partial signature is attached."""

    def __init__(self, message, kind=IO):
        super().__init__(message)
        self.kind = kind


class SigningPreconditionError(SigningError, ValueError):

    def __init__(self, message):
        super().__init__(message, PRECONDITION)


class ChunkedUploadError(SigningError):
    """Raised while producing the signed chunks of an aws-chunked upload."""
