"""
SHA256 and HMAC-SHA256 helpers shared by the AWS4 signers.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import binascii
import hashlib
import hmac

from .exceptions import SigningError, IO, CRYPTO


# hex(sha256(b''))
EMPTY_SHA256 = ('e3b0c44298fc1c149afbf4c8996fb924'
                '27ae41e4649b934ca495991b7852b855')

READ_BLOCK_SIZE = 8192


def hex_encode(data):
    """Lowercase base 16 encoding of data."""
    return binascii.hexlify(data).decode('ascii')


def hash_bytes(data):
    return hashlib.sha256(data).digest()


def hash_string(text):
    """SHA256 digest of text encoded as UTF-8."""
    return hash_bytes(text.encode('utf-8'))


def hash_stream(stream, block_size=READ_BLOCK_SIZE):
    """
    SHA256 digest of everything remaining in a binary stream.

    The stream is read in blocks of block_size, never held in memory as a
    whole. Read failures are raised as SigningError.

    """
    hsh = hashlib.sha256()
    try:
        while True:
            block = stream.read(block_size)
            if not block:
                break
            hsh.update(block)
    except OSError as e:
        raise SigningError('Unable to compute hash while signing request: '
                           '{}'.format(e), IO) from e
    return hsh.digest()


def hmac_sha256(key, msg):
    """
    Generate an SHA256 HMAC, encoding msg to UTF-8 if not already encoded.

    key -- signing key. bytes.
    msg -- message to sign. str or bytes.

    """
    if isinstance(msg, str):
        msg = msg.encode('utf-8')
    try:
        return hmac.new(key, msg, hashlib.sha256).digest()
    except (TypeError, ValueError) as e:
        raise SigningError('invalid key', CRYPTO) from e
