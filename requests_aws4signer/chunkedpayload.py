"""
Body transform for aws-chunked uploads.

The payload is sent as a sequence of frames:

    <hex length>;chunk-signature=<64 hex chars>\\r\\n<data>\\r\\n

ending with a zero length frame. Each frame signature covers the hash of
its data and the signature of the frame before it, starting from the seed
signature of the request headers, so frames can only be produced in order.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import hashlib
import hmac
import logging
import threading

from .digest import EMPTY_SHA256, hex_encode
from .exceptions import ChunkedUploadError, IO, CRYPTO
from .request import Payload


logger = logging.getLogger(__name__)

CHUNK_STRING_TO_SIGN_PREFIX = 'AWS4-HMAC-SHA256-PAYLOAD'
CHUNK_SIGNATURE_HEADER = ';chunk-signature='
SIGNATURE_LENGTH = 64
CRLF = '\r\n'

# stream states
STREAMING = 'streaming'
FINAL = 'final'
DONE = 'done'


def calculate_chunk_header_length(chunk_data_size):
    """Size of a whole frame carrying chunk_data_size bytes of data."""
    return (len('{:x}'.format(chunk_data_size))
            + len(CHUNK_SIGNATURE_HEADER)
            + SIGNATURE_LENGTH
            + len(CRLF)
            + chunk_data_size
            + len(CRLF))


def calculate_chunked_content_length(original_length, chunk_size):
    """
    Calculates the expanded payload size of our data when it is chunked.

    original_length -- The true size of the data payload to be uploaded,
                       must be positive
    chunk_size      -- The size of each chunk we intend to send

    Returns the overall size to use as Content-Length on a chunked upload.

    """
    if original_length is None or original_length <= 0:
        raise ValueError('Nonnegative content length expected.')
    if chunk_size <= 0:
        raise ValueError('chunk size must be positive')
    full_chunks, remainder = divmod(original_length, chunk_size)
    total = full_chunks * calculate_chunk_header_length(chunk_size)
    if remainder > 0:
        total += calculate_chunk_header_length(remainder)
    return total + calculate_chunk_header_length(0)


class ChunkedUploadStream:
    """
    Lazily produces the signed frames of one upload.

    Iterate it for whole frames, or use read() as a file object. The frame
    sequence is finite and cannot be restarted: STREAMING while data remains,
    FINAL once the zero length frame has been produced, then DONE. Only one
    reader may pull frames at a time.

    source         -- binary file object holding the original payload
    block_size     -- bytes of payload per frame
    timestamp      -- request timestamp, e.g. 20130524T000000Z
    scope          -- request credential scope
    signing_key    -- derived AWS4 signing key, bytes
    seed_signature -- hex signature of the request headers

    """

    def __init__(self, source, block_size, timestamp, scope, signing_key,
                 seed_signature):
        self.source = source
        self.block_size = block_size
        self.timestamp = timestamp
        self.scope = scope
        try:
            self._hmac = hmac.new(signing_key, digestmod=hashlib.sha256)
        except (TypeError, ValueError) as e:
            raise ChunkedUploadError('invalid key', CRYPTO) from e
        self.last_signature = seed_signature
        self.state = STREAMING
        self._lock = threading.Lock()
        self._buffer = b''

    def __iter__(self):
        return self

    def __next__(self):
        self._acquire()
        try:
            return self._next_frame()
        finally:
            self._lock.release()

    def _acquire(self):
        if not self._lock.acquire(blocking=False):
            raise ChunkedUploadError(
                'chunked upload stream read concurrently')

    def _next_frame(self):
        if self.state == FINAL:
            self.state = DONE
            self._hmac = None
        if self.state == DONE:
            raise StopIteration
        data = self._read_block()
        frame = self.construct_signed_chunk(data)
        if not data:
            self.state = FINAL
        return frame

    def _read_block(self):
        # fill a whole block unless the source runs out
        parts = []
        remaining = self.block_size
        try:
            while remaining > 0:
                part = self.source.read(remaining)
                if not part:
                    break
                parts.append(part)
                remaining -= len(part)
        except OSError as e:
            raise ChunkedUploadError('read from input stream error',
                                     IO) from e
        return b''.join(parts)

    def chunk_string_to_sign(self, data):
        # no chunk extensions are sent, the nonsig-extension is always empty
        sts = [CHUNK_STRING_TO_SIGN_PREFIX,
               self.timestamp,
               self.scope,
               self.last_signature,
               EMPTY_SHA256,
               hashlib.sha256(data).hexdigest()]
        return '\n'.join(sts)

    def construct_signed_chunk(self, data):
        """
        Return the frame for data, chaining its signature from the previous
        frame. Empty data gives the terminating frame.

        """
        hsh = self._hmac.copy()
        hsh.update(self.chunk_string_to_sign(data).encode('utf-8'))
        signature = hex_encode(hsh.digest())
        self.last_signature = signature
        logger.debug('signed chunk of %d bytes', len(data))
        header = '{:x}{}{}{}'.format(len(data), CHUNK_SIGNATURE_HEADER,
                                     signature, CRLF)
        return b''.join([header.encode('ascii'), data,
                         CRLF.encode('ascii')])

    def read(self, size=-1):
        """Read up to size bytes of framed body, all of it if size < 0."""
        self._acquire()
        try:
            frames = [self._buffer]
            buffered = len(self._buffer)
            while size is None or size < 0 or buffered < size:
                try:
                    frame = self._next_frame()
                except StopIteration:
                    break
                frames.append(frame)
                buffered += len(frame)
            data = b''.join(frames)
            if size is None or size < 0:
                self._buffer = b''
                return data
            data, self._buffer = data[:size], data[size:]
            return data
        finally:
            self._lock.release()


class ChunkedUploadPayload(Payload):
    """
    Payload that sends an original payload as signed aws-chunked frames.

    content_length is the framed length. It is repeatable when the
    original payload is, each open_stream() starting again from the seed
    signature.

    """

    def __init__(self, payload, block_size, timestamp, scope, signing_key,
                 seed_signature):
        self.payload = payload
        self.block_size = block_size
        self.timestamp = timestamp
        self.scope = scope
        self.signing_key = signing_key
        self.seed_signature = seed_signature
        total_length = calculate_chunked_content_length(
            payload.content_length, block_size)
        super().__init__(total_length, payload.content_type,
                         payload.content_md5, None)

    @property
    def is_repeatable(self):
        return self.payload.is_repeatable

    def open_stream(self):
        try:
            source = self.payload.open_stream()
        except OSError as e:
            raise ChunkedUploadError('unable to open payload stream',
                                     IO) from e
        return ChunkedUploadStream(source, self.block_size, self.timestamp,
                                   self.scope, self.signing_key,
                                   self.seed_signature)
