"""
Request and payload values handled by the signers.

SignableRequest is immutable: every with_*/without_* method returns a new
request, the original is never modified. Payloads describe the body and how
it can be read: BytesPayload can be opened any number of times,
StreamPayload wraps a file object which is repeatable only when it can be
rewound.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import io
from collections import namedtuple
from urllib.parse import urlsplit, urlunsplit, unquote_plus, quote

from .exceptions import SigningError, STREAM_RESET


# Do not encode the unreserved characters that RFC 3986 defines
UNRESERVED = '-_.~'


def _header_items(headers):
    if headers is None:
        return ()
    if hasattr(headers, 'items'):
        headers = headers.items()
    return tuple((str(name), str(value)) for name, value in headers)


class SignableRequest(namedtuple('SignableRequest',
                                 'method endpoint headers payload')):
    """
    An outgoing HTTP request.

    method   -- HTTP method, stored upper case
    endpoint -- full URL including any query string
    headers  -- tuple of (name, value) pairs; names may repeat
    payload  -- Payload instance or None

    """

    __slots__ = ()

    def __new__(cls, method, endpoint, headers=None, payload=None):
        return super().__new__(cls, method.upper(), endpoint,
                               _header_items(headers), payload)

    @property
    def url(self):
        return urlsplit(self.endpoint)

    @property
    def host(self):
        return self.url.hostname

    def get_headers(self, name):
        name = name.lower()
        return [v for k, v in self.headers if k.lower() == name]

    def get_first_header(self, name, default=None):
        values = self.get_headers(name)
        return values[0] if values else default

    def has_header(self, name):
        return bool(self.get_headers(name))

    def without_headers(self, *names):
        names = {n.lower() for n in names}
        headers = [(k, v) for k, v in self.headers if k.lower() not in names]
        return self._replace(headers=tuple(headers))

    def with_header(self, name, value):
        """Replace all values of header name with value."""
        req = self.without_headers(name)
        return req._replace(headers=req.headers + ((name, str(value)),))

    def with_endpoint(self, endpoint):
        return self._replace(endpoint=endpoint)

    def with_payload(self, payload):
        return self._replace(payload=payload)

    def with_query_param(self, name, value):
        """
        Replace all values of query parameter name with value, appending
        it to the end of the query string.

        """
        url = self.url
        params = [p for p in url.query.split('&')
                  if p and unquote_plus(p.split('=', 1)[0]) != name]
        params.append('{}={}'.format(quote(name, safe=UNRESERVED),
                                     quote(str(value), safe=UNRESERVED)))
        query = '&'.join(params)
        endpoint = urlunsplit((url.scheme, url.netloc, url.path, query,
                               url.fragment))
        return self.with_endpoint(endpoint)


class Payload:
    """
    Base class for request bodies.

    Attributes:
    content_length   -- body length in bytes, or None if unknown
    content_type     -- media type, or None
    content_md5      -- MD5 digest of the body as bytes, or None
    content_encoding -- e.g. gzip, or None

    """

    def __init__(self, content_length=None, content_type=None,
                 content_md5=None, content_encoding=None):
        self.content_length = content_length
        self.content_type = content_type
        self.content_md5 = content_md5
        self.content_encoding = content_encoding

    @property
    def is_repeatable(self):
        return False

    def open_stream(self):
        raise NotImplementedError

    def close_or_reset(self, stream):
        """
        Release a stream returned by open_stream() after it has been read
        for hashing, leaving the payload ready to be sent.

        """
        raise NotImplementedError


class BytesPayload(Payload):
    """In-memory body. str data is encoded as UTF-8."""

    def __init__(self, data, content_type=None, content_md5=None,
                 content_encoding=None):
        if isinstance(data, str):
            data = data.encode('utf-8')
        self.data = data
        super().__init__(len(data), content_type, content_md5,
                         content_encoding)

    @property
    def is_repeatable(self):
        return True

    def open_stream(self):
        return io.BytesIO(self.data)

    def close_or_reset(self, stream):
        stream.close()


class StreamPayload(Payload):
    """
    Body read from a binary file object.

    The payload is repeatable if the file object is seekable, in which case
    it is rewound to its position at construction after every read for
    hashing. Pass repeatable=False to force single pass handling of a
    seekable stream.

    """

    def __init__(self, stream, content_length=None, content_type=None,
                 content_md5=None, content_encoding=None, repeatable=None):
        self.stream = stream
        seekable = getattr(stream, 'seekable', None)
        seekable = bool(seekable and seekable())
        if repeatable is None:
            repeatable = seekable
        self._repeatable = repeatable
        self._start = stream.tell() if seekable else None
        super().__init__(content_length, content_type, content_md5,
                         content_encoding)

    @property
    def is_repeatable(self):
        return self._repeatable

    def open_stream(self):
        return self.stream

    def close_or_reset(self, stream):
        if self._start is None:
            raise SigningError('unable to reset unrepeatable payload stream '
                               'after calculating AWS4 signature.',
                               STREAM_RESET)
        try:
            stream.seek(self._start)
        except (OSError, ValueError) as e:
            raise SigningError('unable to reset unrepeatable payload stream '
                               'after calculating AWS4 signature.',
                               STREAM_RESET) from e


class IteratorStream(io.RawIOBase):
    """
    Read-only, non-seekable binary stream over an iterable of bytes chunks,
    such as a generator body passed to Requests.

    """

    def __init__(self, iterable):
        super().__init__()
        self._iter = iter(iterable)
        self._leftover = b''

    def readable(self):
        return True

    def readinto(self, buf):
        while not self._leftover:
            try:
                chunk = next(self._iter)
            except StopIteration:
                return 0
            if isinstance(chunk, str):
                chunk = chunk.encode('utf-8')
            self._leftover = chunk
        size = min(len(buf), len(self._leftover))
        buf[:size] = self._leftover[:size]
        self._leftover = self._leftover[size:]
        return size
