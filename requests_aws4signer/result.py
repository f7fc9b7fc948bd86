"""
Outcome of AWS4RequestSigner.try_sign(): either Signed or Failed.

>>> result = signer.try_sign(request)
>>> if result.ok:
...     send(result.request)
... else:
...     log.error('not sent: %s (%s)', result.error, result.kind)

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from collections import namedtuple


class Signed(namedtuple('Signed', 'request')):
    __slots__ = ()
    ok = True


class Failed(namedtuple('Failed', 'kind error')):
    __slots__ = ()
    ok = False
