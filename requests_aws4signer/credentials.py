"""
Credentials and the suppliers the signers fetch them from.

A credentials supplier is any callable taking no arguments and returning a
Credentials instance. Signers call it once per signing operation so that
rotated credentials are picked up without rebuilding the signer.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import os

from .exceptions import SigningPreconditionError


class Credentials:
    """
    AWS access key pair, plus session token for temporary credentials.

    Attributes:
    access_id     -- the access key ID, e.g. AKIDEXAMPLE
    secret_key    -- the secret access key
    session_token -- the session token, or None for long-term credentials

    """

    __slots__ = ('access_id', 'secret_key', 'session_token')

    def __init__(self, access_id, secret_key, session_token=None):
        object.__setattr__(self, 'access_id', access_id)
        object.__setattr__(self, 'secret_key', secret_key)
        object.__setattr__(self, 'session_token', session_token)

    def __setattr__(self, name, value):
        raise AttributeError('Credentials are immutable')

    def __eq__(self, other):
        if not isinstance(other, Credentials):
            return NotImplemented
        return (self.access_id, self.secret_key, self.session_token) == \
            (other.access_id, other.secret_key, other.session_token)

    def __hash__(self):
        return hash((self.access_id, self.secret_key, self.session_token))

    def __repr__(self):
        # never show the secret
        return 'Credentials(access_id={!r}, session_token={})'.format(
            self.access_id, 'set' if self.session_token else None)


class StaticCredentialsProvider:
    """Always supplies the same Credentials."""

    def __init__(self, credentials):
        self.credentials = credentials

    def __call__(self):
        return self.credentials


class EnvironmentCredentialsProvider:
    """
    Supplies Credentials read from the environment on every call.

    Reads AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and, if set,
    AWS_SESSION_TOKEN.

    """

    access_id_var = 'AWS_ACCESS_KEY_ID'
    secret_key_var = 'AWS_SECRET_ACCESS_KEY'
    session_token_var = 'AWS_SESSION_TOKEN'

    def __init__(self, environ=None):
        self.environ = os.environ if environ is None else environ

    def __call__(self):
        access_id = self.environ.get(self.access_id_var)
        secret_key = self.environ.get(self.secret_key_var)
        if not access_id or not secret_key:
            raise SigningPreconditionError(
                '{} and {} must be set'.format(self.access_id_var,
                                               self.secret_key_var))
        token = self.environ.get(self.session_token_var) or None
        return Credentials(access_id, secret_key, token)


def as_credentials_supplier(credentials):
    """
    Return a credentials supplier for credentials, which may be a
    Credentials instance or already a supplier.

    """
    if isinstance(credentials, Credentials):
        return StaticCredentialsProvider(credentials)
    if callable(credentials):
        return credentials
    raise TypeError('expected Credentials or a callable returning '
                    'Credentials, got {!r}'.format(type(credentials)))
