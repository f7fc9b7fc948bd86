"""
Provides AWS4SigningKey class for generating Amazon Web Services
authentication version 4 signing keys.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from datetime import datetime, timezone

from .digest import hmac_sha256


class AWS4SigningKey:
    """
    AWS signing key. Used to sign AWS authentication strings.

    The secret key is not stored in the object after instantiation.

    Methods:
    generate_key() -- Generate AWS4 Signing Key bytes.
    sign_sha256()  -- Generate SHA256 HMAC signature, encoding message to bytes
                      if required.

    Attributes:
    region   -- AWS region the key is scoped for
    service  -- AWS service the key is scoped for
    amz_date -- Date the key is scoped for
    scope    -- The AWS credential scope string for this key, calculated
                from the above attributes.
    key      -- The signing key itself, as bytes

    """

    def __init__(self, secret_key, region, service, date=None):
        """
        >>> AWS4SigningKey(secret_key, region, service[, date])

        secret_key -- This is your AWS secret access key
        region     -- The region you're connecting to, e.g. us-east-1.
        service    -- The name of the service you're connecting to, e.g. s3.
        date       -- 8-digit date of the form YYYYMMDD. Signing keys are
                      valid for 7 days from this date. If date is not
                      supplied the current UTC date is used.

        """
        self.region = region
        self.service = service
        self.amz_date = date or datetime.now(timezone.utc).strftime('%Y%m%d')
        self.scope = credential_scope(self.amz_date, self.region,
                                      self.service)
        self.key = self.generate_key(secret_key, self.region,
                                     self.service, self.amz_date)

    @classmethod
    def generate_key(cls, secret_key, region, service, amz_date,
                     intermediate=False):
        """
        Generate the signing key as bytes.

        If intermediate is set to True, returns a 4-tuple containing the key
        and the intermediate keys:

        ( signing_key, date_key, region_key, service_key )

        The intermediate keys can be used for testing against examples from
        Amazon.

        """
        init_key = ('AWS4' + secret_key).encode('utf-8')
        date_key = cls.sign_sha256(init_key, amz_date)
        region_key = cls.sign_sha256(date_key, region)
        service_key = cls.sign_sha256(region_key, service)
        key = cls.sign_sha256(service_key, 'aws4_request')
        if intermediate:
            return (key, date_key, region_key, service_key)
        else:
            return key

    @staticmethod
    def sign_sha256(key, msg):
        """
        Generate an SHA256 HMAC, encoding msg to UTF-8 if not
        already encoded.

        key -- signing key. bytes.
        msg -- message to sign. str or bytes.

        """
        return hmac_sha256(key, msg)


def credential_scope(datestamp, region, service):
    return '/'.join([datestamp, region, service, 'aws4_request'])
