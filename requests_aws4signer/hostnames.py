"""
Derive the AWS service and region names a request is scoped to from the
hostname it is sent to.

>>> parse_region_name('bucket.s3-eu-west-1.amazonaws.com', 's3')
'eu-west-1'
>>> parse_service_name('https://ec2.ap-southeast-2.amazonaws.com')
'ec2'

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import re
from urllib.parse import urlsplit

from .exceptions import SigningPreconditionError


DEFAULT_REGION = 'us-east-1'

AWS_DOMAIN_SUFFIXES = ('.amazonaws.com', '.amazonaws.com.cn')

# Legacy endpoints without a region in the name
GLOBAL_ENDPOINT_REGIONS = {
    's3.amazonaws.com': 'us-east-1',
    's3-external-1.amazonaws.com': 'us-east-1',
    'iam.amazonaws.com': 'us-east-1',
    'sts.amazonaws.com': 'us-east-1',
    'route53.amazonaws.com': 'us-east-1',
    'cloudfront.amazonaws.com': 'us-east-1',
    'importexport.amazonaws.com': 'us-east-1',
}

S3_ENDPOINT_PATTERN = re.compile(r'^(?:.+\.)?s3[.-]([a-z0-9-]+)$')
STANDARD_CLOUDSEARCH_ENDPOINT_PATTERN = re.compile(
    r'^(?:.+\.)?([a-z0-9-]+)\.cloudsearch$')
EXTENDED_CLOUDSEARCH_ENDPOINT_PATTERN = re.compile(
    r'^(?:.+\.)?([a-z0-9-]+)\.cloudsearch\..+')


def _strip_aws_suffix(host):
    for suffix in AWS_DOMAIN_SUFFIXES:
        if host.endswith(suffix):
            return host[:-len(suffix)]
    return None


def parse_service_name(endpoint):
    """
    Return the service name for an endpoint URL.

    S3 endpoints, including virtual-hosted bucket forms such as
    bucket.s3-eu-west-1.amazonaws.com, always give 's3'.

    endpoint -- URL string, e.g. https://s3.amazonaws.com

    """
    if not endpoint:
        raise SigningPreconditionError('endpoint is required')
    host = urlsplit(endpoint).hostname
    if not host:
        raise SigningPreconditionError(
            'endpoint has no host: {}'.format(endpoint))
    fragment = _strip_aws_suffix(host)
    if fragment is None:
        raise SigningPreconditionError(
            'Cannot parse a service name from an unrecognized endpoint '
            '({})'.format(host))
    if (fragment == 's3' or fragment.endswith('.s3') or
            S3_ENDPOINT_PATTERN.match(fragment)):
        return 's3'
    return fragment.split('.', 1)[0]


def parse_region_name(host, service_hint=None):
    """
    Return the region name for a hostname.

    Falls back to us-east-1 when nothing in the host identifies a region.

    host         -- hostname without port, e.g. sqs.eu-west-1.amazonaws.com
    service_hint -- service name used to recognise service-[region] and
                    service.[region] forms on non-AWS domains

    """
    if not host:
        raise SigningPreconditionError('host is required')
    host = host.lower()
    if host in GLOBAL_ENDPOINT_REGIONS:
        return GLOBAL_ENDPOINT_REGIONS[host]
    if host.endswith('.amazonaws.com'):
        return _parse_standard_region_name(host[:-len('.amazonaws.com')])
    if service_hint:
        if service_hint == 'cloudsearch' and \
                not host.startswith('cloudsearch.'):
            # [domain].[region].cloudsearch.[suffix]
            match = EXTENDED_CLOUDSEARCH_ENDPOINT_PATTERN.match(host)
            if match:
                return match.group(1)
        pattern = r'^(?:.+\.)?' + re.escape(service_hint) + \
                  r'[.-]([a-z0-9-]+)\.'
        match = re.search(pattern, host)
        if match:
            return match.group(1)
    return DEFAULT_REGION


def _parse_standard_region_name(fragment):
    match = S3_ENDPOINT_PATTERN.match(fragment)
    if match:
        region = match.group(1)
        # s3-external-1 is an alias of the global endpoint
        return DEFAULT_REGION if region == 'external-1' else region
    if fragment == 's3' or fragment.endswith('.s3'):
        # bucket.s3.amazonaws.com
        return DEFAULT_REGION
    match = STANDARD_CLOUDSEARCH_ENDPOINT_PATTERN.match(fragment)
    if match:
        return match.group(1)
    if '.' not in fragment:
        # service.amazonaws.com
        return DEFAULT_REGION
    region = fragment.rsplit('.', 1)[1]
    if region == 'us-gov':
        region = 'us-gov-west-1'
    return region


class AWSServiceAndRegion:
    """
    Service fixed at construction, region derived from each request host.

    >>> AWSServiceAndRegion('https://s3.amazonaws.com').region(
    ...     'bucket.s3.eu-west-1.amazonaws.com')
    'eu-west-1'

    """

    def __init__(self, endpoint=None, service=None):
        if service is None:
            service = parse_service_name(endpoint)
        self._service = service

    def service(self):
        return self._service

    def region(self, host):
        return parse_region_name(host, self._service)


class StaticServiceAndRegion:
    """Service and region fixed at construction, regardless of host."""

    def __init__(self, service, region):
        self._service = service
        self._region = region

    def service(self):
        return self._service

    def region(self, host):
        return self._region
