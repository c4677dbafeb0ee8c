'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import os

DEFAULT_SERVICE_URL = "http://localhost:8080/geoserver/rest"
DEFAULT_USER = "admin"
DEFAULT_PASSWORD = "geoserver"


def _flag(value):
    return value is not None and value.strip().lower() in ("1", "true", "yes", "on")


def from_env():
    """Connection settings read from the GEOSERVER_* environment variables."""
    timeout = os.getenv('GEOSERVER_TIMEOUT')
    return dict(
        service_url=os.getenv('GEOSERVER_REST_URL', DEFAULT_SERVICE_URL),
        username=os.getenv('GEOSERVER_USER', DEFAULT_USER),
        password=os.getenv('GEOSERVER_PASSWORD', DEFAULT_PASSWORD),
        disable_ssl_certificate_validation=_flag(os.getenv('GEOSERVER_DISABLE_SSL_VALIDATION')),
        timeout=float(timeout) if timeout else None,
    )
