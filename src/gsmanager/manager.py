'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

from gsmanager import config
from gsmanager.client import RESTClient
from gsmanager.publisher import GeoServerRESTPublisher
from gsmanager.reader import GeoServerRESTReader


class GeoServerManager(object):
    """
    Entry point bundling a reader and a publisher over one connection.

    >>> manager = GeoServerManager("http://localhost:8080/geoserver/rest")
    >>> manager.publisher.publish_style_file("restteststyle.sld")  # doctest: +SKIP
    True
    """

    def __init__(self, service_url, username="admin", password="geoserver",
                 disable_ssl_certificate_validation=False, timeout=None, http=None):
        self.client = RESTClient(service_url, username, password,
                                 disable_ssl_certificate_validation=disable_ssl_certificate_validation,
                                 timeout=timeout, http=http)
        self.reader = GeoServerRESTReader(self.client)
        self.publisher = GeoServerRESTPublisher(self.client, self.reader)

    @classmethod
    def from_env(cls, http=None):
        return cls(http=http, **config.from_env())

    @property
    def service_url(self):
        return self.client.service_url
