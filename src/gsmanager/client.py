'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

from datetime import datetime, timedelta
import logging
from urllib.parse import urlparse
from xml.etree.ElementTree import XML
from xml.parsers.expat import ExpatError

import httplib2

from gsmanager.exceptions import FailedRequestError
from gsmanager.support import as_text, url

logger = logging.getLogger("gsmanager.client")

CACHE_TTL = timedelta(seconds=5)


class RESTClient(object):
    """
    Authenticated access to a GeoServer REST endpoint.

    ``service_url`` is the REST root, e.g. ``http://localhost:8080/geoserver/rest``.
    GET responses parsed through ``get_xml`` are cached for a few seconds;
    any other request clears the cache, so a reader sharing this client
    always sees the effect of a publisher's writes.
    """

    def __init__(self, service_url, username="admin", password="geoserver",
                 disable_ssl_certificate_validation=False, timeout=None, http=None):
        self.service_url = service_url
        if self.service_url.endswith("/"):
            self.service_url = self.service_url.rstrip("/")
        self.username = username
        self.password = password
        self.disable_ssl_cert_validation = disable_ssl_certificate_validation
        self.timeout = timeout
        self.http = http
        if self.http is None:
            self.setup_connection()

        self._cache = dict()

    def __getstate__(self):
        '''http connection cannot be pickled'''
        state = dict(vars(self))
        state['http'] = None
        return state

    def __setstate__(self, state):
        '''restore http connection upon unpickling'''
        self.__dict__.update(state)
        self.setup_connection()

    def setup_connection(self):
        self.http = httplib2.Http(
            timeout=self.timeout,
            disable_ssl_certificate_validation=self.disable_ssl_cert_validation)
        self.http.add_credentials(self.username, self.password)
        netloc = urlparse(self.service_url).netloc
        # send credentials up front instead of waiting for a 401 challenge
        self.http.authorizations.append(
            httplib2.BasicAuthentication(
                (self.username, self.password),
                netloc,
                self.service_url,
                {},
                None,
                None,
                self.http
            ))

    def rest_url(self, *segments, **query):
        return url(self.service_url, list(segments), query or None)

    def request(self, rest_url, method="GET", body=None, headers=None):
        logger.debug("%s %s", method, rest_url)
        try:
            response, content = self.http.request(rest_url, method, body, headers or {})
        except (httplib2.HttpLib2Error, OSError) as e:
            raise FailedRequestError("Unable to reach GeoServer for [%s %s]: %s" % (method, rest_url, e))
        finally:
            if method != "GET":
                self._cache.clear()
        return response, content

    def get_xml(self, rest_url):
        cached_response = self._cache.get(rest_url)

        def is_valid(cached_response):
            return cached_response is not None and datetime.now() - cached_response[0] < CACHE_TTL

        def parse_or_raise(xml):
            try:
                return XML(xml)
            except (ExpatError, SyntaxError) as e:
                msg = "GeoServer gave non-XML response for [GET %s]: %s"
                msg = msg % (rest_url, as_text(xml))
                raise FailedRequestError(msg, e)

        if is_valid(cached_response):
            logger.debug("GET %s (cached)", rest_url)
            return parse_or_raise(cached_response[1])
        response, content = self.request(rest_url)
        if response.status == 200:
            self._cache[rest_url] = (datetime.now(), content)
            return parse_or_raise(content)
        else:
            raise FailedRequestError("Tried to make a GET request to %s but got a %d status code: \n%s" % (
                rest_url, response.status, as_text(content)))

    def exists(self, rest_url):
        response, content = self.request(rest_url)
        return response.status == 200

    def clear_cache(self):
        self._cache.clear()
