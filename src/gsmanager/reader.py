'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import logging

from gsmanager.decoder import names, RESTLayer, RESTStyle, RESTDataStore, \
    RESTFeatureType
from gsmanager.exceptions import FailedRequestError
from gsmanager.sld import decode_sld
from gsmanager.support import qualified_name

logger = logging.getLogger("gsmanager.reader")


class GeoServerRESTReader(object):
    """
    Read-only queries against the GeoServer REST API.

    Lookups of a single object return None when it does not exist, listings
    return None when the server could not be asked, and ``exists_*`` checks
    answer False in both cases. Nothing here raises for HTTP failures.
    """

    def __init__(self, client):
        self.client = client

    def _styles_path(self, workspace):
        if workspace is None:
            return ["styles"]
        return ["workspaces", workspace, "styles"]

    def _fetch(self, rest_url):
        try:
            return self.client.get_xml(rest_url)
        except FailedRequestError as e:
            logger.debug("%s", e)
            return None

    def _exists(self, rest_url):
        try:
            return self.client.exists(rest_url)
        except FailedRequestError as e:
            logger.warning("%s", e)
            return False

    def _list(self, rest_url, tag):
        dom = self._fetch(rest_url)
        if dom is None:
            logger.warning("Unable to list %ss from %s", tag, rest_url)
            return None
        return names(dom, tag)

    # server

    def exists_geoserver(self):
        return self._exists(self.client.rest_url("about", "version.xml"))

    def get_version(self):
        '''GeoServer version string, None if the server could not tell'''
        dom = self._fetch(self.client.rest_url("about", "version.xml"))
        if dom is None:
            return None
        for resource in dom.findall("resource"):
            if resource.get("name") == "GeoServer":
                version = resource.find("Version")
                if version is not None:
                    return version.text
        return None

    # styles

    def get_styles(self, workspace=None):
        path = self._styles_path(workspace)
        path[-1] += ".xml"
        return self._list(self.client.rest_url(*path), "style")

    def get_style(self, name, workspace=None):
        if workspace is None and ':' in name:
            workspace, name = name.split(':', 1)
        path = self._styles_path(workspace) + [name + ".xml"]
        dom = self._fetch(self.client.rest_url(*path))
        return RESTStyle(dom) if dom is not None else None

    def exists_style(self, name, workspace=None):
        if workspace is None and ':' in name:
            workspace, name = name.split(':', 1)
        path = self._styles_path(workspace) + [name + ".xml"]
        return self._exists(self.client.rest_url(*path))

    def get_sld(self, name, workspace=None):
        """SLD document of a style as text, None when the style does not exist.

        The body is decoded with the encoding its XML declaration names.
        """
        if workspace is None and ':' in name:
            workspace, name = name.split(':', 1)
        path = self._styles_path(workspace) + [name + ".sld"]
        rest_url = self.client.rest_url(*path)
        try:
            response, content = self.client.request(rest_url)
        except FailedRequestError as e:
            logger.warning("%s", e)
            return None
        if response.status != 200:
            logger.debug("No SLD for style %s (%d)", name, response.status)
            return None
        return decode_sld(content)

    # layers

    def get_layers(self):
        return self._list(self.client.rest_url("layers.xml"), "layer")

    def get_layer(self, name, workspace=None):
        rest_url = self.client.rest_url("layers", qualified_name(name, workspace) + ".xml")
        dom = self._fetch(rest_url)
        return RESTLayer(dom) if dom is not None else None

    def exists_layer(self, name, workspace=None):
        rest_url = self.client.rest_url("layers", qualified_name(name, workspace) + ".xml")
        return self._exists(rest_url)

    def get_feature_type(self, layer):
        """Feature type a layer publishes, following the layer's resource link."""
        if layer is None or layer.resource_href is None:
            return None
        dom = self._fetch(layer.resource_href)
        return RESTFeatureType(dom) if dom is not None else None

    # workspaces

    def get_workspace_names(self):
        return self._list(self.client.rest_url("workspaces.xml"), "workspace")

    def exists_workspace(self, name):
        return self._exists(self.client.rest_url("workspaces", name + ".xml"))

    # datastores

    def get_datastores(self, workspace):
        rest_url = self.client.rest_url("workspaces", workspace, "datastores.xml")
        return self._list(rest_url, "dataStore")

    def get_datastore(self, workspace, name):
        rest_url = self.client.rest_url("workspaces", workspace, "datastores", name + ".xml")
        dom = self._fetch(rest_url)
        return RESTDataStore(dom) if dom is not None else None

    def exists_datastore(self, workspace, name):
        rest_url = self.client.rest_url("workspaces", workspace, "datastores", name + ".xml")
        return self._exists(rest_url)
