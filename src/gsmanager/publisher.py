'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import logging
import os

from gsmanager.encoder import FeatureTypeEncoder, LayerEncoder, \
    NamespaceEncoder, WorkspaceEncoder
from gsmanager.exceptions import FailedRequestError, UploadError
from gsmanager.reader import GeoServerRESTReader
from gsmanager.sld import CONTENT_TYPES, encode_sld, style_name
from gsmanager.support import as_text, qualified_name
from gsmanager.util import prepare_upload_bundle, shapefile_names

logger = logging.getLogger("gsmanager.publisher")


def _read(sld):
    if getattr(sld, 'read', None) is not None:
        sld = sld.read()
    return encode_sld(sld)


def _split_style(name, workspace):
    if workspace is None and ':' in name:
        workspace, name = name.split(':', 1)
    return name, workspace


class GeoServerRESTPublisher(object):
    """
    Mutating operations against the GeoServer REST API.

    Every operation answers True when GeoServer accepted the change and False
    otherwise; the reason for a refusal is logged, never raised.
    """

    def __init__(self, client, reader=None):
        self.client = client
        self.reader = reader
        if self.reader is None:
            self.reader = GeoServerRESTReader(client)

    def _send(self, action, rest_url, method, body=None,
              content_type="application/xml", expected=(200, 201)):
        headers = {
            "Content-type": content_type,
            "Accept": "application/xml"
        }
        try:
            response, content = self.client.request(rest_url, method, body, headers)
        except FailedRequestError as e:
            logger.error("Unable to %s: %s", action, e)
            return False
        if response.status not in expected:
            logger.warning("Unable to %s: GeoServer answered %d to [%s %s]: %s",
                           action, response.status, method, rest_url, as_text(content))
            return False
        logger.info("%s: done", action)
        return True

    def _styles_path(self, workspace):
        if workspace is None:
            return ["styles"]
        return ["workspaces", workspace, "styles"]

    # workspaces

    def create_workspace(self, name, uri=None):
        """Create a workspace; with ``uri`` the matching namespace URI is set too."""
        if uri is None:
            rest_url = self.client.rest_url("workspaces")
            message = WorkspaceEncoder(name).message()
        else:
            rest_url = self.client.rest_url("namespaces")
            message = NamespaceEncoder(name, uri).message()
        return self._send("create workspace %s" % name, rest_url, "POST", message,
                          expected=(201,))

    def remove_workspace(self, name, recurse=False):
        rest_url = self.client.rest_url("workspaces", name,
                                        recurse="true" if recurse else "false")
        return self._send("remove workspace %s" % name, rest_url, "DELETE",
                          expected=(200,))

    # styles

    def publish_style(self, sld, name=None, workspace=None, style_format="sld10"):
        """
        Publish a new style from an SLD document.

        ``sld`` is the document as str or bytes, or an open file. When ``name``
        is omitted it is taken from the document. Publishing never overwrites:
        if the style already exists the call fails, use ``update_style``.
        """
        body = _read(sld)
        if name is None:
            name = style_name(body)
        if name is not None:
            name, workspace = _split_style(name, workspace)
        if name is not None and self.reader.exists_style(name, workspace):
            logger.warning("Unable to publish style: there is already a style named %s",
                           qualified_name(name, workspace))
            return False
        query = {"name": name} if name is not None else {}
        rest_url = self.client.rest_url(*self._styles_path(workspace), **query)
        return self._send("publish style %s" % (name or "(unnamed)"), rest_url, "POST",
                          body, CONTENT_TYPES[style_format], expected=(201,))

    def publish_style_file(self, sld_file, name=None, workspace=None, style_format="sld10"):
        try:
            with open(sld_file, "rb") as f:
                sld = f.read()
        except OSError as e:
            logger.error("Unable to read style file %s: %s", sld_file, e)
            return False
        return self.publish_style(sld, name, workspace, style_format)

    def update_style(self, sld, name, workspace=None, style_format="sld10"):
        """Replace the SLD body of an existing style."""
        body = _read(sld)
        name, workspace = _split_style(name, workspace)
        rest_url = self.client.rest_url(*(self._styles_path(workspace) + [name]))
        return self._send("update style %s" % name, rest_url, "PUT",
                          body, CONTENT_TYPES[style_format], expected=(200,))

    def remove_style(self, name, purge=True, workspace=None):
        """Remove a style; ``purge`` also deletes the SLD file from the data dir."""
        name, workspace = _split_style(name, workspace)
        rest_url = self.client.rest_url(*(self._styles_path(workspace) + [name]),
                                        purge="true" if purge else "false")
        return self._send("remove style %s" % name, rest_url, "DELETE", expected=(200,))

    # layers and datastores

    def publish_shp(self, workspace, store, layer, data, srs="EPSG:4326",
                    default_style=None, charset=None):
        """
        Upload a zipped shapefile into a (possibly new) datastore and
        configure the resulting layer.

        ``data`` is the path of a zip archive, or a dict mapping shapefile
        extensions to paths or file objects which is bundled on the fly. The
        archive must hold ``<layer>.shp``: GeoServer names the feature type
        after it.
        """
        archive = None
        if isinstance(data, dict):
            try:
                archive = data = prepare_upload_bundle(layer, data)
            except OSError as e:
                logger.error("Unable to bundle shapefile %s: %s", layer, e)
                return False
        try:
            contained = shapefile_names(data)
            if layer not in contained:
                logger.warning("Unable to publish shapefile: %s does not contain %s.shp (found %s)",
                               data, layer, ", ".join(contained) or "nothing")
                return False
            if not self._upload_shp(workspace, store, layer, data, charset):
                return False
        finally:
            if archive is not None:
                os.unlink(archive)

        if srs is not None:
            encoder = FeatureTypeEncoder(srs=srs, projection_policy="FORCE_DECLARED")
            encoder.enabled = True
            if not self.configure_feature_type(workspace, store, layer, encoder):
                return False
        if default_style is not None:
            return self.configure_layer(workspace, layer, LayerEncoder(default_style))
        return True

    def _upload_shp(self, workspace, store, layer, archive, charset=None):
        params = {"configure": "first"}
        if charset is not None:
            params["charset"] = charset
        rest_url = self.client.rest_url("workspaces", workspace, "datastores", store, "file.shp", **params)
        action = "upload shapefile %s into %s:%s" % (layer, workspace, store)
        try:
            with open(archive, "rb") as f:
                body = f.read()
            response, content = self.client.request(rest_url, "PUT", body, {
                "Content-type": "application/zip",
                "Accept": "application/xml"
            })
            if response.status not in (200, 201):
                raise UploadError(as_text(content))
        except (OSError, FailedRequestError, UploadError) as e:
            logger.error("Unable to %s: %s", action, e)
            return False
        logger.info("%s: done", action)
        return True

    def configure_feature_type(self, workspace, store, name, encoder):
        rest_url = self.client.rest_url("workspaces", workspace, "datastores", store,
                                        "featuretypes", name + ".xml")
        return self._send("configure feature type %s" % qualified_name(name, workspace),
                          rest_url, "PUT", encoder.message(), expected=(200,))

    def configure_layer(self, workspace, name, encoder):
        """Apply the fields set on a LayerEncoder to an existing layer."""
        fqn = qualified_name(name, workspace)
        rest_url = self.client.rest_url("layers", fqn + ".xml")
        return self._send("configure layer %s" % fqn, rest_url, "PUT",
                          encoder.message(), expected=(200,))

    def remove_layer(self, workspace, name):
        """Remove a layer together with the resource it publishes."""
        fqn = qualified_name(name, workspace)
        rest_url = self.client.rest_url("layers", fqn + ".xml", recurse="true")
        return self._send("remove layer %s" % fqn, rest_url, "DELETE", expected=(200,))

    def remove_datastore(self, workspace, store, recurse=False):
        """Remove a datastore; ``recurse`` also removes the layers it holds."""
        rest_url = self.client.rest_url("workspaces", workspace, "datastores", store,
                                        recurse="true" if recurse else "false")
        return self._send("remove datastore %s:%s" % (workspace, store), rest_url, "DELETE",
                          expected=(200,))

    # catalog

    def reload(self):
        return self._send("reload the catalog", self.client.rest_url("reload"), "POST",
                          expected=(200,))

    def reset(self):
        return self._send("reset the resource caches", self.client.rest_url("reset"), "POST",
                          expected=(200,))
