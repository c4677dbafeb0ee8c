'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

from gsmanager.support import ResourceInfo, xml_property, read_bool, \
    string_list, key_value_pairs, bbox

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"


def names(dom, tag):
    """Names listed in a REST collection, e.g. ``names(dom, "style")``."""
    if dom is None:
        return []
    result = []
    for node in dom.findall(tag):
        name = node.find("name")
        if name is not None and name.text is not None:
            result.append(name.text)
    return result


def _href(node):
    if node is None:
        return None
    link = node.find("{%s}link" % ATOM_NAMESPACE)
    return link.get("href") if link is not None else None


def _name_of(node):
    name = node.find("name")
    return name.text if name is not None else None


def _style_workspace(node):
    workspace = node.find("workspace")
    return workspace.text if workspace is not None else None


def _style_list(node):
    styles = []
    for style in node.findall("style"):
        name = _name_of(style)
        if name is None:
            continue
        workspace = _style_workspace(style)
        if workspace is not None and ':' not in name:
            name = "%s:%s" % (workspace, name)
        styles.append(name)
    return styles


class RESTLayer(ResourceInfo):
    resource_type = "layer"

    name = xml_property("name")
    type = xml_property("type")
    path = xml_property("path")
    enabled = xml_property("enabled", read_bool)
    queryable = xml_property("queryable", read_bool)
    advertised = xml_property("advertised", read_bool)
    default_style = xml_property("defaultStyle", _name_of)
    default_style_workspace = xml_property("defaultStyle", _style_workspace)
    styles = xml_property("styles", _style_list, default=[])
    resource_name = xml_property("resource", _name_of)
    resource_href = xml_property("resource", _href)

    def __repr__(self):
        return "RESTLayer(%s, default_style=%s)" % (self.name, self.default_style)


class RESTStyle(ResourceInfo):
    resource_type = "style"

    name = xml_property("name")
    filename = xml_property("filename")
    format = xml_property("format")
    language_version = xml_property("languageVersion/version")
    workspace = xml_property("workspace/name")

    @property
    def fqn(self):
        return self.name if not self.workspace else '%s:%s' % (self.workspace, self.name)


class RESTDataStore(ResourceInfo):
    resource_type = "dataStore"

    name = xml_property("name")
    type = xml_property("type")
    description = xml_property("description")
    enabled = xml_property("enabled", read_bool)
    workspace = xml_property("workspace/name")
    connection_parameters = xml_property("connectionParameters", key_value_pairs, default={})


class RESTFeatureType(ResourceInfo):
    resource_type = "featureType"

    name = xml_property("name")
    native_name = xml_property("nativeName")
    title = xml_property("title")
    abstract = xml_property("abstract")
    srs = xml_property("srs")
    projection_policy = xml_property("projectionPolicy")
    enabled = xml_property("enabled", read_bool)
    keywords = xml_property("keywords", string_list, default=[])
    native_bbox = xml_property("nativeBoundingBox", bbox)
    latlon_bbox = xml_property("latLonBoundingBox", bbox)
    store = xml_property("store", _name_of)
