'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

from gsmanager.support import ResourceInfo, xml_property, write_bool, \
    write_string, write_string_list

PROJECTION_POLICIES = ("FORCE_DECLARED", "REPROJECT_TO_DECLARED", "NONE")


def _write_style_ref(builder, name, workspace=None):
    builder.start("name", dict())
    builder.data(name)
    builder.end("name")
    if workspace is not None:
        builder.start("workspace", dict())
        builder.data(workspace)
        builder.end("workspace")


def write_default_style(builder, value):
    name, workspace = value
    builder.start("defaultStyle", dict())
    if name is not None:
        _write_style_ref(builder, name, workspace)
    builder.end("defaultStyle")


def write_styles(builder, styles):
    builder.start("styles", dict())
    for style in styles or []:
        if ':' in style:
            workspace, style = style.split(':', 1)
        else:
            workspace = None
        builder.start("style", dict())
        _write_style_ref(builder, style, workspace)
        builder.end("style")
    builder.end("styles")


class LayerEncoder(ResourceInfo):
    """
    Partial update for a published layer, sent by
    ``GeoServerRESTPublisher.configure_layer``.

    >>> le = LayerEncoder()
    >>> le.default_style = "restteststyle2"
    >>> le.message()
    '<layer><defaultStyle><name>restteststyle2</name></defaultStyle></layer>'
    """
    resource_type = "layer"

    path = xml_property("path")
    enabled = xml_property("enabled")
    queryable = xml_property("queryable")
    advertised = xml_property("advertised")
    styles = xml_property("styles")

    def __init__(self, default_style=None, default_style_workspace=None):
        super(LayerEncoder, self).__init__()
        if default_style is not None:
            self.set_default_style(default_style, default_style_workspace)

    def set_default_style(self, name, workspace=None):
        if name is not None and ':' in name and workspace is None:
            workspace, name = name.split(':', 1)
        self.dirty['defaultStyle'] = (name, workspace)

    def _get_default_style(self):
        name, workspace = self.dirty.get('defaultStyle', (None, None))
        return name if workspace is None else '%s:%s' % (workspace, name)

    default_style = property(_get_default_style, set_default_style)

    writers = {
        'path': write_string("path"),
        'defaultStyle': write_default_style,
        'styles': write_styles,
        'enabled': write_bool("enabled"),
        'queryable': write_bool("queryable"),
        'advertised': write_bool("advertised"),
    }


class FeatureTypeEncoder(ResourceInfo):
    resource_type = "featureType"

    name = xml_property("name")
    native_name = xml_property("nativeName")
    title = xml_property("title")
    abstract = xml_property("abstract")
    srs = xml_property("srs")
    native_crs = xml_property("nativeCRS")
    enabled = xml_property("enabled")
    keywords = xml_property("keywords")

    def __init__(self, name=None, srs=None, projection_policy=None):
        super(FeatureTypeEncoder, self).__init__()
        if name is not None:
            self.name = name
        if srs is not None:
            self.srs = srs
        if projection_policy is not None:
            self.projection_policy = projection_policy

    def _get_projection_policy(self):
        return self.dirty.get('projectionPolicy')

    def _set_projection_policy(self, policy):
        if policy not in PROJECTION_POLICIES:
            raise ValueError("Unknown projection policy %r, expected one of %s" % (
                policy, ", ".join(PROJECTION_POLICIES)))
        self.dirty['projectionPolicy'] = policy

    projection_policy = property(_get_projection_policy, _set_projection_policy)

    writers = {
        'name': write_string("name"),
        'nativeName': write_string("nativeName"),
        'title': write_string("title"),
        'abstract': write_string("abstract"),
        'srs': write_string("srs"),
        'nativeCRS': write_string("nativeCRS"),
        'projectionPolicy': write_string("projectionPolicy"),
        'enabled': write_bool("enabled"),
        'keywords': write_string_list("keywords"),
    }


class WorkspaceEncoder(ResourceInfo):
    resource_type = "workspace"

    name = xml_property("name")

    def __init__(self, name):
        super(WorkspaceEncoder, self).__init__()
        self.name = name

    writers = {
        'name': write_string("name"),
    }


class NamespaceEncoder(ResourceInfo):
    resource_type = "namespace"

    prefix = xml_property("prefix")
    uri = xml_property("uri")

    def __init__(self, prefix, uri):
        super(NamespaceEncoder, self).__init__()
        self.prefix = prefix
        self.uri = uri

    writers = {
        'prefix': write_string("prefix"),
        'uri': write_string("uri"),
    }
