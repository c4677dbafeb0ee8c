'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

from urllib.parse import quote, urlencode
from xml.etree.ElementTree import TreeBuilder, tostring


def url(base, seg, query=None):
    """
    Given a base URL and a list of unquoted path segments, return a URL with
    the segments quoted and joined to the base, plus an optional query string
    built from the ``query`` dict.

    >>> url("http://localhost:8080/geoserver/rest", ["styles", "my style.xml"])
    'http://localhost:8080/geoserver/rest/styles/my%20style.xml'
    """
    def clean_segment(segment):
        return segment.strip('/')

    seg = (quote(clean_segment(s), safe='') for s in seg)
    if query is None or len(query) == 0:
        query_string = ''
    else:
        query_string = "?" + urlencode(query)
    path = '/'.join(seg)
    if path:
        return '/'.join([base, path]) + query_string
    else:
        return base + query_string


def as_text(content):
    """Response body as text, for messages and logs."""
    if isinstance(content, bytes):
        return content.decode("utf-8", "replace")
    return content


def qualified_name(name, workspace=None):
    """Prefix ``name`` with ``workspace:`` when a workspace is given."""
    if workspace is None:
        return name
    return "%s:%s" % (workspace, name)


def xml_property(path, converter=lambda x: x.text, default=None):
    def getter(self):
        if path in self.dirty:
            return self.dirty[path]
        if self.dom is None:
            return default
        node = self.dom.find(path)
        return converter(node) if node is not None else default

    def setter(self, value):
        self.dirty[path] = value

    def delete(self):
        self.dirty[path] = None

    return property(getter, setter, delete)


def bbox(node):
    if node is not None:
        minx = node.find("minx")
        maxx = node.find("maxx")
        miny = node.find("miny")
        maxy = node.find("maxy")
        crs = node.find("crs")
        crs = crs.text if crs is not None else None
        return (minx.text, maxx.text, miny.text, maxy.text, crs)
    else:
        return None


def read_bool(node):
    return node.text is not None and node.text.strip().lower() == "true"


def string_list(node):
    if node is not None:
        return [n.text for n in node if n.text is not None]


def key_value_pairs(node):
    if node is not None:
        return dict((entry.attrib['key'], entry.text) for entry in node.findall("entry"))


def write_string(name):
    def write(builder, value):
        builder.start(name, dict())
        if value is not None:
            builder.data(value)
        builder.end(name)
    return write


def write_bool(name):
    def write(builder, b):
        builder.start(name, dict())
        builder.data("true" if b else "false")
        builder.end(name)
    return write


def write_string_list(name, item="string"):
    def write(builder, words):
        builder.start(name, dict())
        for w in words or []:
            builder.start(item, dict())
            builder.data(w)
            builder.end(item)
        builder.end(name)
    return write


class ResourceInfo(object):
    """
    Base for every XML document exchanged with the REST API.

    A ResourceInfo either wraps a parsed response (``dom``) or starts empty
    and collects assignments in ``dirty``. Only the dirty fields that have a
    matching entry in ``writers`` end up in ``message()``, so an encoder sends
    a partial update that leaves the rest of the server-side object alone.
    """

    resource_type = None
    writers = dict()

    def __init__(self, dom=None):
        self.dom = dom
        self.dirty = dict()

    def serialize(self, builder):
        for k, writer in self.writers.items():
            if k in self.dirty:
                writer(builder, self.dirty[k])

    def message(self):
        builder = TreeBuilder()
        builder.start(self.resource_type, dict())
        self.serialize(builder)
        builder.end(self.resource_type)
        msg = tostring(builder.close(), encoding="unicode")
        return msg
