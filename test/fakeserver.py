"""
In-memory stand-in for the GeoServer REST API.

FakeGeoServer answers ``request(uri, method, body, headers)`` the way
``httplib2.Http`` does, so it can be handed to a RESTClient in place of a
real connection. It keeps just enough catalog state (workspaces, datastores,
feature types, layers, styles) to play the publish/read scenarios.
"""
import io
import zipfile
from urllib.parse import urlsplit, unquote, parse_qsl
from xml.etree.ElementTree import XML
from xml.sax.saxutils import escape, quoteattr

import httplib2

from gsmanager.sld import style_name

SERVICE_URL = "http://fake.geoserver:8080/geoserver/rest"
ATOM = "http://www.w3.org/2005/Atom"

DEFAULT_SLD = """<?xml version="1.0" encoding="UTF-8"?>
<StyledLayerDescriptor version="1.0.0" xmlns="http://www.opengis.net/sld">
  <NamedLayer>
    <Name>%(name)s</Name>
    <UserStyle>
      <Name>%(name)s</Name>
      <Title>Default %(name)s style</Title>
    </UserStyle>
  </NamedLayer>
</StyledLayerDescriptor>
"""


def _text(dom, path):
    node = dom.find(path)
    return node.text if node is not None else None


def _bool(value):
    return "true" if value else "false"


class FakeGeoServer(object):

    def __init__(self, service_url=SERVICE_URL, version="2.9.1",
                 styles=("point", "line", "polygon")):
        self.service_url = service_url
        self.version = version
        self.down = False
        self.requests = []
        # name -> uri
        self.workspaces = {}
        # (workspace, store) -> dict
        self.datastores = {}
        # (workspace, name) -> dict; feature type and layer share a name
        self.layers = {}
        # (workspace or None, name) -> sld text
        self.styles = {}
        for name in styles:
            self.styles[(None, name)] = DEFAULT_SLD % {"name": name}

    # httplib2.Http protocol

    def request(self, uri, method="GET", body=None, headers=None,
                redirections=5, connection_type=None):
        self.requests.append((method, uri, body, headers or {}))
        if self.down:
            raise ConnectionRefusedError(111, "Connection refused")
        parts = urlsplit(uri)
        path = parts.path[len(urlsplit(self.service_url).path):].strip("/")
        segments = [unquote(s) for s in path.split("/")] if path else []
        ext = None
        if segments:
            last, dot, suffix = segments[-1].rpartition(".")
            if dot and suffix in ("xml", "sld", "json"):
                segments[-1], ext = last, suffix
        query = dict(parse_qsl(parts.query))
        status, content = self.dispatch(method, segments, ext, query, body)
        response = httplib2.Response({"status": str(status), "content-type": "application/xml"})
        if isinstance(content, str):
            content = content.encode("utf-8")
        return response, content

    def dispatch(self, method, segments, ext, query, body):
        route = segments[:1]
        if segments == ["about", "version"]:
            return 200, self._version_xml()
        if segments in (["reload"], ["reset"]) and method == "POST":
            return 200, ""
        if route == ["namespaces"] and method == "POST":
            dom = XML(body)
            return self._create_workspace(_text(dom, "prefix"), _text(dom, "uri"))
        if route == ["styles"]:
            return self._styles(method, None, segments[1:], ext, query, body)
        if route == ["layers"]:
            return self._layers(method, segments[1:], query, body)
        if route == ["workspaces"]:
            return self._workspaces(method, segments[1:], ext, query, body)
        return 404, "No such resource: %s" % "/".join(segments)

    # xml

    def _link(self, *segments):
        href = "/".join([self.service_url] + list(segments))
        return '<atom:link xmlns:atom="%s" rel="alternate" href=%s type="application/xml"/>' % (
            ATOM, quoteattr(href))

    def _version_xml(self):
        return ('<about><resource name="GeoServer"><Build-Timestamp>today</Build-Timestamp>'
                '<Version>%s</Version></resource></about>' % escape(self.version))

    def _listing(self, root, tag, names, *prefix):
        items = "".join("<%s><name>%s</name>%s</%s>" % (
            tag, escape(n), self._link(*(list(prefix) + [n + ".xml"])), tag) for n in names)
        return "<%s>%s</%s>" % (root, items, root)

    def _style_ref(self, tag, fqn):
        if ':' in fqn:
            workspace, name = fqn.split(':', 1)
            return "<%s><name>%s</name><workspace>%s</workspace>%s</%s>" % (
                tag, escape(fqn), escape(workspace),
                self._link("workspaces", workspace, "styles", name + ".xml"), tag)
        return "<%s><name>%s</name>%s</%s>" % (tag, escape(fqn), self._link("styles", fqn + ".xml"), tag)

    # styles

    def _styles(self, method, workspace, segments, ext, query, body):
        prefix = ["styles"] if workspace is None else ["workspaces", workspace, "styles"]
        if not segments:
            if method == "GET":
                names = sorted(n for (ws, n) in self.styles if ws == workspace)
                return 200, self._listing("styles", "style", names, *prefix)
            if method == "POST":
                name = query.get("name") or style_name(body)
                if name is None:
                    return 400, "Unable to determine a style name"
                if (workspace, name) in self.styles:
                    return 403, "Style %s already exists." % name
                self.styles[(workspace, name)] = body
                return 201, name
            return 405, ""
        name = segments[0]
        key = (workspace, name)
        if key not in self.styles:
            return 404, "No such style: %s" % name
        if method == "GET":
            if ext == "sld":
                return 200, self.styles[key]
            ws_xml = "" if workspace is None else "<workspace><name>%s</name></workspace>" % escape(workspace)
            return 200, ("<style><name>%s</name>%s<format>sld</format><languageVersion>"
                         "<version>1.0.0</version></languageVersion><filename>%s.sld</filename></style>"
                         % (escape(name), ws_xml, escape(name)))
        if method == "PUT":
            self.styles[key] = body
            return 200, ""
        if method == "DELETE":
            del self.styles[key]
            return 200, ""
        return 405, ""

    # workspaces and stores

    def _create_workspace(self, name, uri=None):
        if name in self.workspaces:
            return 409, "Workspace '%s' already exists" % name
        self.workspaces[name] = uri or "http://%s" % name
        return 201, name

    def _workspaces(self, method, segments, ext, query, body):
        if not segments:
            if method == "GET":
                return 200, self._listing("workspaces", "workspace", sorted(self.workspaces), "workspaces")
            if method == "POST":
                return self._create_workspace(_text(XML(body), "name"))
            return 405, ""
        workspace = segments[0]
        if workspace not in self.workspaces:
            return 404, "No such workspace: '%s' found" % workspace
        rest = segments[1:]
        if rest[:1] == ["styles"]:
            return self._styles(method, workspace, rest[1:], ext, query, body)
        if rest[:1] == ["datastores"]:
            return self._datastores(method, workspace, rest[1:], query, body)
        if rest:
            return 404, ""
        if method == "GET":
            return 200, "<workspace><name>%s</name></workspace>" % escape(workspace)
        if method == "DELETE":
            owned = [k for k in self.datastores if k[0] == workspace]
            owned += [k for k in self.styles if k[0] == workspace]
            if owned and query.get("recurse") != "true":
                return 403, "Workspace '%s' not empty" % workspace
            for key in [k for k in self.layers if k[0] == workspace]:
                del self.layers[key]
            for key in owned:
                self.datastores.pop(key, None)
                self.styles.pop(key, None)
            del self.workspaces[workspace]
            return 200, ""
        return 405, ""

    def _datastores(self, method, workspace, segments, query, body):
        if not segments:
            if method == "GET":
                names = sorted(s for (ws, s) in self.datastores if ws == workspace)
                return 200, self._listing("dataStores", "dataStore", names,
                                          "workspaces", workspace, "datastores")
            return 405, ""
        store = segments[0]
        key = (workspace, store)
        if segments[1:] == ["file.shp"] and method == "PUT":
            return self._upload_shp(workspace, store, query, body)
        if key not in self.datastores:
            return 404, "No such datastore: %s,%s" % key
        if segments[1:2] == ["featuretypes"]:
            return self._featuretypes(method, workspace, store, segments[2:], body)
        if segments[1:]:
            return 404, ""
        if method == "GET":
            return 200, self._datastore_xml(workspace, store)
        if method == "DELETE":
            owned = [k for k, layer in self.layers.items() if k[0] == workspace and layer["store"] == store]
            if owned and query.get("recurse") != "true":
                return 403, "Store '%s' is not empty" % store
            for k in owned:
                del self.layers[k]
            del self.datastores[key]
            return 200, ""
        return 405, ""

    def _datastore_xml(self, workspace, store):
        info = self.datastores[(workspace, store)]
        return ("<dataStore><name>%s</name><type>%s</type><enabled>true</enabled>"
                "<workspace><name>%s</name></workspace><connectionParameters>"
                "<entry key=\"url\">%s</entry><entry key=\"namespace\">%s</entry>"
                "<entry key=\"charset\">%s</entry>"
                "</connectionParameters></dataStore>" % (
                    escape(store), info["type"], escape(workspace), escape(info["url"]),
                    escape(self.workspaces[workspace]), escape(info["charset"])))

    def _upload_shp(self, workspace, store, query, body):
        try:
            with zipfile.ZipFile(io.BytesIO(body)) as archive:
                members = archive.namelist()
        except zipfile.BadZipFile:
            return 400, "Could not find appropriate shapefile in the uploaded archive"
        names = [m[:-4] for m in members if m.lower().endswith(".shp")]
        if not names:
            return 400, "Could not find appropriate shapefile in the uploaded archive"
        self.datastores.setdefault((workspace, store), {
            "type": "Shapefile",
            "url": "file:data/%s/%s/" % (workspace, store),
            "charset": query.get("charset", "ISO-8859-1"),
        })
        for name in names:
            self.layers[(workspace, name)] = {
                "store": store,
                "default_style": "point",
                "styles": [],
                "enabled": True,
                "queryable": True,
                "advertised": True,
                "path": "/",
                "srs": "EPSG:404000",
                "projection_policy": "NONE",
                "title": name,
                "keywords": ["features", name],
            }
        return 201, ""

    def _featuretypes(self, method, workspace, store, segments, body):
        owned = sorted(n for (ws, n), layer in self.layers.items()
                       if ws == workspace and layer["store"] == store)
        if not segments:
            if method == "GET":
                return 200, self._listing("featureTypes", "featureType", owned,
                                          "workspaces", workspace, "datastores", store, "featuretypes")
            return 405, ""
        name = segments[0]
        if name not in owned:
            return 404, "No such feature type: %s,%s,%s" % (workspace, store, name)
        layer = self.layers[(workspace, name)]
        if method == "GET":
            keywords = "".join("<string>%s</string>" % escape(k) for k in layer["keywords"])
            return 200, ("<featureType><name>%s</name><nativeName>%s</nativeName><title>%s</title>"
                         "<keywords>%s</keywords><srs>%s</srs><projectionPolicy>%s</projectionPolicy>"
                         "<latLonBoundingBox><minx>8.9</minx><maxx>14.3</maxx><miny>40.9</miny>"
                         "<maxy>44.4</maxy><crs>EPSG:4326</crs></latLonBoundingBox>"
                         "<enabled>%s</enabled><store class=\"dataStore\"><name>%s:%s</name></store>"
                         "</featureType>" % (
                             escape(name), escape(name), escape(layer["title"]), keywords,
                             escape(layer["srs"]), layer["projection_policy"], _bool(layer["enabled"]),
                             escape(workspace), escape(store)))
        if method == "PUT":
            dom = XML(body)
            for tag, key in (("srs", "srs"), ("projectionPolicy", "projection_policy"), ("title", "title")):
                if dom.find(tag) is not None:
                    layer[key] = dom.find(tag).text
            if dom.find("enabled") is not None:
                layer["enabled"] = dom.find("enabled").text == "true"
            if dom.find("keywords") is not None:
                layer["keywords"] = [k.text for k in dom.find("keywords")]
            return 200, ""
        return 405, ""

    # layers

    def _find_layer(self, fqn):
        if ':' in fqn:
            workspace, name = fqn.split(':', 1)
            return (workspace, name) if (workspace, name) in self.layers else None
        for key in sorted(self.layers):
            if key[1] == fqn:
                return key
        return None

    def _layers(self, method, segments, query, body):
        if not segments:
            if method == "GET":
                return 200, self._listing("layers", "layer", sorted(n for (ws, n) in self.layers), "layers")
            return 405, ""
        key = self._find_layer(segments[0])
        if key is None:
            return 404, "No such layer: %s" % segments[0]
        workspace, name = key
        layer = self.layers[key]
        if method == "GET":
            styles = "".join(self._style_ref("style", s) for s in layer["styles"])
            return 200, ("<layer><name>%s</name><path>%s</path><type>VECTOR</type>%s"
                         "<styles class=\"linked-hash-set\">%s</styles>"
                         "<resource class=\"featureType\"><name>%s:%s</name>%s</resource>"
                         "<enabled>%s</enabled><queryable>%s</queryable><advertised>%s</advertised></layer>" % (
                             escape(name), escape(layer["path"]),
                             self._style_ref("defaultStyle", layer["default_style"]), styles,
                             escape(workspace), escape(name),
                             self._link("workspaces", workspace, "datastores", layer["store"],
                                        "featuretypes", name + ".xml"),
                             _bool(layer["enabled"]), _bool(layer["queryable"]), _bool(layer["advertised"])))
        if method == "PUT":
            return self._configure_layer(layer, XML(body))
        if method == "DELETE":
            del self.layers[key]
            return 200, ""
        return 405, ""

    def _style_key(self, node):
        name = _text(node, "name")
        workspace = _text(node, "workspace")
        if workspace is None and name is not None and ':' in name:
            workspace, name = name.split(':', 1)
        return workspace, name

    def _configure_layer(self, layer, dom):
        default = dom.find("defaultStyle")
        if default is not None:
            key = self._style_key(default)
            if key not in self.styles:
                return 400, "No such style: %s" % key[1]
            layer["default_style"] = key[1] if key[0] is None else "%s:%s" % key
        styles = dom.find("styles")
        if styles is not None:
            refs = [self._style_key(s) for s in styles.findall("style")]
            missing = [r[1] for r in refs if r not in self.styles]
            if missing:
                return 400, "No such style: %s" % ", ".join(missing)
            layer["styles"] = [n if ws is None else "%s:%s" % (ws, n) for ws, n in refs]
        for tag in ("enabled", "queryable", "advertised"):
            if dom.find(tag) is not None:
                layer[tag] = dom.find(tag).text == "true"
        if dom.find("path") is not None:
            layer["path"] = dom.find("path").text
        return 200, ""


class StubHttp(object):
    """Answers every request with the next queued (status, content) pair."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, uri, method="GET", body=None, headers=None,
                redirections=5, connection_type=None):
        self.requests.append((method, uri, body, headers or {}))
        status, content = self.responses.pop(0) if self.responses else (200, "")
        if isinstance(status, Exception):
            raise status
        if isinstance(content, str):
            content = content.encode("utf-8")
        return httplib2.Response({"status": str(status)}), content
