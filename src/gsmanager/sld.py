'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import codecs
import logging
import re
from xml.etree.ElementTree import XML
from xml.parsers.expat import ExpatError

logger = logging.getLogger("gsmanager.sld")

SLD_NAMESPACE = "http://www.opengis.net/sld"
SE_NAMESPACE = "http://www.opengis.net/se"

CONTENT_TYPES = {
    "sld10": "application/vnd.ogc.sld+xml",
    "sld11": "application/vnd.ogc.se+xml",
}

DEFAULT_ENCODING = "utf-8"

_DECLARED_ENCODING = re.compile(
    r"\A\ufeff?\s*<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z][A-Za-z0-9._-]*)[\"']")


def declared_encoding(sld):
    """Encoding named by the XML declaration of an SLD (str or bytes), else utf-8."""
    if isinstance(sld, bytes):
        if sld.startswith(codecs.BOM_UTF8):
            sld = sld[len(codecs.BOM_UTF8):]
        sld = sld[:200].decode("latin-1")
    match = _DECLARED_ENCODING.match(sld[:200])
    if match is None:
        return DEFAULT_ENCODING
    try:
        return codecs.lookup(match.group(1)).name
    except LookupError:
        logger.warning("Unknown SLD encoding %s, using %s", match.group(1), DEFAULT_ENCODING)
        return DEFAULT_ENCODING


def encode_sld(sld):
    """
    SLD document as the bytes to send to GeoServer.

    Bytes are returned unchanged. Text is encoded with the encoding its XML
    declaration names, so the body always agrees with its declaration.
    """
    if isinstance(sld, bytes):
        return sld
    return sld.encode(declared_encoding(sld), "xmlcharrefreplace")


def decode_sld(sld):
    """SLD bytes as text, decoded with the encoding the document declares."""
    if not isinstance(sld, bytes):
        return sld
    encoding = declared_encoding(sld)
    if encoding == DEFAULT_ENCODING:
        encoding = "utf-8-sig"
    return sld.decode(encoding, "replace")


def build_element(sld):
    """Parse an SLD document (str or bytes) into an Element.

    Returns None when the text is not well formed XML.
    """
    if sld is None:
        return None
    try:
        return XML(sld)
    except (ExpatError, SyntaxError) as e:
        logger.debug("Unable to parse SLD: %s", e)
        return None


def _child(node, tag):
    # SLD 1.1 moves Name/Title into the SE namespace
    if node is None:
        return None
    found = node.find("{%s}%s" % (SLD_NAMESPACE, tag))
    if found is None:
        found = node.find("{%s}%s" % (SE_NAMESPACE, tag))
    return found


def _user_style(root):
    for layer_tag in ("NamedLayer", "UserLayer"):
        user_style = _child(_child(root, layer_tag), "UserStyle")
        if user_style is not None:
            return user_style
    return None


def _text(node):
    if node is None or node.text is None:
        return None
    return node.text.strip() or None


def style_name(sld):
    """Name a style would get from its SLD: UserStyle/Name, else NamedLayer/Name."""
    root = sld if getattr(sld, "tag", None) is not None else build_element(sld)
    if root is None:
        return None
    name = _text(_child(_user_style(root), "Name"))
    if name is None:
        name = _text(_child(_child(root, "NamedLayer"), "Name"))
    return name


def layer_name(sld):
    root = sld if getattr(sld, "tag", None) is not None else build_element(sld)
    return _text(_child(_child(root, "NamedLayer"), "Name"))


def style_title(sld):
    root = sld if getattr(sld, "tag", None) is not None else build_element(sld)
    if root is None:
        return None
    return _text(_child(_user_style(root), "Title"))
