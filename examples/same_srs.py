#!/usr/bin/env python

'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import sys

from gsmanager import GeoServerManager

manager = GeoServerManager.from_env()
reader = manager.reader

workspace = sys.argv[1] if len(sys.argv) > 1 else "sf"
srs = sys.argv[2] if len(sys.argv) > 2 else "EPSG:26713"

for name in reader.get_layers() or []:
    layer = reader.get_layer(name)
    if layer is None or not (layer.resource_name or "").startswith(workspace + ":"):
        continue
    ft = reader.get_feature_type(layer)
    assert ft is not None and ft.srs == srs, layer.resource_name
