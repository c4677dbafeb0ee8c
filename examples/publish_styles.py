#!/usr/bin/env python

'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import glob
import logging
import os
import sys

from gsmanager import GeoServerManager
from gsmanager.sld import style_name

logging.basicConfig(level=logging.INFO)

manager = GeoServerManager.from_env()
directory = sys.argv[1] if len(sys.argv) > 1 else "."
workspace = sys.argv[2] if len(sys.argv) > 2 else None

for path in sorted(glob.glob(os.path.join(directory, "*.sld"))):
    with open(path, "rb") as f:
        sld = f.read()
    name = style_name(sld) or os.path.splitext(os.path.basename(path))[0]
    if manager.reader.exists_style(name, workspace):
        manager.publisher.update_style(sld, name, workspace)
    else:
        manager.publisher.publish_style(sld, name, workspace)
