#!/usr/bin/env python

'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import os
import subprocess
import sys
import tempfile

from gsmanager import GeoServerManager
from gsmanager.sld import encode_sld

manager = GeoServerManager.from_env()
name = sys.argv[1] if len(sys.argv) > 1 else "point"

sld = manager.reader.get_sld(name)
if sld is None:
    sys.exit("No style named %s" % name)

fd, temp = tempfile.mkstemp(suffix=".sld")
with os.fdopen(fd, 'wb') as f:
    f.write(encode_sld(sld))

subprocess.call([os.getenv("EDITOR", "vim"), temp])

with open(temp, 'rb') as f:
    ok = manager.publisher.update_style(f, name)
os.unlink(temp)
print("%s %s" % (name, "updated" if ok else "NOT updated"))
