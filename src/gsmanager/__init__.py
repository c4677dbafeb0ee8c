'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

from gsmanager.manager import GeoServerManager

__all__ = ["GeoServerManager"]
