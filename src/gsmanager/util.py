'''
gsmanager is a python library for managing a GeoServer instance via the GeoServer REST API.

The project is distributed under a MIT License .
'''

__author__ = "David Winslow"
__copyright__ = "Copyright 2012-2015 Boundless, Copyright 2010-2012 OpenPlans"
__license__ = "MIT"

import os
from tempfile import mkstemp
from zipfile import ZipFile, BadZipFile

SHAPEFILE_REQUIRED = ['shp', 'shx', 'dbf', 'prj']
SHAPEFILE_OPTIONAL = ['cpg', 'qix', 'sbn', 'sbx']


def shapefile_and_friends(path):
    """Map each shapefile extension to ``path.<ext>``.

    The four mandatory components are always listed; optional sidecars only
    when they exist on disk.
    """
    friends = dict((ext, path + "." + ext) for ext in SHAPEFILE_REQUIRED)
    for ext in SHAPEFILE_OPTIONAL:
        candidate = path + "." + ext
        if os.path.exists(candidate):
            friends[ext] = candidate
    return friends


def prepare_upload_bundle(name, data):
    """GeoServer's REST API uses ZIP archives as containers for file formats such
    as Shapefile which include several 'boxcar' files alongside the main data.
    In such archives, GeoServer assumes that all of the relevant files will have
    the same base name and appropriate extensions, and live in the root of the
    ZIP archive. This method produces a zip file that matches these
    expectations, based on a basename, and a dict of extensions to paths or
    file-like objects. The client code is responsible for deleting the zip
    archive when it's done; if a component cannot be read the partial archive
    is removed and the error propagates."""
    fd, path = mkstemp(suffix=".zip")
    os.close(fd)
    try:
        with ZipFile(path, 'w') as zip_file:
            for ext, stream in data.items():
                fname = "%s.%s" % (name, ext)
                if isinstance(stream, (str, os.PathLike)):
                    zip_file.write(stream, fname)
                else:
                    zip_file.writestr(fname, stream.read())
    except BaseException:
        os.unlink(path)
        raise
    return path


def shapefile_names(archive):
    """Base names of the .shp members stored in the root of a zip archive.

    Returns an empty list when ``archive`` is not a readable zip file.
    """
    try:
        with ZipFile(archive) as zip_file:
            members = zip_file.namelist()
    except (BadZipFile, OSError):
        return []
    names = []
    for member in members:
        base, ext = os.path.splitext(member)
        if ext.lower() == ".shp" and "/" not in base:
            names.append(base)
    return names
