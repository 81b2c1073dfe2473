"""
flowblob: Azure Blob Storage activity for workflow runtimes.

Uploads a local file as a block blob or lists the blobs in a container,
behind a small host-independent library and a thin runtime shim.
"""

__version__ = "0.1.0"
