"""
Core upload logic.

Scanning, bucket handling and the upload loop. Storage access goes
through the StorageClient protocol, so everything here can be tested
against the in-memory client.
"""

from .bucket import Bucket, BucketManager
from .scanner import DIRECTORY, DirectoryEntry, DirectoryMarker, FileContent, scan_directory
from .uploader import Uploader

__all__ = [
    "Bucket",
    "BucketManager",
    "DIRECTORY",
    "DirectoryEntry",
    "DirectoryMarker",
    "FileContent",
    "scan_directory",
    "Uploader",
]
