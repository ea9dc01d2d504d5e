"""
lob - upload a local directory to an object storage bucket.

This package contains the complete application:
- core: directory scanning, bucket handling and the upload loop
- infrastructure: object storage integration (S3 and S3-compatible)
- config: application configuration
- cli: command-line entry point
"""

__version__ = "0.1.0"
