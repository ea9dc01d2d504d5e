"""
Object storage integration for uploaded directories.

Supports S3 and S3-compatible endpoints (R2, MinIO) via boto3.
Includes mock mode for local runs without credentials.
"""

from .client import (
    AuthenticationError,
    MockStorageClient,
    RemoteObject,
    S3StorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    UploadError,
    create_storage_client,
)

__all__ = [
    "AuthenticationError",
    "MockStorageClient",
    "RemoteObject",
    "S3StorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "UploadError",
    "create_storage_client",
]
