"""
Upload orchestration.

The Uploader ties the pieces together: it verifies configuration, scans
the source directory, makes sure the bucket exists and then creates one
public object per scanned entry, strictly one at a time.

Nothing is retried or rolled back. The first failure propagates to the
caller and objects created before it stay in the bucket; running again
simply overwrites them.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..config.settings import Settings, get_settings
from ..infrastructure.storage.client import (
    RemoteObject,
    StorageClient,
    StorageConfig,
    create_storage_client,
)
from .bucket import Bucket, BucketManager
from .scanner import DirectoryEntry, DirectoryMarker, FileContent, scan_directory

logger = logging.getLogger(__name__)


class Uploader:
    """
    Uploads one local directory into the configured bucket.

    The storage client and the bucket handle are built on first use and
    cached, so one Uploader talks to one bucket through one client.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        settings: Optional[Settings] = None,
        storage: Optional[StorageClient] = None,
        mock_mode: bool = False,
    ) -> None:
        self.directory = Path(directory)
        self.settings = settings if settings is not None else get_settings()
        self._storage = storage
        self._mock_mode = mock_mode
        self._bucket: Optional[Bucket] = None

    @property
    def storage(self) -> StorageClient:
        if self._storage is None:
            config = StorageConfig(
                access_key_id=self.settings.aws_access_key,
                secret_access_key=self.settings.aws_secret_key,
                region=self.settings.aws_region,
                endpoint_url=self.settings.aws_endpoint_url,
            )
            self._storage = create_storage_client(config, mock_mode=self._mock_mode)
        return self._storage

    @property
    def bucket(self) -> Bucket:
        """The destination bucket, created if it doesn't exist yet."""
        if self._bucket is None:
            manager = BucketManager(self.storage)
            self._bucket = manager.ensure_bucket(self.settings.fog_directory)
        return self._bucket

    def verify_and_upload(self, dry_run: bool = False) -> list[RemoteObject]:
        """Validate configuration, then upload. Nothing is uploaded if validation fails."""
        self.settings.verify_env_variables()
        return self.upload(dry_run=dry_run)

    def upload(self, dry_run: bool = False) -> list[RemoteObject]:
        """
        Upload every scanned entry in scan order.

        With ``dry_run`` the directory is still scanned but storage is
        never touched; the keys that would be uploaded are logged.

        Returns:
            The objects created, in upload order (empty for a dry run).
        """
        content = self.directory_content()

        logger.info(
            "Starting upload",
            extra={
                "directory": str(self.directory),
                "bucket": self.settings.fog_directory,
                "entries": len(content),
                "dry_run": dry_run,
            }
        )

        if dry_run:
            for key, entry in content.items():
                size = len(entry) if isinstance(entry, FileContent) else 0
                logger.info("Would upload %s (%d bytes)", key, size)
            return []

        created = [
            self.create_file_or_directory(key, entry)
            for key, entry in content.items()
        ]

        logger.info(
            "Upload complete",
            extra={"bucket": self.settings.fog_directory, "objects": len(created)}
        )

        return created

    def directory_content(self) -> dict[str, DirectoryEntry]:
        return scan_directory(self.directory)

    def create_file_or_directory(self, key: str, entry: DirectoryEntry) -> RemoteObject:
        if isinstance(entry, DirectoryMarker):
            return self.create_directory(key)
        if isinstance(entry, FileContent):
            return self.create_file(key, entry.data)
        raise TypeError(f"Unexpected directory entry for {key}: {entry!r}")

    def create_directory(self, key: str) -> RemoteObject:
        """Zero-byte object standing in for a directory."""
        return self.bucket.create_object(key)

    def create_file(self, key: str, data: bytes) -> RemoteObject:
        return self.bucket.create_object(key, body=data)
