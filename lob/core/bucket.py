"""
Bucket get-or-create.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..infrastructure.storage.client import RemoteObject, StorageClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bucket:
    """Handle to an existing bucket. Objects created through it are public."""
    name: str
    storage: StorageClient

    def create_object(self, key: str, body: Optional[bytes] = None) -> RemoteObject:
        return self.storage.put_object(self.name, key, body=body, public=True)


class BucketManager:
    """Makes sure the target bucket exists before anything is uploaded."""

    def __init__(self, storage: StorageClient) -> None:
        self._storage = storage

    def ensure_bucket(self, name: str) -> Bucket:
        """
        Look the bucket up and create it if it's missing.

        Safe to call repeatedly: an existing bucket is returned as is
        and never created a second time.
        """
        if self._storage.bucket_exists(name):
            logger.debug("Using existing bucket", extra={"bucket": name})
        else:
            self._storage.create_bucket(name)
            logger.info("Bucket did not exist, created it", extra={"bucket": name})

        return Bucket(name=name, storage=self._storage)
