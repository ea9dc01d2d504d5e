"""
Object storage client for directory uploads.

Talks to S3 (or any S3-compatible endpoint such as R2 or MinIO) through
boto3, with an in-memory mock for local runs without credentials.

Every object this client creates is publicly readable. There is no
update or delete path: a put on an existing key simply overwrites it.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, PartialCredentialsError

logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = "public-read"

# ClientError codes meaning the service rejected our credentials
AUTH_ERROR_CODES = frozenset({
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "InvalidToken",
    "ExpiredToken",
    "InvalidClientTokenId",
})

MISSING_BUCKET_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})

# S3-compatible services (MinIO, R2) that have no public access block
UNSUPPORTED_CODES = frozenset({"NotImplemented", "MethodNotAllowed", "501"})


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class AuthenticationError(StorageError):
    """Raised when the storage service rejects the supplied credentials."""
    pass


class UploadError(StorageError):
    """Raised when a single object can't be created."""
    pass


@dataclass
class StorageConfig:
    """Configuration for S3 or S3-compatible storage."""
    access_key_id: str
    secret_access_key: str
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None


@dataclass(frozen=True)
class RemoteObject:
    """An object created in a bucket."""
    bucket: str
    key: str
    body: bytes = b""
    public: bool = True


class StorageClient(Protocol):
    """
    Protocol for the object storage operations an upload needs.

    Tests can provide mocks and the uploader doesn't care which
    backend it is talking to.
    """

    def bucket_exists(self, name: str) -> bool:
        """Return True if the bucket exists and is reachable."""
        ...

    def create_bucket(self, name: str) -> None:
        """Create the bucket."""
        ...

    def put_object(
        self,
        bucket: str,
        key: str,
        body: Optional[bytes] = None,
        public: bool = True,
    ) -> RemoteObject:
        """Create (or overwrite) an object and return it."""
        ...


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3StorageClient:
    """
    S3 object storage client.

    The boto3 client is built on first use and reused for every later
    call, so constructing an S3StorageClient never touches the network.
    """

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self._s3_client = None

    @property
    def s3(self):
        """The underlying boto3 client, created once."""
        if self._s3_client is None:
            self._s3_client = boto3.client(
                "s3",
                aws_access_key_id=self._config.access_key_id,
                aws_secret_access_key=self._config.secret_access_key,
                region_name=self._config.region,
                endpoint_url=self._config.endpoint_url,
            )

            logger.info(
                "Initialized S3 storage client",
                extra={
                    "region": self._config.region,
                    "endpoint": self._config.endpoint_url,
                }
            )

        return self._s3_client

    def bucket_exists(self, name: str) -> bool:
        try:
            self.s3.head_bucket(Bucket=name)
            return True
        except ClientError as e:
            if _error_code(e) in MISSING_BUCKET_CODES:
                return False
            raise self._translate(e, f"Bucket lookup failed for {name}") from e
        except BotoCoreError as e:
            raise self._translate(e, f"Bucket lookup failed for {name}") from e

    def create_bucket(self, name: str) -> None:
        """
        Create a bucket that accepts public-read object ACLs.

        New S3 buckets enforce bucket-owner object ownership and block
        public ACLs, so both are relaxed right after creation.
        us-east-1 rejects an explicit LocationConstraint. Services without
        a public access block API keep the bucket as created.
        """
        params = {"Bucket": name, "ObjectOwnership": "ObjectWriter"}
        if self._config.region != "us-east-1":
            params["CreateBucketConfiguration"] = {
                "LocationConstraint": self._config.region,
            }

        try:
            self.s3.create_bucket(**params)
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, f"Bucket creation failed for {name}") from e

        try:
            self.s3.delete_public_access_block(Bucket=name)
        except ClientError as e:
            if _error_code(e) not in UNSUPPORTED_CODES:
                raise self._translate(e, f"Bucket creation failed for {name}") from e
            logger.debug(
                "Public access block not supported by endpoint",
                extra={"bucket": name, "endpoint": self._config.endpoint_url}
            )
        except BotoCoreError as e:
            raise self._translate(e, f"Bucket creation failed for {name}") from e

        logger.info(
            "Created bucket",
            extra={"bucket": name, "region": self._config.region}
        )

    def put_object(
        self,
        bucket: str,
        key: str,
        body: Optional[bytes] = None,
        public: bool = True,
    ) -> RemoteObject:
        params = {"Bucket": bucket, "Key": key, "Body": body or b""}
        if public:
            params["ACL"] = PUBLIC_READ_ACL

        try:
            self.s3.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, f"Upload failed for {key}", UploadError) from e

        logger.debug(
            "Uploaded object",
            extra={"bucket": bucket, "key": key, "size_bytes": len(body or b"")}
        )

        return RemoteObject(bucket=bucket, key=key, body=body or b"", public=public)

    def _translate(
        self,
        error: Exception,
        message: str,
        default: type = StorageError,
    ) -> StorageError:
        """Map a botocore failure onto our error taxonomy and log it."""
        if isinstance(error, (NoCredentialsError, PartialCredentialsError)):
            error_class = AuthenticationError
        elif isinstance(error, ClientError) and _error_code(error) in AUTH_ERROR_CODES:
            error_class = AuthenticationError
        else:
            error_class = default

        logger.error(
            message,
            extra={"error": str(error), "error_type": error_class.__name__}
        )

        return error_class(f"{message}: {error}")


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local runs and tests.

    Buckets are dicts of key -> RemoteObject. Puts overwrite, just like S3.
    """

    def __init__(self) -> None:
        self.buckets: dict[str, dict[str, RemoteObject]] = {}
        logger.info("Initialized mock storage client (in-memory)")

    def bucket_exists(self, name: str) -> bool:
        return name in self.buckets

    def create_bucket(self, name: str) -> None:
        if name in self.buckets:
            raise StorageError(f"Bucket already exists: {name}")
        self.buckets[name] = {}

        logger.debug("Created bucket in mock storage", extra={"bucket": name})

    def put_object(
        self,
        bucket: str,
        key: str,
        body: Optional[bytes] = None,
        public: bool = True,
    ) -> RemoteObject:
        if bucket not in self.buckets:
            raise UploadError(f"Upload failed for {key}: no such bucket {bucket}")

        remote = RemoteObject(bucket=bucket, key=key, body=body or b"", public=public)
        self.buckets[bucket][key] = remote

        logger.debug(
            "Stored object in mock storage",
            extra={"bucket": bucket, "key": key, "size_bytes": len(remote.body)}
        )

        return remote


def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Pick the backend an Uploader writes to.

    ``--mock`` runs get a fresh in-memory client; everything else gets
    an S3StorageClient, which won't contact S3 until the first bucket
    lookup.
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3StorageClient(config)
