"""
Command-line entry point.

Usage:
    lob DIRECTORY [--dry-run] [--mock]

Requires:
    - AWS_ACCESS_KEY, AWS_SECRET_KEY and FOG_DIRECTORY in the environment
      (or in a .env file in the working directory)

Exits 0 once every object is uploaded, 1 on the first error.
"""

import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from .config.settings import ConfigurationError, get_settings
from .core.uploader import Uploader
from .infrastructure.storage.client import StorageError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lob",
        description="Upload a directory to an object storage bucket, publicly readable",
    )
    parser.add_argument("directory", help="Local directory to upload")
    parser.add_argument("--dry-run", action="store_true", help="Scan only, don't upload")
    parser.add_argument("--mock", action="store_true", help="Upload to in-memory storage instead of S3")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Configuration problems go to stderr directly: the log level
    # may be unusable or set high enough to hide them.
    try:
        settings = get_settings()
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        print(f"ERROR: invalid configuration: {messages}", file=sys.stderr)
        return 1

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level,
    )

    uploader = Uploader(args.directory, settings=settings, mock_mode=args.mock)

    try:
        created = uploader.verify_and_upload(dry_run=args.dry_run)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except StorageError as e:
        logger.error("Upload aborted: %s", e)
        return 1
    except OSError as e:
        logger.error("Could not read %s: %s", args.directory, e)
        return 1

    if not args.dry_run:
        logger.info("Uploaded %d objects to %s", len(created), settings.fog_directory)

    return 0


if __name__ == "__main__":
    sys.exit(main())
