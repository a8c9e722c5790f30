"""Command line access to a bucket.

Usage:
  bucketkit test
  bucketkit list
  bucketkit get reports/2024.json --output report.json
  bucketkit put reports/2024.json ./report.json

Connection settings come from the environment (or ``.env``); see
``bucketkit.common.config``. ``--bucket``, ``--region`` and
``--endpoint-url`` override them.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Sequence

from bucketkit.common.config import get_settings
from bucketkit.common.logging import setup_logging
from bucketkit.infra.storage import Bucket, Object, StorageError

logger = logging.getLogger("bucketkit.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bucketkit", description="List, read and write objects in an S3 bucket"
    )
    parser.add_argument("--bucket", default=None, help="Bucket name (default: S3_BUCKET)")
    parser.add_argument("--region", default=None, help="Region (default: S3_REGION)")
    parser.add_argument(
        "--endpoint-url",
        default=None,
        help="S3-compatible endpoint (default: S3_ENDPOINT_URL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("test", help="Check that the bucket is reachable")
    commands.add_parser("list", help="List objects, most recently modified first")

    get_cmd = commands.add_parser("get", help="Download an object")
    get_cmd.add_argument("key")
    get_cmd.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the payload to this file instead of stdout",
    )

    put_cmd = commands.add_parser("put", help="Upload a local file")
    put_cmd.add_argument("key")
    put_cmd.add_argument("path", type=Path)
    return parser


def _open_bucket(args: argparse.Namespace) -> Bucket:
    settings = get_settings()
    overrides = {}
    if args.region:
        overrides["S3_REGION"] = args.region
    if args.endpoint_url:
        overrides["S3_ENDPOINT_URL"] = args.endpoint_url
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    return Bucket.from_settings(settings, bucket=args.bucket)


def run(args: argparse.Namespace) -> None:
    bucket = _open_bucket(args)
    if args.command == "test":
        bucket.test_connection()
        print("OK")
    elif args.command == "list":
        for obj in bucket.list_objects():
            print(obj)
    elif args.command == "get":
        obj = bucket.get_object(args.key)
        payload = obj.data or b""
        if args.output is None:
            sys.stdout.buffer.write(payload)
            sys.stdout.flush()
        else:
            args.output.write_bytes(payload)
            print(f"Wrote {len(payload)} bytes to {args.output}")
    elif args.command == "put":
        payload = args.path.read_bytes()
        bucket.put_object(Object(key=args.key, data=payload))
        print(f"Uploaded {len(payload)} bytes to {args.key}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
        setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
        run(args)
    except (StorageError, OSError, ValueError) as exc:
        logger.debug("command_failed command=%s", args.command, exc_info=exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
