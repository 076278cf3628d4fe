#!/usr/bin/env python3
"""
Build a creative from the command line.

Reads a settings file (YAML or JSON, must contain ``kind``) and asset files,
runs the full build against a local directory, writes the archive to the
output directory and prints the embed snippet.

Usage:
    python scripts/build_creative.py settings.yaml \\
        --asset collapsed=banner_small.png --asset expanded=banner_big.png \\
        --owner acme --output ./out
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

import yaml

from adelia.ad_server.services.build_service import CreativeBuildService
from adelia.build.storage import InMemoryRecordStore, LocalDirectoryUploader
from adelia.common.exceptions import AdeliaError
from adelia.common.logger import get_logger
from adelia.common.utils import json_dumps
from adelia.creative.assets import AssetReference
from adelia.creative.registry import get_registry

logger = get_logger(__name__)


def load_settings_file(path: Path) -> dict:
    """YAML is a superset of JSON, so one loader covers both."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict) or "kind" not in data:
        raise SystemExit(f"{path}: expected a mapping with a 'kind' key")
    return data


def parse_asset(value: str) -> AssetReference:
    role, sep, source = value.partition("=")
    if not sep or not role or not source:
        raise SystemExit(f"Invalid --asset {value!r}, expected ROLE=PATH_OR_URL")
    if source.startswith(("http://", "https://")):
        return AssetReference(role=role, url=source)
    path = Path(source)
    if not path.is_file():
        raise SystemExit(f"Asset file not found: {path}")
    content_type, _ = mimetypes.guess_type(path.name)
    return AssetReference(
        role=role,
        data=path.read_bytes(),
        file_name=path.name,
        content_type=content_type,
    )


async def main_async(args: argparse.Namespace) -> int:
    """Async main function."""
    data = load_settings_file(Path(args.settings))
    settings = get_registry().parse_settings(data.pop("kind"), data)
    assets = {ref.role: ref for ref in map(parse_asset, args.asset)}

    output = Path(args.output)
    uploader = LocalDirectoryUploader(
        root_dir=output / "media",
        public_base_url=args.public_base_url or (output / "media").resolve().as_uri(),
    )
    service = CreativeBuildService(uploader, InMemoryRecordStore())

    result = await service.build(args.owner, settings, assets)

    archive_path = output / result.archive.zip_name
    archive_path.write_bytes(result.archive.data)
    logger.info("Archive written", path=str(archive_path))

    snippet = result.embed.one_line if args.one_line else result.embed.script
    if args.json:
        print(
            json_dumps(
                {
                    "creative_id": result.creative_id,
                    "archive": str(archive_path),
                    "archive_url": result.archive_url,
                    "hosted_url": result.hosted_url,
                    "embed_script": snippet,
                }
            )
        )
        return 0

    print(f"creative id: {result.creative_id}")
    print(f"archive:     {archive_path}")
    print(f"hosted:      {result.hosted_url}")
    print()
    print(snippet)
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Build an Adelia creative")
    parser.add_argument("settings", type=str, help="Settings file (YAML or JSON)")
    parser.add_argument(
        "--asset",
        "-a",
        action="append",
        default=[],
        help="ROLE=PATH or ROLE=URL, repeatable",
    )
    parser.add_argument("--owner", type=str, default="local", help="Owning account")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="./build",
        help="Output directory for the archive and uploaded files",
    )
    parser.add_argument(
        "--public-base-url",
        type=str,
        default=None,
        help="URL the output media directory will be served from",
    )
    parser.add_argument(
        "--one-line",
        action="store_true",
        help="Print the minified embed snippet",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary instead of plain text",
    )

    args = parser.parse_args()

    Path(args.output).mkdir(parents=True, exist_ok=True)
    try:
        sys.exit(asyncio.run(main_async(args)))
    except AdeliaError as e:
        logger.error("Build failed", error=e.__class__.__name__, message=e.message, details=e.details)
        sys.exit(1)


if __name__ == "__main__":
    main()
