from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from .builder import Builder
from .env import BuildEnv
from .errors import LifecycleError
from .group import BuildpackGroup
from .utils import dump_json

logger = logging.getLogger("lifecycle")


def _default(var: str, fallback: str) -> str:
    return os.environ.get(var, fallback)


def _load_builder(args: argparse.Namespace) -> Builder:
    group = BuildpackGroup.from_file(args.group, buildpacks_dir=args.buildpacks)
    return Builder(platform_dir=args.platform, buildpacks=group.buildpacks)


def _emit(args: argparse.Namespace, payload: dict) -> None:
    if args.metadata:
        dump_json(args.metadata, payload)
    else:
        print(json.dumps(payload, indent=2, sort_keys=True))


def cmd_build(args: argparse.Namespace) -> None:
    builder = _load_builder(args)
    metadata = builder.build(args.app, args.launch, args.cache, BuildEnv())
    _emit(args, metadata.to_dict())


def cmd_develop(args: argparse.Namespace) -> None:
    builder = _load_builder(args)
    metadata = builder.develop(args.app, args.cache, BuildEnv())
    _emit(args, metadata.to_dict())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a buildpack group against an application")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--buildpacks",
        default=_default("PACK_BUILDPACKS_DIR", "/buildpacks"),
        help="Directory holding installed buildpacks as <id>/<version>.",
    )
    parser.add_argument(
        "--group",
        default=_default("PACK_GROUP_PATH", "./group.toml"),
        help="Path to the buildpack group file.",
    )
    parser.add_argument(
        "--platform",
        default=_default("PACK_PLATFORM_DIR", "/platform"),
        help="Platform directory passed to every buildpack.",
    )
    parser.add_argument(
        "--app",
        default=_default("PACK_APP_DIR", "/workspace"),
        help="Application directory used as the buildpack working directory.",
    )
    parser.add_argument(
        "--cache",
        default=_default("PACK_CACHE_DIR", "/cache"),
        help="Directory holding per-buildpack cache layers.",
    )
    parser.add_argument(
        "--metadata",
        default=None,
        help="Write the merged metadata JSON to this path instead of stdout.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser_ = subparsers.add_parser("build", help="Run bin/build for every buildpack")
    build_parser_.add_argument(
        "--launch",
        default=_default("PACK_LAUNCH_DIR", "/launch"),
        help="Directory holding per-buildpack launch layers.",
    )
    build_parser_.set_defaults(func=cmd_build)

    develop_parser = subparsers.add_parser("develop", help="Run bin/develop for every buildpack")
    develop_parser.set_defaults(func=cmd_develop)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except LifecycleError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
