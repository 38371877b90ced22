"""CLI entrypoints for reusebom commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Sequence

from .config import BomConfig, load_config
from .document import SoftwareBillOfMaterials
from .logging import configure_logging, get_logger
from .resolver import SourceResolver
from .scanner import iter_files

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_package_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--package-config",
        default=None,
        help="DEP5 copyright file to consult (defaults to .reuse/dep5 or .reusebom.yml).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reusebom",
        description="Generate SPDX bills of materials from REUSE file metadata.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors on the console.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a full debug trace of the resolution to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Describe files (or whole directories) in an SPDX JSON document.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_package_config_option(generate_parser)
    generate_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to describe (defaults to current directory).",
    )
    generate_parser.add_argument("--name", help="Document name (defaults to the directory name).")
    generate_parser.add_argument("--tool", help="Tool identifier recorded in creationInfo.")
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the document to this file instead of stdout.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print the resolved SPDX record of a single file.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_package_config_option(inspect_parser)
    inspect_parser.add_argument("path", help="File to resolve.")

    return parser


def _expand_paths(paths: Sequence[str], config: BomConfig) -> List[str]:
    expanded: List[str] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            expanded.extend((path / rel).as_posix() for rel in iter_files(path, config.exclude_paths))
        else:
            expanded.append(raw)
    return expanded


def _resolver_for(args: argparse.Namespace, config: BomConfig) -> SourceResolver:
    package_config = args.package_config or config.package_config
    return SourceResolver(package_config, max_lines=config.max_lines)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for reusebom commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )

    try:
        config = load_config(Path.cwd())
    except RuntimeError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        try:
            document = SoftwareBillOfMaterials(
                args.name or config.name,
                args.tool or config.tool,
                resolver=_resolver_for(args, config),
            )
            paths = _expand_paths(args.paths, config)
            logger.info("Describing %d file(s)", len(paths))
            document.add_files(paths)
        except (OSError, RuntimeError) as exc:
            parser.exit(1, f"reusebom generate failed: {exc}\nRun with --verbose for more details.\n")
        payload = document.to_json()
        if args.output is None:
            print(payload)
        else:
            args.output.write_text(payload + "\n", encoding="utf-8")
            logger.info("SPDX document written to %s", args.output)
    elif args.command == "inspect":
        try:
            record = _resolver_for(args, config).resolve(args.path)
        except (OSError, RuntimeError) as exc:
            parser.exit(1, f"reusebom inspect failed: {exc}\nRun with --verbose for more details.\n")
        print(json.dumps(record.to_dict(), indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
