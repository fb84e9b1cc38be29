"""Command handler for generating a bundle's config.json.

`rune-spec` writes the default enclave container spec into a bundle
directory, optionally converted for rootless use.
"""

import argparse
import json
import logging
import os
from typing import Optional

from rich.console import Console
from rich.json import JSON

from rune.specconv import SpecError, example, to_rootless, validate_spec

logger = logging.getLogger(__name__)

SPEC_CONFIG = "config.json"

console = Console()
error_console = Console(stderr=True)


def emit_success(message: str):
    console.print(f"[green]{message}[/green]")


def emit_error(message: str):
    error_console.print(f"[bold red]{message}[/bold red]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rune-spec",
        description=(
            "Create a new specification file (config.json) for a bundle. "
            "The generated spec runs 'sh' inside an SGX enclave container."
        ),
    )
    parser.add_argument(
        "-b",
        "--bundle",
        default=None,
        help="path to the root of the bundle directory (default: current directory)",
    )
    parser.add_argument(
        "--rootless",
        action="store_true",
        help="generate a configuration for a rootless container",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help=f"print the spec instead of writing {SPEC_CONFIG}",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


def write_spec(bundle: Optional[str] = None, rootless: bool = False) -> str:
    """
    Generate the default spec and write it into a bundle.

    Args:
        bundle: Bundle directory (default: current directory)
        rootless: Convert the spec for the calling unprivileged user

    Returns:
        Path of the written config.json

    Raises:
        FileNotFoundError: If the bundle directory does not exist
        FileExistsError: If the bundle already has a config.json
    """
    bundle = bundle or os.getcwd()
    if not os.path.isdir(bundle):
        raise FileNotFoundError(f"bundle directory {bundle} does not exist")

    config_path = os.path.join(bundle, SPEC_CONFIG)
    if os.path.exists(config_path):
        raise FileExistsError(f"File {config_path} exists. Remove it first")

    document = generate_spec(rootless=rootless)
    with open(config_path, "w") as f:
        json.dump(document, f, indent=2)

    logger.info(f"Wrote spec to {config_path}")
    return config_path


def generate_spec(rootless: bool = False) -> dict:
    """Build the default spec as a runtime-spec JSON document."""
    spec = example()
    if rootless:
        to_rootless(spec)
    validate_spec(spec)
    return spec.to_oci_dict()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if args.stdout:
            console.print(JSON(json.dumps(generate_spec(rootless=args.rootless))))
            return 0

        config_path = write_spec(bundle=args.bundle, rootless=args.rootless)
    except (SpecError, OSError) as e:
        logger.debug(f"Failed to generate spec: {e}")
        emit_error(str(e))
        return 1

    emit_success(f"Wrote {config_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
