#!/usr/bin/env python3
"""
Entry point for the CHUK MML MCP Server.

Settings come from a YAML config file (./mml.yaml unless --config is
given); the error policy and storage directories can be overridden on
the command line.
"""

import argparse
import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from chuk_mcp_mml.async_server import create_server
from chuk_mcp_mml.config import MMLConfig, load_config
from chuk_mcp_mml.constants import ErrorPolicy

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Command-line options for chuk-mcp-mml."""
    parser = argparse.ArgumentParser(description="CHUK MML MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument("--port", type=int, default=8000, help="HTTP port (http transport only)")
    parser.add_argument("--config", type=Path, help="Config YAML (default: ./mml.yaml)")
    parser.add_argument(
        "--error-policy",
        choices=[policy.value for policy in ErrorPolicy],
        help="Override the batch error policy",
    )
    parser.add_argument("--songs-dir", type=Path, help="Override the song directory")
    parser.add_argument("--output-dir", type=Path, help="Override the MIDI output directory")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> MMLConfig:
    """Load the config file and apply command-line overrides."""
    config = load_config(args.config)

    overrides: dict[str, object] = {}
    if args.error_policy:
        overrides["error_policy"] = ErrorPolicy(args.error_policy)
    if args.songs_dir:
        overrides["songs_dir"] = args.songs_dir
    if args.output_dir:
        overrides["output_dir"] = args.output_dir

    return config.model_copy(update=overrides) if overrides else config


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments, build the server and run it on the chosen transport."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    mcp = create_server(resolve_config(args))

    if args.transport == "stdio":
        logger.info("Starting CHUK MML MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK MML MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
