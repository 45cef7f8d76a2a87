#!/usr/bin/env python
"""Main entry point for the NoteList MCP server."""
import argparse
import logging
import os
import sys
from pathlib import Path

from notelist import __version__
from notelist.config import config
from notelist.exceptions import ConfigurationError, NoteListError
from notelist.observability import configure_logging
from notelist.server.mcp_server import NoteListMcpServer
from notelist.services.notelist_service import NoteListService
from notelist.storage.location import StorageLocation


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="NoteList MCP Server")
    parser.add_argument(
        "--data-dir",
        help="Directory holding notes.json and categories.json "
             "(default: ~/.notelist)",
        type=str,
        default=os.environ.get("NOTELIST_DATA_DIR")
    )
    parser.add_argument(
        "--dir-name",
        help="Directory name under the home directory (default: .notelist)",
        type=str,
        default=None
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=config.log_level.upper()
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for rotating log files (default: no file logging)",
        type=str,
        default=str(config.log_dir) if config.log_dir else None
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def update_config(args):
    """Update the global config with command line arguments."""
    if args.data_dir:
        config.data_dir = Path(args.data_dir)
    if args.dir_name:
        config.dir_name = args.dir_name
    if args.log_dir:
        config.log_dir = Path(args.log_dir)


def main(argv=None):
    """Run the NoteList MCP server."""
    args = parse_args(argv)
    try:
        update_config(args)
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    try:
        log_file = configure_logging(level=log_level, log_dir=config.log_dir)
    except OSError as e:
        # Fall back to basic console logging if file logging fails
        logging.basicConfig(level=log_level)
        logging.getLogger(__name__).warning(f"Failed to configure file logging: {e}")
        log_file = None

    logger = logging.getLogger(__name__)
    if log_file:
        logger.info(f"Persistent logging enabled: {log_file}")

    # Resolve the storage directory up front so a bad home or data dir fails fast
    location = StorageLocation.from_config(config)
    try:
        storage_dir = location.resolve()
    except NoteListError as e:
        logger.error(f"Failed to prepare storage directory: {e}")
        sys.exit(1)
    logger.info(f"Using storage directory: {storage_dir}")

    try:
        logger.info("Starting NoteList MCP server")
        server = NoteListMcpServer(service=NoteListService(location=location))
        server.run()
    except Exception as e:
        logger.error(f"Error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
