"""
Command line argument parser for collect-images.
"""

import argparse
import os
from dataclasses import dataclass
from typing import List, Optional

from http_client import DEFAULT_TIMEOUT

DEFAULT_PATTERN = r"\.md$"


@dataclass
class CommandLineOptions:
    """Holds the parsed command line options."""
    search_dir: str = ""
    root_dir: str = ""  # Defaults to search_dir
    pattern: str = DEFAULT_PATTERN
    fetcher: str = "requests"
    timeout: float = DEFAULT_TIMEOUT
    log_file: Optional[str] = None
    debug: bool = False
    verbose: bool = False
    quiet: bool = False


class CommandLineParser:
    """Parses command line arguments."""

    @staticmethod
    def build_parser(version: str = "") -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="collect-images",
            description="Co-locate the images referenced by blog posts in an images/ folder beside each post.",
        )

        parser.add_argument(
            "search_dir", nargs="?", default=None,
            help="Directory searched recursively for documents (default: current directory)"
        )
        parser.add_argument(
            "root_dir", nargs="?", default=None,
            help="Directory local image paths are resolved against (default: SEARCH_DIR)"
        )
        parser.add_argument(
            "--pattern", "-p", type=str, default=DEFAULT_PATTERN,
            help=f"Regex a document's path must match (default: {DEFAULT_PATTERN})"
        )
        parser.add_argument(
            "--fetcher", "-f", choices=("requests", "wget"), default="requests",
            help="How remote images are downloaded (default: requests)"
        )
        parser.add_argument(
            "--timeout", "-t", type=float, default=DEFAULT_TIMEOUT,
            help=f"Download timeout in seconds for the requests fetcher (default: {DEFAULT_TIMEOUT:g})"
        )
        parser.add_argument(
            "--log-file", "-l", type=str,
            help="Also write log output to FILE"
        )

        verbosity_group = parser.add_mutually_exclusive_group()
        verbosity_group.add_argument(
            "--quiet", "-Q", action="store_true",
            help="Only show errors; no progress output"
        )
        verbosity_group.add_argument(
            "--verbose", "-v", action="store_true",
            help="Show each relocated image"
        )
        verbosity_group.add_argument(
            "--debug", "-d", action="store_true",
            help="Show debug messages"
        )

        if version:
            parser.add_argument("--version", action="version", version=f"%(prog)s {version}")
        return parser

    @staticmethod
    def parse(args: List[str], version: str = "") -> CommandLineOptions:
        """
        Parse command line arguments.

        Args:
            args: Command line arguments
            version: Version reported by --version

        Returns:
            CommandLineOptions: The parsed options
        """
        parsed_args = CommandLineParser.build_parser(version).parse_args(args)

        search_dir = parsed_args.search_dir or os.getcwd()
        root_dir = parsed_args.root_dir or search_dir

        return CommandLineOptions(
            search_dir=search_dir,
            root_dir=root_dir,
            pattern=parsed_args.pattern,
            fetcher=parsed_args.fetcher,
            timeout=parsed_args.timeout,
            log_file=parsed_args.log_file,
            debug=parsed_args.debug,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
        )
