#!/usr/bin/env python3
"""
collect-images - Co-locate the images referenced by blog posts.

Finds the documents under a search directory, moves or downloads every image
they reference into an images/ folder beside each document and rewrites the
references to the new relative paths.
"""

import os
import re
import sys
from typing import List, Optional

from cli_parser import CommandLineParser
from errors import CollectImagesError
from http_client import create_http_client
from logger_setup import LoggerSetup
from post_processor import PostProcessor, recover_interrupted_commits
from utils import find_in_dir

__version__ = "1.0.0"

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_SETUP_ERROR = 2


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the application.

    Args:
        args: Command line arguments (uses sys.argv[1:] if None)

    Returns:
        int: Exit code
    """
    if args is None:
        args = sys.argv[1:]

    options = CommandLineParser.parse(args, version=__version__)
    logger = LoggerSetup.initialize_logger(
        debug=options.debug,
        verbose=options.verbose,
        quiet=options.quiet,
        log_file=options.log_file,
    )

    def progress(message: str) -> None:
        if not options.quiet:
            print(message, file=sys.stderr)

    progress("collect-images: Tool to co-locate blog post images")
    progress(f"Source Directory: {options.search_dir}")
    progress(f"Root Directory: {options.root_dir}")

    if not os.path.isdir(options.search_dir):
        logger.error(f"Search directory not found: {options.search_dir}")
        return EXIT_SETUP_ERROR
    if not os.path.isdir(options.root_dir):
        logger.error(f"Root directory not found: {options.root_dir}")
        return EXIT_SETUP_ERROR
    try:
        pattern = re.compile(options.pattern)
    except re.error as e:
        logger.error(f"Invalid document pattern {options.pattern!r}: {e}")
        return EXIT_SETUP_ERROR

    try:
        for recovered in recover_interrupted_commits(options.search_dir, pattern):
            progress(f"Recovered: {os.path.basename(recovered)}")
        post_paths = find_in_dir(options.search_dir, pattern)
    except OSError as e:
        logger.error(f"Error searching {options.search_dir}: {e}")
        return EXIT_SETUP_ERROR
    logger.info(f"Found {len(post_paths)} files to process.")

    processor = PostProcessor(options.root_dir, create_http_client(options.fetcher, options.timeout))
    for post_path in post_paths:
        name = os.path.basename(post_path)
        progress(f"Processing: {name}")
        try:
            document = processor.process(post_path)
        except CollectImagesError as e:
            logger.error(f"Error processing file {e}")
            progress(f"Failed: {name}: {e}")
            continue
        logger.debug(
            f"{post_path}: {document.lines_processed} lines, "
            f"{document.images_relocated} relocated, {document.images_skipped} already co-located"
        )

    progress(
        f"Completed processing {len(post_paths)} file(s): "
        f"{processor.documents_changed} changed, {processor.failures} failure(s)"
    )
    if processor.malformed_references:
        logger.warning(f"{processor.malformed_references} image reference(s) without a source were left as is")

    return EXIT_FAILURES if processor.failures else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
