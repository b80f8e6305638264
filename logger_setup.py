"""
Logging setup module for collect-images.
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = 'collect-images'


class LoggerSetup:
    """Sets up and configures the process logger for the application."""

    # Logger instance
    _process_logger: logging.Logger = None

    @classmethod
    def initialize_logger(
        cls,
        debug: bool = False,
        verbose: bool = False,
        quiet: bool = False,
        log_file: Optional[str] = None,
    ) -> logging.Logger:
        """
        Initialize and configure the process logger.

        Args:
            debug: Show debug messages on the console
            verbose: Show per-image messages on the console
            quiet: Only show errors on the console
            log_file: Also write INFO (DEBUG with debug) and above to this file

        Returns:
            logging.Logger: The process logger
        """
        logger = logging.getLogger(LOGGER_NAME)
        # Handlers do the filtering
        logger.setLevel(logging.DEBUG)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

        if log_file:
            try:
                file_handler = logging.FileHandler(log_file, 'w', encoding='utf-8')
            except OSError as e:
                # Logging is not set up yet; continue with the console only
                print(f"Failed to create log file '{log_file}': {e}", file=sys.stderr)
            else:
                file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)-8s: %(message)s'))
                file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
                logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        if debug:
            console_handler.setLevel(logging.DEBUG)
        elif verbose:
            console_handler.setLevel(logging.INFO)
        elif quiet:
            console_handler.setLevel(logging.ERROR)
        else:
            console_handler.setLevel(logging.WARNING)
        logger.addHandler(console_handler)

        logger.propagate = False
        cls._process_logger = logger
        return logger

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get the process logger.

        Returns:
            logging.Logger: The process logger
        """
        if cls._process_logger is None:
            cls.initialize_logger()
        return cls._process_logger
