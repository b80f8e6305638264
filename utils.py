"""
Utility functions for collect-images.
"""

import os
import re
from typing import List, Optional, Union


def format_file_size(size_bytes: int, decimals: int = 1) -> str:
    """
    Format a file size in human-readable form.

    Args:
        size_bytes: The size in bytes
        decimals: Number of decimal places to display

    Returns:
        str: The formatted file size
    """
    units = ["B", "KB", "MB", "GB", "TB"]

    if size_bytes == 0:
        return "0 B"

    unit_index = 0
    while size_bytes >= 1024 and unit_index < len(units) - 1:
        size_bytes /= 1024.0
        unit_index += 1

    return f"{size_bytes:.{decimals}f} {units[unit_index]}"


def find_in_dir(
    directory: Union[str, os.PathLike],
    pattern: Union[str, re.Pattern],
    file_list: Optional[List[str]] = None,
) -> List[str]:
    """
    Recursively find all files in a directory whose path matches a pattern.

    Entries are visited in sorted order and symlinked directories are not
    followed.

    Args:
        directory: The directory to search
        pattern: Regex searched against each file's full path
        file_list: Accumulator for matching files

    Returns:
        List[str]: Paths of the matching files
    """
    if file_list is None:
        file_list = []
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            find_in_dir(entry.path, pattern, file_list)
        elif pattern.search(entry.path):
            file_list.append(entry.path)

    return file_list
