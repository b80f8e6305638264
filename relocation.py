"""
Relocation planning and execution for collect-images.

A reference is either already co-located (skipped), remote (fetched) or a
path under the root directory (moved). Every operation here can be re-run
after a partial earlier run without failing.
"""

import logging
import os
import posixpath
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from errors import FetchFailedError, MalformedReferenceError, SourceNotFoundError
from http_client import HttpClient, url_file_name
from image_reference import ImageReference
from utils import format_file_size

logger = logging.getLogger('collect-images')

IMAGES_DIR = "images"
COLOCATED_PREFIX = IMAGES_DIR + "/"
REMOTE_PREFIX = "http"


class RelocationAction(Enum):
    """What has to happen to an image before its reference is rewritten."""
    SKIP = "skip"
    FETCH = "fetch"
    MOVE = "move"


@dataclass
class RelocationPlan:
    """The decision taken for one image reference."""
    action: RelocationAction
    source_locator: str
    destination_relative_path: str  # Always images/<file name>
    destination_absolute_path: Path
    source_path: Optional[Path] = None  # MOVE only


def is_colocated(locator: str) -> bool:
    return locator.startswith(COLOCATED_PREFIX)


def is_remote(locator: str) -> bool:
    return locator.startswith(REMOTE_PREFIX)


def image_file_name(locator: str) -> str:
    """
    Get the final path segment of a source locator.

    Args:
        locator: A URL or a file path as written in the document

    Returns:
        str: The file name the image is stored under in images/
    """
    if is_remote(locator):
        return url_file_name(locator)
    name = posixpath.basename(locator.replace("\\", "/"))
    return "" if name in (".", "..") else name


def plan_relocation(reference: ImageReference, document_dir: Path, root_dir: Path) -> RelocationPlan:
    """
    Decide how to relocate the image behind a reference.

    Args:
        reference: The extracted image reference
        document_dir: Directory of the document containing the reference
        root_dir: Directory local source locators are resolved against

    Returns:
        RelocationPlan: The action and destination for the image

    Raises:
        MalformedReferenceError: If the reference has no source locator
        FetchFailedError: If a URL has no file name to store the image under
        SourceNotFoundError: If a local path does not name a file
    """
    if reference.is_malformed:
        raise MalformedReferenceError(f"Image markup without a source: {reference.raw_match}")

    locator = reference.source_locator
    file_name = image_file_name(locator)
    relative_path = posixpath.join(IMAGES_DIR, file_name)
    absolute_path = Path(document_dir) / IMAGES_DIR / file_name

    if is_colocated(locator):
        action = RelocationAction.SKIP
        source_path = None
    elif is_remote(locator):
        action = RelocationAction.FETCH
        source_path = None
    else:
        action = RelocationAction.MOVE
        # Site-absolute locators ("/img/a.png") still live under the root
        source_path = Path(root_dir) / locator.lstrip("/\\")

    if not file_name and action is RelocationAction.FETCH:
        raise FetchFailedError(f"No image file name in URL: {locator}", locator=locator)
    if not file_name and action is RelocationAction.MOVE:
        raise SourceNotFoundError(f"Not an image file: {source_path}", locator=locator)

    return RelocationPlan(
        action=action,
        source_locator=locator,
        destination_relative_path=relative_path,
        destination_absolute_path=absolute_path,
        source_path=source_path,
    )


def move_file_safe(src: Path, dest: Path) -> None:
    """
    Move src to dest, creating the destination folder as needed.

    A missing src with an existing dest counts as already moved.

    Args:
        src: The source file path
        dest: The destination file path

    Raises:
        SourceNotFoundError: If neither src nor dest exists
    """
    src = Path(src)
    dest = Path(dest)
    if not src.exists():
        if dest.exists():
            logger.debug(f"Already moved: {dest}")
            return
        raise SourceNotFoundError(f"Image not found: {src}", locator=str(src))

    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)
    os.remove(src)
    logger.debug(f"Moved {src} -> {dest} ({format_file_size(dest.stat().st_size)})")


def fetch_file_safe(url: str, dest: Path, http_client: HttpClient) -> None:
    """
    Fetch url into dest's folder, creating the folder as needed.

    An existing dest counts as already fetched.

    Args:
        url: The URL of the image
        dest: Where the fetched image is expected to land
        http_client: Transport used for the download

    Raises:
        FetchFailedError: If the download fails or lands under another name
    """
    dest = Path(dest)
    if dest.exists():
        logger.debug(f"Already fetched: {dest}")
        return

    dest.parent.mkdir(parents=True, exist_ok=True)
    fetched = Path(http_client.fetch(url, dest.parent))
    if fetched != dest or not dest.exists():
        if fetched != dest:
            fetched.unlink(missing_ok=True)
        raise FetchFailedError(f"Fetched {url} to {fetched}, expected {dest}", locator=url)
    logger.debug(f"Fetched {url} -> {dest} ({format_file_size(dest.stat().st_size)})")


def commit_file_safe(updated: Path, original: Path) -> None:
    """
    Atomically replace original with updated.

    A missing updated file with an existing original counts as already committed.

    Args:
        updated: The rewritten content
        original: The file being superseded
    """
    updated = Path(updated)
    original = Path(original)
    if not updated.exists() and original.exists():
        logger.debug(f"Already committed: {original}")
        return
    os.replace(updated, original)


def execute_plan(plan: RelocationPlan, http_client: HttpClient) -> None:
    """
    Carry out a relocation plan.

    Args:
        plan: The plan returned by plan_relocation
        http_client: Transport used for FETCH plans
    """
    if plan.action is RelocationAction.FETCH:
        fetch_file_safe(plan.source_locator, plan.destination_absolute_path, http_client)
    elif plan.action is RelocationAction.MOVE:
        move_file_safe(plan.source_path, plan.destination_absolute_path)
