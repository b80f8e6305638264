"""
Post processing module for collect-images.

Streams a document line by line, relocates the images it references and
rewrites the references to point into the document's images/ folder.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from errors import CollectImagesError, DocumentStreamError, MalformedReferenceError
from http_client import HttpClient
from image_reference import extract_references
from relocation import RelocationAction, commit_file_safe, execute_plan, plan_relocation
from utils import find_in_dir

logger = logging.getLogger('collect-images')

UPDATED_SUFFIX = ".updated"


class DocumentState(Enum):
    READING = "reading"
    REWRITING = "rewriting"
    COMMITTING = "committing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class Document:
    """A document being processed and the outcome of processing it."""
    path: Path
    changed: bool = False
    state: DocumentState = DocumentState.READING
    lines_processed: int = 0
    images_relocated: int = 0
    images_skipped: int = 0
    error: Optional[CollectImagesError] = None

    @property
    def directory_path(self) -> Path:
        return self.path.parent

    @property
    def updated_path(self) -> Path:
        return self.path.with_name(self.path.name + UPDATED_SUFFIX)


class PostProcessor:
    """Co-locates the images referenced by documents."""

    def __init__(self, root_dir: Union[str, os.PathLike], http_client: HttpClient):
        """
        Initialize the PostProcessor.

        Args:
            root_dir: Directory local source locators are resolved against
            http_client: Transport used to fetch remote images
        """
        self.root_dir = Path(root_dir)
        self.http_client = http_client

        # Statistics
        self.documents_processed: int = 0
        self.documents_changed: int = 0
        self.images_relocated: int = 0
        self.images_skipped: int = 0
        self.malformed_references: int = 0
        self.failures: int = 0

    def process(self, path: Union[str, os.PathLike]) -> Document:
        """
        Process a single document.

        Args:
            path: Path to the document

        Returns:
            Document: The processed document

        Raises:
            CollectImagesError: If the document had to be aborted
        """
        document = Document(Path(path))
        self.process_document(document)
        return document

    def process_all(self, paths: Iterable[Union[str, os.PathLike]]) -> List[Document]:
        """
        Process documents one after another.

        A failing document is logged and recorded; the remaining documents
        are still processed.

        Args:
            paths: Paths of the documents

        Returns:
            List[Document]: One entry per path, in order
        """
        documents = []
        for path in paths:
            document = Document(Path(path))
            try:
                self.process_document(document)
            except CollectImagesError as e:
                logger.error(f"Error processing file {e}")
            documents.append(document)
        return documents

    def process_document(self, document: Document) -> None:
        """
        Rewrite a document into its temporary file and commit it if changed.

        Args:
            document: The document to process; its state and counters are updated
        """
        logger.debug(f"Reading file: {document.path}")
        self.documents_processed += 1

        try:
            with open(document.path, 'r', encoding='utf-8') as source, \
                    open(document.updated_path, 'w', encoding='utf-8') as output:
                for line in source:
                    if line.endswith('\n'):
                        line = line[:-1]
                    output.write(self.rewrite_line(document, line) + '\n')
                    document.lines_processed += 1
        except CollectImagesError as e:
            self._abort(document, e)
        except (OSError, UnicodeError) as e:
            self._abort(document, DocumentStreamError(f"Error reading or writing: {e}"), e)

        document.state = DocumentState.COMMITTING
        try:
            if document.changed:
                logger.debug(f"Committing rewritten file: {document.path}")
                commit_file_safe(document.updated_path, document.path)
                self.documents_changed += 1
            else:
                logger.debug(f"No changes, discarding: {document.updated_path}")
                document.updated_path.unlink()
        except OSError as e:
            self._abort(document, DocumentStreamError(f"Error committing: {e}"), e)

        document.state = DocumentState.DONE

    def rewrite_line(self, document: Document, line: str) -> str:
        """
        Relocate the images referenced on a line and rewrite their references.

        Args:
            document: The document the line belongs to
            line: The line without its line ending

        Returns:
            str: The line with every relocated reference rewritten
        """
        new_line = line
        for reference in extract_references(line):
            try:
                plan = plan_relocation(reference, document.directory_path, self.root_dir)
            except MalformedReferenceError as e:
                e.document = str(document.path)
                logger.warning(f"Skipping reference: {e}")
                self.malformed_references += 1
                continue

            if plan.action is RelocationAction.SKIP:
                logger.debug(f"Already co-located: {plan.source_locator}")
                document.images_skipped += 1
                self.images_skipped += 1
                continue

            document.state = DocumentState.REWRITING
            try:
                execute_plan(plan, self.http_client)
            except CollectImagesError as e:
                e.document = str(document.path)
                e.locator = plan.source_locator
                raise

            verb = "Fetched" if plan.action is RelocationAction.FETCH else "Moved"
            logger.info(f"{verb} {plan.source_locator} -> {plan.destination_relative_path}")
            new_line = new_line.replace(
                reference.raw_match, reference.render(plan.destination_relative_path), 1
            )
            document.changed = True
            document.images_relocated += 1
            self.images_relocated += 1

        document.state = DocumentState.READING
        return new_line

    def _abort(self, document: Document, error: CollectImagesError, cause: Optional[BaseException] = None) -> None:
        # The temporary file is kept for inspection; the original is untouched
        if error.document is None:
            error.document = str(document.path)
        document.state = DocumentState.ABORTED
        document.error = error
        self.failures += 1
        if cause is not None:
            raise error from cause
        raise error


def recover_interrupted_commits(directory: Union[str, os.PathLike], pattern: Union[str, re.Pattern]) -> List[str]:
    """
    Move orphaned temporary files back into place.

    A temporary file whose original document is missing holds the complete
    rewritten content of a commit that did not finish.

    Args:
        directory: The directory to search
        pattern: The document filter the original paths must match

    Returns:
        List[str]: The recovered document paths
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    recovered = []
    for updated in find_in_dir(directory, re.escape(UPDATED_SUFFIX) + "$"):
        original = updated[:-len(UPDATED_SUFFIX)]
        if os.path.exists(original) or not pattern.search(original):
            continue
        logger.warning(f"Recovering interrupted commit: {original}")
        commit_file_safe(Path(updated), Path(original))
        recovered.append(original)
    return recovered
