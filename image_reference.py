"""
Image reference extraction for collect-images.

Each supported syntax is matched on its own against a single line of text.
Only the first occurrence of each syntax on a line is reported.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class SyntaxKind(Enum):
    """Markup syntax an image reference was written in."""
    HTML_TAG = "html"
    MARKDOWN_INLINE = "markdown"


# <img ...> or <img ... />
IMG_TAG_PATTERN = re.compile(r'<img\s+([^>]*)[/]?>')
IMG_SRC_ATTRIBUTE_PATTERN = re.compile(r'src="([^"]+)"')
IMG_ALT_ATTRIBUTE_PATTERN = re.compile(r'alt="([^"]+)"')
IMG_WIDTH_ATTRIBUTE_PATTERN = re.compile(r'width="([^"]+)"')

# ![alt](locator)
MARKDOWN_IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\(([^\)]+)\)')


@dataclass
class ImageReference:
    """Represents one matched image construct on a line."""
    syntax_kind: SyntaxKind
    source_locator: Optional[str]  # src attribute or markdown target, as written
    alt_text: Optional[str]
    width: Optional[str]  # HTML only
    raw_match: str  # Full matched text, used for substitution

    @property
    def is_malformed(self) -> bool:
        """True when the markup carries no source locator."""
        return not self.source_locator

    def render(self, locator: str) -> str:
        """
        Build fresh markup of the same syntax pointing at a new locator.

        Args:
            locator: The source locator to write into the markup

        Returns:
            str: The rebuilt markup, keeping the original alt text and width
        """
        if self.syntax_kind is SyntaxKind.HTML_TAG:
            alt = f' alt="{self.alt_text}"' if self.alt_text else ''
            width = f' width="{self.width}"' if self.width else ''
            return f'<img src="{locator}"{alt}{width} />'
        return f'![{self.alt_text or ""}]({locator})'


def _attribute(pattern: re.Pattern, attributes: str) -> Optional[str]:
    match = pattern.search(attributes)
    return match.group(1) if match else None


def extract_html_reference(line: str) -> Optional[ImageReference]:
    """
    Find the first HTML image tag on a line.

    Args:
        line: A single line of the document, without its line ending

    Returns:
        ImageReference: The decoded tag, or None if the line has no image tag.
        The source locator is None when the tag has no src attribute.
    """
    match = IMG_TAG_PATTERN.search(line)
    if not match:
        return None

    attributes = match.group(1)
    return ImageReference(
        syntax_kind=SyntaxKind.HTML_TAG,
        source_locator=_attribute(IMG_SRC_ATTRIBUTE_PATTERN, attributes),
        alt_text=_attribute(IMG_ALT_ATTRIBUTE_PATTERN, attributes),
        width=_attribute(IMG_WIDTH_ATTRIBUTE_PATTERN, attributes),
        raw_match=match.group(0),
    )


def extract_markdown_reference(line: str) -> Optional[ImageReference]:
    """
    Find the first inline Markdown image on a line.

    Args:
        line: A single line of the document, without its line ending

    Returns:
        ImageReference: The decoded image, or None if the line has none
    """
    match = MARKDOWN_IMAGE_PATTERN.search(line)
    if not match:
        return None

    return ImageReference(
        syntax_kind=SyntaxKind.MARKDOWN_INLINE,
        source_locator=match.group(2),
        alt_text=match.group(1),
        width=None,
        raw_match=match.group(0),
    )


def extract_references(line: str) -> List[ImageReference]:
    """
    Extract the image references of both syntaxes from a line.

    HTML is tried first, then Markdown. Both are matched against the same
    original line, so a line can yield one reference of each kind.

    Args:
        line: A single line of the document

    Returns:
        List[ImageReference]: Zero, one or two references in processing order
    """
    references = []
    for extractor in (extract_html_reference, extract_markdown_reference):
        reference = extractor(line)
        if reference is not None:
            references.append(reference)
    return references
