"""
Slide classifier

Selects the render path of a slide, in precedence order:

    TITLE     a single "# text" line
    SECTION   a single "## text" line
    COLUMNS   a line holding only ||| outside code fences
    IMAGE     an image outside code fences plus some other text
    CONTENT   everything else

Title and section slides are checked here, before any rendering happens, so
that a heading slide carrying extra content fails with its slide number.
"""

import re
from enum import Enum
from typing import Tuple

from ..models.slide import Slide
from .parser import fences_locate, lines_split
from .segments import images_locate


TITLE_RE = re.compile(r"^# (\S.*)$")
SECTION_RE = re.compile(r"^## (\S.*)$")
COLUMN_SEPARATOR_RE = re.compile(r"^[ \t]*\|\|\|[ \t]*$")


class SlideKind(Enum):
    TITLE = "title"
    SECTION = "section"
    COLUMNS = "columns"
    IMAGE = "image"
    CONTENT = "content"


class ClassificationError(Exception):
    """Raised when a slide violates the contract of its render path"""
    pass


def heading_text(content: str) -> str:
    """
    Text of a title or section slide

    Example:
        >>> heading_text("## World")
        'World'
    """
    line = content.strip()
    match = TITLE_RE.match(line) or SECTION_RE.match(line)
    return match.group(1).strip() if match else line.lstrip("#").strip()


def columns_present(content: str) -> bool:
    """True when a ||| separator line occurs outside fenced code"""
    fences = fences_locate(content)
    offset = 0
    for line in lines_split(content):
        if COLUMN_SEPARATOR_RE.match(line.rstrip("\r\n")):
            if not any(fence.contains(offset) for fence in fences):
                return True
        offset += len(line)
    return False


def slide_classify(slide: Slide) -> SlideKind:
    """
    Classify a slide into exactly one render path.

    Args:
        slide: Parsed slide

    Returns:
        SlideKind

    Raises:
        ClassificationError: A heading slide with more than its heading line

    Example:
        >>> slide_classify(Slide(number=1, content="# Hello"))
        <SlideKind.TITLE: 'title'>
    """
    if slide.is_blank:
        return SlideKind.CONTENT

    content = slide.content.strip()
    lines = [line for line in content.split("\n") if line.strip()]

    if lines and all(line.lstrip().startswith("#") for line in lines):
        for kind, pattern in ((SlideKind.TITLE, TITLE_RE), (SlideKind.SECTION, SECTION_RE)):
            if not pattern.match(lines[0]):
                continue
            if len(lines) > 1:
                raise ClassificationError(
                    f"slide {slide.number} (line {slide.line_number}): "
                    f"{kind.value} slide must hold a single heading line, found {len(lines)} lines"
                )
            return kind

    if columns_present(content):
        return SlideKind.COLUMNS

    images = images_locate(content)
    if images:
        remainder = content
        for match in reversed(images):
            remainder = remainder[:match.start()] + remainder[match.end():]
        if remainder.strip():
            return SlideKind.IMAGE

    return SlideKind.CONTENT


def image_text_split(slide: Slide) -> Tuple[str, "re.Match[str]"]:
    """
    Separate the text panel from the first image of an IMAGE slide

    Returns:
        (text without image references, first image match)

    Raises:
        ClassificationError: No image reference outside fenced code
    """
    images = images_locate(slide.content)
    if not images:
        raise ClassificationError(f"slide {slide.number} (line {slide.line_number}): image slide has no image")

    text = slide.content
    for match in reversed(images):
        text = text[:match.start()] + text[match.end():]
    return text.strip(), images[0]
