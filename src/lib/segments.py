"""
Content segment parser

Decomposes one slide body into ordered Text / Code / Image segments and
filters progressive bullets for incremental reveal.

    * revealed one keypress at a time   (progressive bullet)
    - always visible                    (static bullet)

Hidden progressive bullets are replaced by blank lines instead of being
removed, so everything below them keeps its vertical position while the
slide is revealed step by step.
"""

import re
from typing import List, Optional, Tuple

from ..models.segments import Segment, TextSegment, CodeSegment, ImageSegment
from .parser import fences_locate, lines_split


IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)\)(?:\{width=(\d+)\})?")
PROGRESSIVE_BULLET_RE = re.compile(r"^\s*\*\s")
STATIC_BULLET_RE = re.compile(r"^\s*-\s")
HEADER_RE = re.compile(r"^###[ \t]+(\S.*?)\s*$")


def images_locate(text: str) -> List["re.Match[str]"]:
    """
    Image references outside fenced code, in document order.

    Example:
        >>> [m.group(2) for m in images_locate("![a](x.png)\\n```\\n![b](y.png)\\n```")]
        ['x.png']
    """
    fences = fences_locate(text)
    return [match for match in IMAGE_RE.finditer(text)
            if not any(fence.contains(match.start()) for fence in fences)]


def segments_parse(body: str) -> List[Segment]:
    """
    Split a slide body into typed segments in document order.

    Code fences and image references are located first and sorted by offset
    regardless of type; every gap between them becomes a Text segment.

    Args:
        body: Slide body (a leading ### header already removed)

    Returns:
        Segments in document order; [] for an empty body

    Example:
        >>> segments_parse("Intro\\n![logo](logo.png){width=20}")
        [TextSegment(text='Intro\\n'), ImageSegment(alt='logo', path='logo.png', width=20)]
    """
    if not body:
        return []

    matches: List[Tuple[int, int, Segment]] = []
    for fence in fences_locate(body):
        matches.append((fence.start, fence.end, CodeSegment(language=fence.language, code=fence.code)))
    for match in images_locate(body):
        width = int(match.group(3)) if match.group(3) else None
        matches.append((match.start(), match.end(), ImageSegment(alt=match.group(1), path=match.group(2), width=width)))

    if not matches:
        return [TextSegment(text=body)]

    matches.sort(key=lambda item: item[0])
    segments: List[Segment] = []
    position = 0
    for start, end, segment in matches:
        if start > position:
            segments.append(TextSegment(text=body[position:start]))
        segments.append(segment)
        position = end
    if position < len(body):
        segments.append(TextSegment(text=body[position:]))

    return segments


def header_split(content: str) -> Tuple[Optional[str], str]:
    """
    Separate a leading "### header" line from the rest of a slide.

    A slide without such a header is the normal case and returns
    (None, content).

    Example:
        >>> header_split("### Agenda\\n\\n* one")
        ('Agenda', '* one')
        >>> header_split("* one")
        (None, '* one')
    """
    stripped = content.strip()
    first, _, rest = stripped.partition("\n")
    match = HEADER_RE.match(first)
    if not match:
        return None, content
    return match.group(1), rest.strip()


def bullets_count(body: str) -> int:
    """
    Count progressive bullets outside fenced code.

    Example:
        >>> bullets_count("* one\\n* two\\n- three\\n```\\n* not a bullet\\n```")
        2
    """
    total = 0
    for segment in segments_parse(body):
        if isinstance(segment, TextSegment):
            total += sum(1 for line in lines_split(segment.text) if PROGRESSIVE_BULLET_RE.match(line))
    return total


class BulletReveal:
    """
    Progressive bullet filter for one render pass

    One instance is shared by all Text segments of a slide (and all of its
    columns) so that bullets are counted across the whole slide.

    Attributes:
        visible: Number of progressive bullets to show, None for all
        seen: Progressive bullets encountered so far
        shown: Progressive bullets that were within the visible threshold

    Example:
        >>> reveal = BulletReveal(visible=1)
        >>> reveal.text_filter("* one\\n* two\\n- three")
        '* one\\n\\n- three'
        >>> reveal.seen, reveal.shown
        (2, 1)
    """

    def __init__(self, visible: Optional[int] = None) -> None:
        self.visible = visible
        self.seen = 0
        self.shown = 0

    def line_filter(self, line: str) -> str:
        """Return the line, or "" for a progressive bullet beyond the threshold"""
        if not PROGRESSIVE_BULLET_RE.match(line):
            return line
        self.seen += 1
        if self.visible is None or self.seen <= self.visible:
            self.shown += 1
            return line
        return ""

    def text_filter(self, text: str) -> str:
        """Apply line_filter() to every line of a Text segment"""
        return "\n".join(self.line_filter(line) for line in text.split("\n"))
