"""
Parser for termdown markdown decks

Transforms a markdown document into a Deck of numbered Slides.

The parser operates in three phases:
1. Frontmatter: split off the leading ---/--- settings block
2. Tokenizing: one pass over the body producing typed line spans
   (fenced code / slide delimiter / text)
3. Slide building: group spans between delimiters, trim, drop empty chunks,
   detect blank slides, extract per-slide override comments, number slides

Key features:
- Fenced code is recognized before delimiters, so a --- inside a code
  example never splits a slide and an override comment inside one is
  never applied
- No placeholder substitution: spans carry the original text unchanged
- Source line tracking for diagnostics

Example:
    >>> deck = Parser("# Hello\\n\\n---\\n\\n## World").parse()
    >>> [slide.content for slide in deck.slides]
    ['# Hello', '## World']
    >>> [slide.line_number for slide in deck.slides]
    [1, 4]
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..models.parser import Span, SpanKind, Fence, ExtractedOverrides
from ..models.settings import PresentationSettings
from ..models.slide import Slide, Deck
from .frontmatter import frontmatter_resolve
from .options import registry
from .log import LOG, WARN


FENCE_OPEN_RE = re.compile(r"^[ \t]*```[ \t]*([^\s`]*)")
FENCE_CLOSE_RE = re.compile(r"^[ \t]*```[ \t]*$")
SLIDE_DELIMITERS = ("---", "___", "***")
OVERRIDE_RE = re.compile(r"<!--\s*([A-Za-z][\w-]*)\s*:\s*(.*?)\s*-->")
BLANK_RE = re.compile(r"<!--\s*intentionally\s+blank\s*-->", re.IGNORECASE)


class ParseError(Exception):
    """Raised when a document cannot be turned into slides"""
    pass


def lines_split(text: str) -> List[str]:
    """
    Split text into lines that keep their line endings.

    Joining the result reproduces `text` exactly.

    Example:
        >>> lines_split("a\\nb\\n")
        ['a\\n', 'b\\n']
    """
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def fences_scan(lines: List[str]) -> Tuple[List[Fence], Optional[int]]:
    """
    Find fenced code blocks in a list of lines.

    A fence opens on a line starting with ``` (optional language tag) and
    closes on the next line holding only ```. An opening line without a
    matching close is not a fence.

    Args:
        lines: Lines as returned by lines_split()

    Returns:
        (fences, unclosed) where unclosed is the 0-based index of a trailing
        opening line that was never closed, or None
    """
    fences: List[Fence] = []
    offset = 0
    opened: Optional[Tuple[int, int, str]] = None
    body: List[str] = []

    for index, line in enumerate(lines):
        content = line.rstrip("\r\n")
        if opened is None:
            match = FENCE_OPEN_RE.match(content)
            if match:
                opened = (offset, index, match.group(1))
                body = []
        elif FENCE_CLOSE_RE.match(content):
            start, first, language = opened
            fences.append(Fence(
                start=start,
                end=offset + len(content),
                language=language,
                code="\n".join(body),
                line=first,
                lines=index - first + 1,
            ))
            opened = None
        else:
            body.append(content)
        offset += len(line)

    return fences, (opened[1] if opened is not None else None)


def fences_locate(text: str) -> List[Fence]:
    """
    Locate every closed fenced code block in a string.

    Example:
        >>> [f.language for f in fences_locate("x\\n```py\\nprint(1)\\n```\\n")]
        ['py']
    """
    fences, _ = fences_scan(lines_split(text))
    return fences


def spans_tokenize(text: str, start_line: int = 1, warnings: Optional[List[str]] = None) -> List[Span]:
    """
    Tokenize text into TEXT, FENCE and DELIMITER spans in one pass.

    Args:
        text: Document body
        start_line: 1-based source line of the first line of `text`
        warnings: Optional list receiving a message for an unclosed fence

    Returns:
        Spans in document order; their texts concatenate to `text`

    Example:
        >>> [s.kind.value for s in spans_tokenize("a\\n```\\n---\\n```\\n---\\nb")]
        ['text', 'fence', 'delimiter', 'text']
    """
    lines = lines_split(text)
    fences, unclosed = fences_scan(lines)
    if unclosed is not None and warnings is not None:
        warnings.append(f"line {start_line + unclosed}: code fence is never closed, treating it as text")

    fence_at: Dict[int, Fence] = {fence.line: fence for fence in fences}
    spans: List[Span] = []
    buffer: List[str] = []
    buffer_line = start_line

    def buffer_flush() -> None:
        if buffer:
            spans.append(Span(SpanKind.TEXT, "".join(buffer), buffer_line))
            buffer.clear()

    index = 0
    while index < len(lines):
        fence = fence_at.get(index)
        if fence is not None:
            buffer_flush()
            spans.append(Span(SpanKind.FENCE, "".join(lines[index:index + fence.lines]), start_line + index))
            index += fence.lines
            continue

        if lines[index].rstrip() in SLIDE_DELIMITERS:
            buffer_flush()
            spans.append(Span(SpanKind.DELIMITER, lines[index], start_line + index))
            index += 1
            continue

        if not buffer:
            buffer_line = start_line + index
        buffer.append(lines[index])
        index += 1

    buffer_flush()
    return spans


def overrides_extract(text: str, start_line: int = 1) -> ExtractedOverrides:
    """
    Extract and strip <!-- key: value --> override comments.

    Only comments outside fenced code are considered. A comment is
    recognized when its key names a known option (after alias
    normalization) and its value matches that option's token pattern;
    recognized comments are removed and lines left empty by the removal are
    dropped. Anything else stays in the text and produces a warning.
    Running this again on its own output changes nothing.

    Args:
        text: Slide text
        start_line: 1-based source line of the first line (for warnings)

    Returns:
        ExtractedOverrides with cleaned content, overrides and warnings

    Example:
        Input: "# Slide\\n<!-- pagination: false -->"
        Output: ExtractedOverrides(content="# Slide\\n", overrides={"pagination": False})
    """
    overrides: Dict[str, Any] = {}
    warnings: List[str] = []
    parts: List[str] = []

    for span in spans_tokenize(text, start_line):
        if span.kind != SpanKind.TEXT:
            parts.append(span.text)
            continue

        for offset, line in enumerate(lines_split(span.text)):
            recognized = False

            def comment_apply(match: "re.Match[str]") -> str:
                nonlocal recognized
                result = registry.option_resolve(match.group(1), match.group(2), pattern_check=True)
                if not result.ok:
                    warnings.append(f"line {span.line + offset}: override {result.warning}, ignored")
                    return match.group(0)
                overrides[result.key] = result.value
                recognized = True
                return ""

            stripped = OVERRIDE_RE.sub(comment_apply, line)
            if recognized and not stripped.strip():
                continue
            parts.append(stripped)

    return ExtractedOverrides(content="".join(parts), overrides=overrides, warnings=warnings)


class Parser:
    """
    Parser for termdown markdown decks

    Handles:
    - Optional frontmatter settings block
    - Slide delimiters ---, ___ and *** (whole lines, outside code fences)
    - Intentionally blank slides
    - Per-slide override comments
    - Warnings and errors with source path and line numbers
    """

    def __init__(
        self,
        source: str,
        path: str = "<string>",
        settings: Optional[PresentationSettings] = None,
        base_dir: str = ".",
    ) -> None:
        """
        Initialize parser with source text

        Args:
            source: Raw markdown document
            path: Path or URL of the document (used in messages)
            settings: Settings to start from before the frontmatter is
                      applied (registry defaults when None, or a theme)
            base_dir: Directory or URL relative image references resolve against

        Attributes:
            warnings: Accumulated non-fatal diagnostics
        """
        self.source = source
        self.path = path
        self.settings = settings
        self.base_dir = base_dir
        self.warnings: List[str] = []

    def parse(self) -> Deck:
        """
        Parse the document into a Deck

        Main entry point for parsing.

        Returns:
            Deck with resolved settings, slides numbered 1..N and warnings

        Raises:
            ParseError: Any unexpected failure, reported with the source path
        """
        try:
            resolved = frontmatter_resolve(self.source, self.settings)
            for message in resolved.warnings:
                self.warning_add(message)
            slides = self.slides_split(resolved.body, resolved.body_start_line)
        except Exception as e:
            raise ParseError(f"{self.path}: {e}") from e

        LOG(f"Parsed {len(slides)} slides from {self.path}", level=2)
        return Deck(
            settings=resolved.settings,
            slides=slides,
            warnings=list(self.warnings),
            source=self.path,
            base_dir=self.base_dir,
        )

    def slides_split(self, body: str, start_line: int = 1) -> List[Slide]:
        """
        Split the document body into numbered slides

        Args:
            body: Document text after the frontmatter
            start_line: 1-based source line where `body` starts

        Returns:
            Slides in document order, numbered densely from 1
        """
        if not body.strip():
            self.warning_add("document contains no slide content")
            return []

        tokenizer_warnings: List[str] = []
        spans = spans_tokenize(body, start_line, tokenizer_warnings)
        for message in tokenizer_warnings:
            self.warning_add(message)

        chunks = self.chunks_group(spans)
        if len(chunks) == 1:
            self.warning_add("no slide delimiters found, the entire document is a single slide")

        slides: List[Slide] = []
        next_line = start_line
        for chunk in chunks:
            line_number = next_line
            next_line += self.chunk_lineCount(chunk) + 1

            text = "".join(span.text for span in chunk)
            if not text.strip():
                continue

            trimmed = text.strip()

            if BLANK_RE.fullmatch(trimmed):
                slides.append(Slide(number=len(slides) + 1, content="", is_blank=True, line_number=line_number))
                continue

            extracted = overrides_extract(text, chunk[0].line)
            for message in extracted.warnings:
                self.warning_add(message)

            slides.append(Slide(
                number=len(slides) + 1,
                content=extracted.content.strip(),
                line_number=line_number,
                overrides=extracted.overrides,
            ))
            LOG(f"Slide {len(slides)} at line {line_number}: overrides {extracted.overrides}", level=3)

        return slides

    def chunks_group(self, spans: List[Span]) -> List[List[Span]]:
        """
        Group spans into chunks separated by DELIMITER spans

        Returns:
            One more chunk than there are delimiters (chunks may be empty)
        """
        chunks: List[List[Span]] = [[]]
        for span in spans:
            if span.kind == SpanKind.DELIMITER:
                chunks.append([])
            else:
                chunks[-1].append(span)
        return chunks

    def chunk_lineCount(self, chunk: List[Span]) -> int:
        """Number of source lines a chunk spans"""
        return sum(len(lines_split(span.text)) for span in chunk)

    def warning_add(self, message: str) -> None:
        """Record a warning and report it with the source path"""
        self.warnings.append(message)
        WARN(f"{self.path}: {message}")
