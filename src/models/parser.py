"""
Parser-specific data models

Type-safe structures for parser operations and return values.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .settings import PresentationSettings


class SpanKind(Enum):
    """Kinds of line spans produced by the structural tokenizer"""
    TEXT = "text"
    FENCE = "fence"
    DELIMITER = "delimiter"


@dataclass
class Span:
    """
    A run of whole source lines with one structural meaning

    Produced by lib.parser.spans_tokenize() in a single pass over the text.
    Concatenating the `text` of all spans of a document reproduces the
    document exactly.

    Attributes:
        kind: TEXT, FENCE (opening ``` line through closing ``` line) or
              DELIMITER (a ---, ___ or *** slide separator line)
        text: Source text of the span, including line endings
        line: 1-based source line number of the first line of the span

    Example:
        For "a\\n---\\nb" starting at line 1:
        [Span(TEXT, "a\\n", 1), Span(DELIMITER, "---\\n", 2), Span(TEXT, "b", 3)]
    """
    kind: SpanKind
    text: str
    line: int


@dataclass
class Fence:
    """
    Location of a fenced code block inside a string

    Returned by lib.parser.fences_locate(). Offsets are character positions
    in the scanned string: `start` is the first character of the opening
    ``` line and `end` is one past the last character of the closing ```
    line (its line ending is not included).

    Attributes:
        start: Offset of the opening fence line
        end: Offset just past the closing fence line
        language: Language tag after the opening backticks ("" if none)
        code: Lines between the fences, joined with newlines
        line: 0-based line index of the opening fence within the string
        lines: Number of source lines covered, both fence lines included
    """
    start: int
    end: int
    language: str
    code: str
    line: int = 0
    lines: int = 2

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass
class FrontmatterResult:
    """
    Result of resolving the leading frontmatter block

    Returned by lib.frontmatter.frontmatter_resolve().

    Attributes:
        settings: Defaults overwritten by every accepted frontmatter entry
        body: Document text after the closing delimiter (or all of it)
        body_start_line: 1-based line number where `body` starts
        warnings: Messages for discarded entries
    """
    settings: PresentationSettings
    body: str
    body_start_line: int = 1
    warnings: List[str] = field(default_factory=list)


@dataclass
class ExtractedOverrides:
    """
    Result of extracting <!-- key: value --> override comments from a slide

    Returned by lib.parser.overrides_extract().

    Attributes:
        content: Slide text with every recognized override comment removed
                 (lines left empty by the removal are dropped)
        overrides: Canonical option name -> coerced value (last one wins)
        warnings: Messages for unknown keys and rejected values

    Example:
        Input: "<!-- pagination: false -->\\n# Hello"
        Result: ExtractedOverrides(
            content="# Hello",
            overrides={"pagination": False},
            warnings=[]
        )
    """
    content: str
    overrides: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
