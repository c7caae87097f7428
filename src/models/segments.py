"""
Content segment models

Segments are typed fragments of one slide body in document order. They are
derived for each render pass and never stored on the Slide.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class TextSegment:
    """Markdown prose between code blocks and images"""
    text: str


@dataclass
class CodeSegment:
    """
    Fenced code block

    Attributes:
        language: Tag after the opening backticks ("" if none)
        code: Raw code, never interpreted as slide markup
    """
    language: str
    code: str


@dataclass
class ImageSegment:
    """
    Image reference ![alt](path){width=N}

    Attributes:
        alt: Alternative text (shown when the image cannot be loaded)
        path: Local path (relative to the document) or http(s) URL
        width: Requested width in terminal columns, None for the default
    """
    alt: str
    path: str
    width: Optional[int] = None


Segment = Union[TextSegment, CodeSegment, ImageSegment]
