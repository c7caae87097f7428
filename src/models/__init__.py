"""
Models package for termdown

Contains data structures and type definitions for the presentation pipeline.
"""

from .state import ProgramState, pipeline
from .options import OptionSpec, OptionCategory, OptionResult
from .settings import PresentationSettings
from .parser import Span, SpanKind, Fence, FrontmatterResult, ExtractedOverrides
from .slide import Slide, SlideMeasurements, Deck
from .segments import Segment, TextSegment, CodeSegment, ImageSegment
from .navigation import Action, Mode, NavigationState
from .source import DocumentSource

__all__ = [
    "ProgramState",
    "pipeline",
    "OptionSpec",
    "OptionCategory",
    "OptionResult",
    "PresentationSettings",
    "Span",
    "SpanKind",
    "Fence",
    "FrontmatterResult",
    "ExtractedOverrides",
    "Slide",
    "SlideMeasurements",
    "Deck",
    "Segment",
    "TextSegment",
    "CodeSegment",
    "ImageSegment",
    "Action",
    "Mode",
    "NavigationState",
    "DocumentSource",
]
