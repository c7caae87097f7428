"""
termdown library

Parsing, classification, layout, navigation and terminal rendering of
markdown slide decks.
"""

from .log import LOG, WARN, state_connectToLogger
from .options import registry
from .parser import Parser, ParseError
from .classifier import SlideKind, ClassificationError, slide_classify
from .navigation import KeyMap, state_transition
from .renderer import SlideRenderer
from .presenter import Presenter, deck_validate

__all__ = [
    "LOG",
    "WARN",
    "state_connectToLogger",
    "registry",
    "Parser",
    "ParseError",
    "SlideKind",
    "ClassificationError",
    "slide_classify",
    "KeyMap",
    "state_transition",
    "SlideRenderer",
    "Presenter",
    "deck_validate",
]
