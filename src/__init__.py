"""
termdown - Markdown presentations in the terminal

Presents a markdown document as a full-screen slide deck with figlet
headings, progressive bullets, code highlighting and images.
"""

__version__ = "1.0.0"

from .lib import Parser, SlideRenderer, Presenter, LOG, WARN, state_connectToLogger

__all__ = ["Parser", "SlideRenderer", "Presenter", "LOG", "WARN", "state_connectToLogger", "__version__"]
