"""
Document source model
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class DocumentSource:
    """
    A deck document ready to be read

    Yielded by lib.source.source_open(). For a remote document `path` is a
    temporary copy that only exists inside the `with` block.

    Attributes:
        path: Local file holding the document
        label: Path or URL as given by the user (used in messages)
        base_dir: Directory or URL relative image references resolve against
        remote: True when the document was downloaded
    """
    path: Path
    label: str
    base_dir: str
    remote: bool = False
