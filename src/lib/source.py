"""
Document source resolution

A deck can be a local file or an http(s) URL. Remote documents are
downloaded into a temporary file that is removed when the presentation ends,
whichever way it ends.

Usage:
    with source_open("https://example.org/talk.md") as source:
        deck = Parser(source_read(source), source.label, base_dir=source.base_dir).parse()
"""

import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import urljoin

import requests

from ..config import appsettings
from ..models.source import DocumentSource
from .toolkit import url_is
from .log import LOG


class SourceError(Exception):
    """Raised when a document cannot be located, fetched or read"""
    pass


@contextmanager
def source_open(ref: str, timeout: Optional[float] = None) -> Iterator[DocumentSource]:
    """
    Resolve a document reference for the duration of a `with` block.

    Args:
        ref: File path or http(s) URL
        timeout: Seconds allowed for a download (AppSettings.remote_timeout
                 when None)

    Yields:
        DocumentSource

    Raises:
        SourceError: Missing file, or a failed download
    """
    if not url_is(ref):
        path = Path(ref).expanduser()
        if not path.is_file():
            raise SourceError(f"{ref}: no such file")
        yield DocumentSource(path=path, label=ref, base_dir=str(path.resolve().parent))
        return

    LOG(f"fetching {ref}", level=2)
    try:
        response = requests.get(ref, timeout=timeout if timeout is not None else appsettings.remote_timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceError(f"{ref}: {e}") from e

    with tempfile.NamedTemporaryFile("wb", prefix="termdown-", suffix=".md", delete=False) as handle:
        handle.write(response.content)
        path = Path(handle.name)
    LOG(f"downloaded {ref} to {path}", level=3)

    try:
        yield DocumentSource(path=path, label=ref, base_dir=urljoin(ref, "."), remote=True)
    finally:
        path.unlink(missing_ok=True)
        LOG(f"removed temporary copy {path}", level=3)


def source_read(source: DocumentSource) -> str:
    """
    Read the document text.

    Raises:
        SourceError: The file cannot be read or is not UTF-8
    """
    try:
        return source.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"{source.label}: {e}") from e
