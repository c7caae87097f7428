"""
Terminal rendering toolkit

Builds frames out of styled runs. A frame is a list of lines, a line is a
list of Run objects; nothing in this module touches the terminal, which lets
the renderer be tested without curses. lib.terminal puts frames on screen.

Provides:
- Bordered panels in several border styles
- Figlet headings with font fallback lists
- Side by side grids for multi-column slides
- Inline markdown: **bold**, *italic*, `code`, [color]tags[/color]
- Pygments token colouring for fenced code
- Image loading (local file or URL) and half-block rasterising
"""

import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union
from urllib.parse import urljoin, urlparse

import requests
from PIL import Image
from pyfiglet import Figlet, FontNotFound
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.token import Token
from pygments.util import ClassNotFound

from .layout import STYLE_NAMES, COMMENT_RE
from .lexer import DeckLexer
from .log import LOG


Color = Union[str, int]

BORDER_CHARS: Dict[str, str] = {
    # top-left, top-right, bottom-left, bottom-right, horizontal, vertical
    "rounded": "╭╮╰╯─│",
    "square": "┌┐└┘─│",
    "heavy": "┏┓┗┛━┃",
    "double": "╔╗╚╝═║",
    "ascii": "++++-|",
    "none": "      ",
}

ATTRIBUTE_NAMES = ("bold", "italic", "underline", "dim", "reverse")

INLINE_RE = re.compile(
    r"(?P<comment>" + COMMENT_RE.pattern + r")"
    r"|\[(?P<close>/?)(?P<tag>" + "|".join(STYLE_NAMES) + r")?\]"
    r"|\*\*(?P<strong>.+?)\*\*"
    r"|`(?P<code>[^`\n]+)`"
    r"|(?<![\w*])\*(?=\S)(?P<em>[^*\n]+?)(?<=\S)\*(?![\w*])"
)

TOKEN_COLORS: List[Tuple[Any, Optional[Color], FrozenSet[str]]] = [
    (Token.Comment, "blue", frozenset({"dim"})),
    (Token.Keyword, "magenta", frozenset({"bold"})),
    (Token.Name.Function, "blue", frozenset()),
    (Token.Name.Class, "yellow", frozenset({"bold"})),
    (Token.Name.Decorator, "magenta", frozenset()),
    (Token.Name.Attribute, "cyan", frozenset()),
    (Token.Name.Builtin, "cyan", frozenset()),
    (Token.Literal.String, "green", frozenset()),
    (Token.Literal.Number, "yellow", frozenset()),
    (Token.Operator, "red", frozenset()),
    (Token.Generic.Heading, "yellow", frozenset({"bold"})),
    (Token.Generic.Subheading, "cyan", frozenset({"bold"})),
    (Token.Generic.Strong, None, frozenset({"bold"})),
    (Token.Punctuation, "white", frozenset()),
]


class ImageUnavailable(Exception):
    """Raised when an image cannot be fetched or decoded"""
    pass


@dataclass(frozen=True)
class Run:
    """
    A stretch of text drawn with one style

    Attributes:
        text: Characters to draw (no newlines)
        fg: Foreground color name or 256-color index, None for default
        bg: Background color name or 256-color index, None for default
        attrs: Subset of bold, italic, underline, dim, reverse
    """
    text: str
    fg: Optional[Color] = None
    bg: Optional[Color] = None
    attrs: FrozenSet[str] = frozenset()


Line = List[Run]


@dataclass
class Frame:
    """
    One full screen

    Attributes:
        lines: Screen rows, top to bottom
        background: Color behind every run that has no background of its own
    """
    lines: List[Line]
    background: Optional[Color] = None

    def text(self) -> str:
        """Screen content as plain text (for tests and debugging)"""
        return "\n".join(line_text(line) for line in self.lines)


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

def text_line(text: str, fg: Optional[Color] = None, bg: Optional[Color] = None,
              attrs: FrozenSet[str] = frozenset()) -> Line:
    return [Run(text, fg, bg, attrs)] if text else []


def line_width(line: Line) -> int:
    return sum(len(run.text) for run in line)


def line_text(line: Line) -> str:
    """Plain characters of a line, styles dropped"""
    return "".join(run.text for run in line)


def line_fit(line: Line, width: int, bg: Optional[Color] = None) -> Line:
    """
    Clip a line to `width` columns and pad it with spaces up to `width`.

    Example:
        >>> line_text(line_fit(text_line("abcdef"), 4))
        'abcd'
        >>> line_text(line_fit(text_line("ab"), 4))
        'ab  '
    """
    fitted: Line = []
    remaining = max(0, width)
    for run in line:
        if remaining <= 0:
            break
        if len(run.text) > remaining:
            fitted.append(Run(run.text[:remaining], run.fg, run.bg, run.attrs))
            remaining = 0
        else:
            fitted.append(run)
            remaining -= len(run.text)
    if remaining > 0:
        fitted.append(Run(" " * remaining, None, bg))
    return fitted


def line_shift(line: Line, columns: int) -> Line:
    """Prefix a line with `columns` spaces"""
    if columns <= 0:
        return list(line)
    return [Run(" " * columns)] + list(line)


def size_measure(lines: Sequence[Line]) -> Tuple[int, int]:
    """
    Rendered (width, height) of a block of lines.

    Example:
        >>> size_measure([text_line("abc"), text_line("a")])
        (3, 2)
    """
    if not lines:
        return 0, 0
    return max(line_width(line) for line in lines), len(lines)


# ---------------------------------------------------------------------------
# Panels and grids
# ---------------------------------------------------------------------------

def panel_draw(
    lines: Sequence[Line],
    width: int,
    height: int,
    style: str = "rounded",
    color: Optional[Color] = None,
    padding: int = 1,
    bg: Optional[Color] = None,
) -> List[Line]:
    """
    Surround content with a border.

    Args:
        lines: Interior content (clipped to the interior)
        width: Total width including the border
        height: Total height including the border
        style: One of BORDER_CHARS
        color: Border color
        padding: Blank columns between border and content on each side
        bg: Background color for the whole panel

    Returns:
        Exactly `height` lines of exactly `width` columns
    """
    chars = BORDER_CHARS.get(style, BORDER_CHARS["rounded"])
    top_left, top_right, bottom_left, bottom_right, horizontal, vertical = chars
    if width < 2 or height < 2:
        return [line_fit([], width, bg) for _ in range(max(0, height))]

    inner = width - 2
    left = min(padding, inner)
    content_width = max(0, inner - 2 * padding)
    right = inner - left - content_width
    frame: List[Line] = [[Run(top_left + horizontal * inner + top_right, color, bg)]]
    for row in range(height - 2):
        content = lines[row] if row < len(lines) else []
        frame.append(
            [Run(vertical, color, bg), Run(" " * left, None, bg)]
            + line_fit(content, content_width, bg)
            + [Run(" " * right, None, bg), Run(vertical, color, bg)]
        )
    frame.append([Run(bottom_left + horizontal * inner + bottom_right, color, bg)])
    return frame


def grid_draw(columns: Sequence[Sequence[Line]], widths: Sequence[int], gutter: int = 2) -> List[Line]:
    """
    Place blocks of lines side by side.

    Each column is clipped and padded to its width; shorter columns are
    padded with blank lines.
    """
    rows = max((len(column) for column in columns), default=0)
    grid: List[Line] = []
    for row in range(rows):
        line: Line = []
        for index, (column, width) in enumerate(zip(columns, widths)):
            if index:
                line.append(Run(" " * gutter))
            line.extend(line_fit(column[row] if row < len(column) else [], width))
        grid.append(line)
    return grid


# ---------------------------------------------------------------------------
# Figlet
# ---------------------------------------------------------------------------

def figlet_render(text: str, fonts: str, width: int) -> List[str]:
    """
    Render a heading as figlet art.

    Args:
        text: Heading text
        fonts: Font name or comma list of fallbacks ("doom,standard")
        width: Columns the art may use

    Returns:
        Art lines without trailing blank lines; the plain text when no font
        in the list is available
    """
    for font in [name.strip() for name in fonts.split(",") if name.strip()]:
        try:
            art = Figlet(font=font, width=max(1, width)).renderText(text)
        except FontNotFound:
            LOG(f"figlet font '{font}' not found", level=2)
            continue
        lines = art.rstrip("\n").split("\n")
        while lines and not lines[-1].strip():
            lines.pop()
        if lines:
            return lines
    return [text]


# ---------------------------------------------------------------------------
# Inline markdown
# ---------------------------------------------------------------------------

def inline_render(text: str, fg: Optional[Color] = None, attrs: FrozenSet[str] = frozenset()) -> Line:
    """
    Turn one line of slide text into styled runs.

    Color tags nest: [red]a [bold]b[/bold][/red]; [/] closes the innermost
    tag. HTML comments are hidden.

    Example:
        >>> [(r.text, r.attrs) for r in inline_render("a **b**")]
        [('a ', frozenset()), ('b', frozenset({'bold'}))]
    """
    stack: List[Tuple[Optional[Color], FrozenSet[str]]] = [(fg, attrs)]
    line: Line = []

    def emit(chunk: str, extra: FrozenSet[str] = frozenset(), color: Optional[Color] = None) -> None:
        if chunk:
            current_fg, current_attrs = stack[-1]
            line.append(Run(chunk, color or current_fg, None, current_attrs | extra))

    position = 0
    for match in INLINE_RE.finditer(text):
        emit(text[position:match.start()])
        position = match.end()
        if match.group("comment"):
            continue
        if match.group("strong") is not None:
            emit(match.group("strong"), frozenset({"bold"}))
        elif match.group("code") is not None:
            emit(match.group("code"), color="green")
        elif match.group("em") is not None:
            emit(match.group("em"), frozenset({"italic"}))
        elif match.group("close"):
            if len(stack) > 1:
                stack.pop()
        elif match.group("tag"):
            tag = match.group("tag")
            current_fg, current_attrs = stack[-1]
            if tag in ATTRIBUTE_NAMES:
                stack.append((current_fg, current_attrs | {tag}))
            else:
                stack.append((tag, current_attrs))
        else:
            emit(match.group(0))
    emit(text[position:])
    return line


# ---------------------------------------------------------------------------
# Code
# ---------------------------------------------------------------------------

def lexer_get(language: str) -> Lexer:
    """Pygments lexer for a fence language tag; plain text when unknown"""
    if not language:
        return TextLexer()
    if language.lower() in ("termdown", "td"):
        return DeckLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        LOG(f"no lexer for '{language}', showing plain text", level=2)
        return TextLexer()


def token_style(ttype: Any) -> Tuple[Optional[Color], FrozenSet[str]]:
    for parent, color, attrs in TOKEN_COLORS:
        if ttype in parent:
            return color, attrs
    return None, frozenset()


def code_render(code: str, language: str = "") -> List[Line]:
    """
    Syntax-color a code block.

    Returns:
        One Line per source line (tabs expanded)
    """
    lines: List[Line] = [[]]
    for ttype, value in lexer_get(language).get_tokens(code):
        color, attrs = token_style(ttype)
        for index, part in enumerate(value.expandtabs(4).split("\n")):
            if index:
                lines.append([])
            if part:
                lines[-1].append(Run(part, color, None, attrs))
    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    return lines


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def url_is(ref: str) -> bool:
    return urlparse(ref).scheme in ("http", "https")


def image_locate(ref: str, base_dir: str = ".") -> str:
    """
    Resolve an image reference against the deck location.

    Example:
        >>> image_locate("img/a.png", "https://example.org/talk/")
        'https://example.org/talk/img/a.png'
    """
    if url_is(ref):
        return ref
    if url_is(base_dir):
        return urljoin(base_dir if base_dir.endswith("/") else base_dir + "/", ref)
    path = Path(ref).expanduser()
    if not path.is_absolute():
        path = Path(base_dir) / path
    return str(path)


def image_open(ref: str, base_dir: str = ".", timeout: float = 10.0) -> Image.Image:
    """
    Load and decode an image.

    Args:
        ref: Path or URL from the slide
        base_dir: Directory or URL relative references resolve against
        timeout: Seconds allowed for a remote fetch

    Returns:
        RGB Pillow image

    Raises:
        ImageUnavailable: Missing file, network failure or undecodable data
    """
    location = image_locate(ref, base_dir)
    try:
        if url_is(location):
            LOG(f"fetching image {location}", level=2)
            response = requests.get(location, timeout=timeout)
            response.raise_for_status()
            image = Image.open(BytesIO(response.content))
        else:
            image = Image.open(location)
        image.load()
        return image.convert("RGB")
    except (OSError, ValueError, requests.RequestException) as e:
        raise ImageUnavailable(f"{ref}: {e}") from e


def image_aspect(image: Image.Image) -> float:
    """Terminal rows per column for an image drawn with half blocks"""
    width, height = image.size
    return (height / width) / 2 if width else 1.0


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """Map an RGB tuple (0-255) to the nearest 256-color ANSI index."""
    r_ = int(round(r / 255 * 5))
    g_ = int(round(g / 255 * 5))
    b_ = int(round(b / 255 * 5))
    return 16 + 36 * r_ + 6 * g_ + b_


def image_render(image: Image.Image, width: int, height: int) -> List[Line]:
    """
    Rasterise an image into `height` lines of `width` half-block cells.

    Each cell shows two pixels: the upper one as background and the lower
    one as the foreground of a lower half block.
    """
    scaled = image.resize((max(1, width), max(1, height) * 2), Image.LANCZOS)
    lines: List[Line] = []
    for y in range(max(1, height)):
        line: Line = []
        for x in range(max(1, width)):
            top = rgb_to_ansi256(*scaled.getpixel((x, y * 2))[:3])
            bottom = rgb_to_ansi256(*scaled.getpixel((x, y * 2 + 1))[:3])
            line.append(Run("▄", bottom, top))
        lines.append(line)
    return lines
