"""
Layout planner

Pure geometry over already-measured content. Nothing here draws, reads the
terminal or touches a slide; the renderer feeds in sizes and gets back
paddings, widths and split content.
"""

import math
import re
from typing import List, Optional, Tuple

from .parser import fences_locate, lines_split


BORDER_HEIGHT = 2
COLUMN_GUTTER = 2
PANEL_RATIO = 0.6
IMAGE_WIDTH_RATIO = 0.8
IMAGE_ALLOWANCE = 4
PLACEHOLDER_HEIGHT = 5

STYLE_NAMES = (
    "bold", "italic", "underline", "dim", "reverse",
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white", "default",
)
COMMENT_RE = re.compile(r"<!--.*?-->")
COLUMN_SEPARATOR_RE = re.compile(r"^[ \t]*\|\|\|[ \t]*$")


def padding_vertical(
    viewport: int,
    content: int,
    border: int = BORDER_HEIGHT,
    keep_prompt: bool = False,
) -> Tuple[int, int]:
    """
    Split the free rows around a content block.

    An odd remainder puts the extra row on top.

    Args:
        viewport: Rows available
        content: Rows the content occupies
        border: Rows taken by the border (top + bottom)
        keep_prompt: Reserve at least one row at the bottom

    Returns:
        (top, bottom), both >= 0

    Example:
        >>> padding_vertical(20, 5)
        (7, 6)
        >>> padding_vertical(5, 10, keep_prompt=True)
        (0, 1)
    """
    remaining = viewport - content - border
    top = max(0, math.ceil(remaining / 2))
    bottom = max(0, remaining - top)
    if keep_prompt:
        bottom = max(1, bottom)
    return top, bottom


def padding_horizontal(max_len: int, available: int) -> int:
    """
    Left padding that centers a block of the given width.

    Example:
        >>> padding_horizontal(10, 41)
        15
    """
    return max(0, (available - max_len) // 2)


def columns_split(content: str) -> List[str]:
    """
    Split a multi-column slide on its ||| lines.

    Separators inside fenced code do not split. Empty columns are kept.

    Example:
        >>> columns_split("left\\n|||\\nright")
        ['left', 'right']
    """
    fences = fences_locate(content)
    columns: List[str] = []
    current: List[str] = []
    offset = 0
    for line in lines_split(content):
        inside = any(fence.contains(offset) for fence in fences)
        if not inside and COLUMN_SEPARATOR_RE.match(line.rstrip("\r\n")):
            columns.append("".join(current).strip())
            current = []
        else:
            current.append(line)
        offset += len(line)
    columns.append("".join(current).strip())
    return columns


def column_widths(total: int, count: int, gutter: int = COLUMN_GUTTER) -> List[int]:
    """
    Equal column widths separated by a fixed gutter.

    Example:
        >>> column_widths(80, 3)
        [25, 25, 25]
    """
    if count <= 0:
        return []
    share = max(1, (total - gutter * (count - 1)) // count)
    return [share] * count


def panels_split(width: int) -> Tuple[int, int]:
    """
    60/40 split of an image slide into text (left) and image (right).

    Example:
        >>> panels_split(101)
        (60, 41)
    """
    left = int(width * PANEL_RATIO)
    return left, width - left


def panel_pad(lines: List[str], height: int) -> List[str]:
    """
    Center a panel's lines vertically within the full height.

    Example:
        >>> panel_pad(["a"], 4)
        ['', '', 'a', '']
    """
    top, bottom = padding_vertical(height, len(lines), border=0)
    return [""] * top + list(lines) + [""] * bottom


def image_width_plan(
    requested: Optional[int],
    panel_width: int,
    panel_height: int,
    aspect: float,
    ratio: float = IMAGE_WIDTH_RATIO,
    allowance: int = IMAGE_ALLOWANCE,
) -> Tuple[int, int]:
    """
    Size an image for its panel.

    Args:
        requested: {width=N} from the reference, or None
        panel_width: Columns of the panel
        panel_height: Rows of the panel
        aspect: Image rows per column once rasterised
        ratio: Share of the available width used when nothing is requested
        allowance: Columns and rows reserved for padding and border

    Returns:
        (width, height) in terminal cells

    Example:
        >>> image_width_plan(None, 54, 40, 0.5)
        (40, 20)
        >>> image_width_plan(200, 54, 12, 0.5)
        (16, 8)
    """
    available = max(1, panel_width - allowance)
    if requested:
        width = max(1, min(requested, available))
    else:
        width = max(1, int(available * ratio))

    budget = max(1, panel_height - allowance)
    if aspect > 0 and math.ceil(width * aspect) > budget:
        width = max(1, int(budget / aspect))
    height = max(1, math.ceil(width * aspect)) if aspect > 0 else 1
    return width, height


def placeholder_size(
    panel_width: int,
    panel_height: int,
    requested: Optional[int] = None,
    ratio: float = IMAGE_WIDTH_RATIO,
    allowance: int = IMAGE_ALLOWANCE,
) -> Tuple[int, int]:
    """
    Size of the box shown in place of an image that could not be loaded.

    Uses the same width rule as a real image so the slide keeps its layout.
    """
    width, _ = image_width_plan(requested, panel_width, panel_height, 0, ratio, allowance)
    height = min(PLACEHOLDER_HEIGHT, max(3, panel_height - allowance))
    return width, height
