"""
Slide renderer

Turns a slide and its revealed bullet count into a Frame:

                    header (optional)
    ╭──────────────────────────────────────╮
    │        slide content, centered       │
    ╰──────────────────────────────────────╯
     footer                      pagination

The content block is measured once per slide with every bullet revealed and
the measurement is kept on the slide, so revealing bullets never moves
anything that is already on screen.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image

from ..config import appsettings
from ..models.segments import TextSegment, CodeSegment, ImageSegment
from ..models.settings import PresentationSettings
from ..models.slide import Slide, SlideMeasurements
from .classifier import SlideKind, slide_classify, heading_text, image_text_split
from .layout import (
    BORDER_HEIGHT,
    COLUMN_GUTTER,
    padding_vertical,
    padding_horizontal,
    columns_split,
    column_widths,
    panels_split,
    panel_pad,
    image_width_plan,
    placeholder_size,
)
from .segments import BulletReveal, header_split, segments_parse
from .toolkit import (
    Color,
    Frame,
    Line,
    Run,
    ImageUnavailable,
    text_line,
    line_fit,
    line_shift,
    line_width,
    size_measure,
    panel_draw,
    grid_draw,
    figlet_render,
    inline_render,
    code_render,
    image_open,
    image_locate,
    image_aspect,
    image_render,
)
from .log import LOG, WARN


PROGRESSIVE_RE = re.compile(r"^(\s*)\*\s+(.*)$")
STATIC_RE = re.compile(r"^(\s*)-\s+(.*)$")
HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
QUOTE_RE = re.compile(r"^>\s?(.*)$")
BAR_WIDTH = 20


def color_get(value: Optional[str]) -> Optional[Color]:
    """Setting value -> toolkit color (None for the terminal default)"""
    if not value or value == "default":
        return None
    return value


class SlideRenderer:
    """
    Builds frames for one terminal size

    Attributes:
        settings: Global presentation settings
        width: Terminal columns
        height: Terminal rows
        base_dir: Directory or URL relative image references resolve against
        images: Image cache keyed by resolved location; failures are cached
                as ImageUnavailable so they are reported once
    """

    def __init__(
        self,
        settings: PresentationSettings,
        width: int,
        height: int,
        base_dir: str = ".",
    ) -> None:
        self.settings = settings
        self.width = width
        self.height = height
        self.base_dir = base_dir
        self.images: Dict[str, Union[Image.Image, ImageUnavailable]] = {}

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def frame_build(self, slide: Slide, reveal: Optional[int] = None, total: int = 1) -> Frame:
        """
        Render one slide.

        Args:
            slide: Slide to show
            reveal: Progressive bullets to show, None for all
            total: Number of slides in the deck (pagination)

        Returns:
            Frame of exactly `height` lines

        Raises:
            ClassificationError: The slide violates its render path
        """
        settings = slide.settings_effective(self.settings)
        interior_width, interior_height = self.interior_size(settings)

        measurements = slide.measurements_get(
            lambda s: self.slide_measure(s, settings, interior_width, interior_height)
        )
        lines = self.body_lines(slide, settings, reveal, interior_width, interior_height)

        top, _ = padding_vertical(interior_height, measurements.height, border=0)
        left = padding_horizontal(measurements.max_line_length, interior_width)
        content = [[] for _ in range(top)] + [line_shift(line, left) for line in lines]

        panel = panel_draw(
            content,
            self.width,
            self.panel_height(settings),
            style=settings["border_style"],
            color=color_get(settings["border_color"]),
        )
        return self.frame_assemble(panel, settings, slide.number, total)

    def frame_assemble(
        self,
        panel: List[Line],
        settings: PresentationSettings,
        number: Optional[int] = None,
        total: int = 1,
    ) -> Frame:
        """Stack header line, panel and status line into a Frame"""
        lines: List[Line] = []
        if settings["header"]:
            header = inline_render(str(settings["header"]), color_get(settings["color"]), frozenset({"bold"}))
            lines.append(line_fit(line_shift(header, padding_horizontal(line_width(header), self.width)), self.width))
        lines.extend(panel)
        if self.status_shown(settings):
            lines.append(self.status_build(settings, number, total))
        while len(lines) < self.height:
            lines.append([])
        return Frame(lines=lines[:self.height], background=color_get(settings["background"]))

    def status_shown(self, settings: PresentationSettings) -> bool:
        return bool(settings["pagination"] or settings["footer"])

    def panel_height(self, settings: PresentationSettings) -> int:
        reserved = (1 if settings["header"] else 0) + (1 if self.status_shown(settings) else 0)
        return max(BORDER_HEIGHT, self.height - reserved)

    def interior_size(self, settings: PresentationSettings) -> Tuple[int, int]:
        """Columns and rows inside the border and its padding"""
        return max(1, self.width - 4), max(1, self.panel_height(settings) - BORDER_HEIGHT)

    def status_build(self, settings: PresentationSettings, number: Optional[int], total: int) -> Line:
        """Footer on the left, pagination on the right"""
        left: Line = [Run(" ")]
        if settings["footer"]:
            left += inline_render(str(settings["footer"]), color_get(settings["color"]), frozenset({"dim"}))
        right: Line = []
        if settings["pagination"] and number is not None:
            right = [Run(self.pagination_text(settings, number, total) + " ", color_get(settings["border_color"]))]
        gap = self.width - line_width(left) - line_width(right)
        if gap < 1:
            return line_fit(left + [Run(" ")] + right, self.width)
        return left + [Run(" " * gap)] + right

    def pagination_text(self, settings: PresentationSettings, number: int, total: int) -> str:
        """
        Position indicator

        Example:
            count/fraction "3 / 10", count/slide "Slide 3 of 10",
            count/percent "30%", bar "██████░░░░░░░░░░░░░░ 3/10"
        """
        total = max(1, total)
        if settings["pagination_mode"] == "bar":
            filled = round(BAR_WIDTH * number / total)
            return "█" * filled + "░" * (BAR_WIDTH - filled) + f" {number}/{total}"
        style = settings["pagination_style"]
        if style == "slide":
            return f"Slide {number} of {total}"
        if style == "percent":
            return f"{round(100 * number / total)}%"
        return f"{number} / {total}"

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def slide_measure(
        self,
        slide: Slide,
        settings: PresentationSettings,
        width: int,
        height: int,
    ) -> SlideMeasurements:
        """Size of the content block with every bullet revealed"""
        lines = self.body_lines(slide, settings, None, width, height)
        max_line_length, content_height = size_measure(lines)
        LOG(f"slide {slide.number}: measured {content_height} x {max_line_length}", level=3)
        return SlideMeasurements(height=content_height, max_line_length=max_line_length)

    def body_lines(
        self,
        slide: Slide,
        settings: PresentationSettings,
        reveal: Optional[int],
        width: int,
        height: int,
    ) -> List[Line]:
        """Content block of a slide, not yet centered"""
        if slide.is_blank:
            return []

        kind = slide_classify(slide)
        if kind in (SlideKind.TITLE, SlideKind.SECTION):
            font, color = ("title_font", "title_color") if kind == SlideKind.TITLE else ("section_font", "section_color")
            art = figlet_render(heading_text(slide.content), settings[font], width)
            return [text_line(line.rstrip(), color_get(settings[color]), attrs=frozenset({"bold"})) for line in art]

        header, body = header_split(slide.content)
        lines = self.header_lines(header, settings, width)
        bullets = BulletReveal(reveal)
        remaining = max(1, height - len(lines))

        if kind == SlideKind.COLUMNS:
            lines.extend(self.columns_lines(body, settings, bullets, width, remaining))
        elif kind == SlideKind.IMAGE:
            lines.extend(self.image_slide_lines(slide, body, settings, bullets, width, remaining))
        else:
            lines.extend(self.segments_lines(body, settings, bullets, width, remaining))
        return lines

    def header_lines(self, header: Optional[str], settings: PresentationSettings, width: int) -> List[Line]:
        if header is None:
            return []
        art = figlet_render(header, settings["header_font"], width)
        lines = [text_line(line.rstrip(), color_get(settings["header_color"]), attrs=frozenset({"bold"})) for line in art]
        lines.append([])
        return lines

    def segments_lines(
        self,
        body: str,
        settings: PresentationSettings,
        bullets: BulletReveal,
        width: int,
        height: int,
    ) -> List[Line]:
        """Render text, code and images of a body in document order"""
        segments = segments_parse(body)
        lines: List[Line] = []
        for index, segment in enumerate(segments):
            if isinstance(segment, TextSegment):
                text = segment.text
                if index > 0 and text.startswith("\n"):
                    text = text[1:]
                if index < len(segments) - 1 and text.endswith("\n"):
                    text = text[:-1]
                if not text:
                    continue
                lines.extend(self.line_render(line, settings) for line in bullets.text_filter(text).split("\n"))
            elif isinstance(segment, CodeSegment):
                lines.extend(line_shift(line, 2) for line in code_render(segment.code, segment.language))
            elif isinstance(segment, ImageSegment):
                lines.extend(self.image_lines(segment, width, height))
        return lines

    def line_render(self, line: str, settings: PresentationSettings) -> Line:
        """One line of slide text with bullets, headings and inline markup"""
        color = color_get(settings["color"])
        accent = color_get(settings["border_color"])

        match = PROGRESSIVE_RE.match(line)
        if match:
            return [Run(match.group(1)), Run("• ", accent)] + inline_render(match.group(2), color)
        match = STATIC_RE.match(line)
        if match:
            return [Run(match.group(1)), Run("▪ ", accent)] + inline_render(match.group(2), color)
        match = HEADING_RE.match(line)
        if match:
            return inline_render(match.group(2), color_get(settings["header_color"]), frozenset({"bold"}))
        match = QUOTE_RE.match(line)
        if match:
            return [Run("│ ", accent)] + inline_render(match.group(1), color, frozenset({"italic"}))
        return inline_render(line, color)

    def columns_lines(
        self,
        body: str,
        settings: PresentationSettings,
        bullets: BulletReveal,
        width: int,
        height: int,
    ) -> List[Line]:
        columns = columns_split(body)
        widths = column_widths(width, len(columns), COLUMN_GUTTER)
        blocks: List[List[Line]] = []
        for column, column_width in zip(columns, widths):
            block = self.segments_lines(column, settings, bullets, column_width, height) if column else []
            blocks.append(block or [[]])
        return grid_draw(blocks, widths, COLUMN_GUTTER)

    def image_slide_lines(
        self,
        slide: Slide,
        body: str,
        settings: PresentationSettings,
        bullets: BulletReveal,
        width: int,
        height: int,
    ) -> List[Line]:
        """Text on the left 60 %, the first image on the right 40 %"""
        body_slide = Slide(number=slide.number, content=body, line_number=slide.line_number)
        text, match = image_text_split(body_slide)
        image = ImageSegment(alt=match.group(1), path=match.group(2),
                             width=int(match.group(3)) if match.group(3) else None)

        left_width, right_width = panels_split(width)
        left = self.segments_lines(text, settings, bullets, left_width, height)
        right = self.image_lines(image, right_width, height)
        panel_rows = max(height, len(left), len(right))
        return grid_draw([panel_pad(left, panel_rows), panel_pad(right, panel_rows)], [left_width, right_width], 0)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def image_get(self, ref: str) -> Image.Image:
        """
        Load an image once per renderer.

        Raises:
            ImageUnavailable: The image could not be loaded (now or earlier)
        """
        location = image_locate(ref, self.base_dir)
        cached = self.images.get(location)
        if cached is None:
            try:
                cached = image_open(ref, self.base_dir, appsettings.remote_timeout)
            except ImageUnavailable as e:
                WARN(f"image not available, showing placeholder: {e}")
                cached = e
            self.images[location] = cached
        if isinstance(cached, ImageUnavailable):
            raise cached
        return cached

    def image_lines(self, segment: ImageSegment, width: int, height: int) -> List[Line]:
        """The image, or a placeholder box of the same footprint, centered in `width`"""
        ratio = appsettings.image_width_ratio
        allowance = appsettings.image_allowance
        try:
            image = self.image_get(segment.path)
            image_width, image_height = image_width_plan(
                segment.width, width, height, image_aspect(image), ratio, allowance
            )
            lines = image_render(image, image_width, image_height)
        except ImageUnavailable:
            image_width, image_height = placeholder_size(width, height, segment.width, ratio, allowance)
            lines = self.placeholder_lines(segment.alt, image_width, image_height)
        shift = padding_horizontal(image_width, width)
        return [line_shift(line, shift) for line in lines]

    def placeholder_lines(self, alt: str, width: int, height: int) -> List[Line]:
        label = alt or "Image not available"
        inner = max(0, width - 2)
        label = label[:inner]
        rows = max(0, height - 2)
        top, _ = padding_vertical(rows, 1, border=0)
        content: List[Line] = [[] for _ in range(top)]
        content.append(line_shift(text_line(label, attrs=frozenset({"dim"})), padding_horizontal(len(label), inner)))
        return panel_draw(content, width, height, style="square", color="red", padding=0)

    # ------------------------------------------------------------------
    # Boundary screens
    # ------------------------------------------------------------------

    def message_frame(self, title: str, body: Sequence[str]) -> Frame:
        """
        Centered figlet title plus text lines inside the deck's panel.

        The body lines are key prompts and keep a free row below them; when
        the figlet title leaves no room for that, the title is shown plain.
        """
        settings = self.settings
        interior_width, interior_height = self.interior_size(settings)
        prompts = [inline_render(line, color_get(settings["color"])) for line in body]
        title_color = color_get(settings["section_color"])
        bold = frozenset({"bold"})

        art = figlet_render(title, settings["section_font"], interior_width)
        block = [text_line(line.rstrip(), title_color, attrs=bold) for line in art] + [[]] + prompts
        top, bottom = padding_vertical(interior_height, len(block), border=0, keep_prompt=True)
        if top + len(block) + bottom > interior_height:
            LOG(f"'{title}' screen: figlet title does not fit in {interior_height} rows", level=3)
            block = [text_line(title, title_color, attrs=bold), []] + prompts
            top, _ = padding_vertical(interior_height, len(block), border=0, keep_prompt=True)

        max_line_length, _ = size_measure(block)
        left = padding_horizontal(max_line_length, interior_width)
        content = [[] for _ in range(top)] + [line_shift(line, left) for line in block]
        panel = panel_draw(
            content,
            self.width,
            self.panel_height(settings),
            style=settings["border_style"],
            color=color_get(settings["border_color"]),
        )
        return self.frame_assemble(panel, settings)
