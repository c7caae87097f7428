"""
Slide and deck models

A Slide is one addressable unit of the deck. It is created once by the
parser; its content never changes afterwards. The measurement record and the
progressive bullet total are filled on first use and then kept for the
lifetime of the slide, which keeps the layout stable while bullets are
revealed one at a time.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .settings import PresentationSettings


@dataclass(frozen=True)
class SlideMeasurements:
    """
    Size of a slide's content block with every bullet revealed

    Attributes:
        height: Number of terminal lines the content block occupies
        max_line_length: Widest visual line (markup excluded)
    """
    height: int
    max_line_length: int


@dataclass
class Slide:
    """
    One slide of the deck

    Attributes:
        number: 1-based position after empty chunks were dropped
        content: Trimmed markdown body with override comments removed
        is_blank: True for an <!-- intentionally blank --> slide
        line_number: 1-based source line where the slide starts
        overrides: Canonical option name -> value from override comments
    """
    number: int
    content: str
    is_blank: bool = False
    line_number: int = 1
    overrides: Dict[str, Any] = field(default_factory=dict)

    _measurements: Optional[SlideMeasurements] = field(default=None, init=False, repr=False, compare=False)
    _bullets_total: Optional[int] = field(default=None, init=False, repr=False, compare=False)

    @property
    def bullets_total(self) -> int:
        """Number of progressive (*) bullets, counted once"""
        if self._bullets_total is None:
            from ..lib.segments import bullets_count

            self._bullets_total = 0 if self.is_blank else bullets_count(self.content)
        return self._bullets_total

    @property
    def measured(self) -> bool:
        return self._measurements is not None

    def measurements_get(self, measure: Callable[["Slide"], SlideMeasurements]) -> SlideMeasurements:
        """
        Return the cached measurements, computing them on first access.

        Args:
            measure: Callback that measures this slide at full reveal

        Returns:
            The SlideMeasurements stored on the slide
        """
        if self._measurements is None:
            self._measurements = measure(self)
        return self._measurements

    def settings_effective(self, settings: PresentationSettings) -> PresentationSettings:
        """Global settings with this slide's overrides applied"""
        return settings.merged(self.overrides)


@dataclass
class Deck:
    """
    A parsed presentation

    Attributes:
        settings: Global presentation settings
        slides: Slides in document order, numbered 1..N
        warnings: Non-fatal diagnostics gathered while parsing
        source: Path or URL label used in messages
        base_dir: Directory (or URL) relative image references resolve against
    """
    settings: PresentationSettings
    slides: List[Slide] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    source: str = "<string>"
    base_dir: str = "."

    @property
    def bullets_totals(self) -> List[int]:
        return [slide.bullets_total for slide in self.slides]
