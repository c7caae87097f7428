"""
Presentation settings model

PresentationSettings is the immutable configuration value produced once per
document (defaults → theme → frontmatter → command line). Slide overrides
never modify it; merged() returns a new value for the slide being shown.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator


class PresentationSettings(Mapping):
    """
    Read-only mapping of canonical option name to value.

    Only known option names ever appear as keys; the OptionRegistry is the
    one place that builds instances from raw input.

    Example:
        >>> base = PresentationSettings({"background": "default", "pagination": True})
        >>> slide = base.merged({"pagination": False})
        >>> base["pagination"], slide["pagination"]
        (True, False)
    """

    def __init__(self, values: Dict[str, Any]) -> None:
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def merged(self, overrides: Mapping) -> "PresentationSettings":
        """
        Produce the effective settings for one slide.

        Args:
            overrides: Slide override mapping (known keys only)

        Returns:
            New PresentationSettings; self is left untouched
        """
        if not overrides:
            return self
        values = dict(self._values)
        values.update(overrides)
        return PresentationSettings(values)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"PresentationSettings({dict(self._values)!r})"
