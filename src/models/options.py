"""
Presentation option specification and metadata models

Defines the structure and categories of the presentation options that can be
set in the frontmatter, in per-slide override comments, in a theme file or
on the command line. Used by OptionRegistry for lookup, alias resolution,
value validation and the --list-options listing.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Pattern


class OptionCategory(Enum):
    """
    Categories of presentation options

    The category decides how a raw string value is checked and coerced.
    """
    COLOR = "color"        # background, border_color, title_color, ...
    BOOLEAN = "boolean"    # pagination
    CHOICE = "choice"      # border_style, pagination_mode, pagination_style
    FONT = "font"          # title_font, section_font, header_font
    TEXT = "text"          # header, footer


# Value patterns accepted inside <!-- key: value --> override comments
CATEGORY_PATTERNS = {
    OptionCategory.COLOR: r"\w+",
    OptionCategory.BOOLEAN: r"\w+",
    OptionCategory.CHOICE: r"[\w-]+",
    OptionCategory.FONT: r"[\w\-,.]+",
    OptionCategory.TEXT: r"[^<>\n]+",
}


@dataclass
class OptionSpec:
    """
    Specification for a presentation option

    Attributes:
        name: Canonical option name (e.g., "title_font")
        category: Category for validation and listing
        description: Human-readable description
        default: Value used when nothing else sets the option
        choices: Allowed values for CHOICE options
        aliases: Alternative spellings that resolve to this option
    """
    name: str
    category: OptionCategory
    description: str
    default: Any = None
    choices: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    @property
    def pattern(self) -> Pattern[str]:
        """Compiled override value pattern for this option's category"""
        return re.compile(CATEGORY_PATTERNS[self.category])

    def value_check(self, value: Any) -> Optional[str]:
        """
        Validate an already-coerced value against this option.

        Args:
            value: Candidate value (str, bool, or None for a YAML null)

        Returns:
            None if acceptable, otherwise a short reason
        """
        if value is None:
            return "empty value"

        if self.category == OptionCategory.BOOLEAN:
            if not isinstance(value, bool):
                return f"expected true or false, got '{value}'"
            return None

        if isinstance(value, bool):
            return f"expected a {self.category.value} value, got '{str(value).lower()}'"

        if not str(value).strip():
            return "empty value"

        if self.category == OptionCategory.CHOICE and value not in self.choices:
            return f"'{value}' is not one of: {', '.join(self.choices)}"

        return None


@dataclass
class OptionResult:
    """
    Outcome of resolving one raw key/value pair

    Returned by OptionRegistry.option_resolve(). Unknown keys and rejected
    values are normal, recoverable outcomes reported through `warning`
    rather than raised.

    Attributes:
        key: Canonical option name, or None if the key is unknown
        value: Coerced value (only meaningful when ok)
        warning: Reason the pair was discarded, None when accepted
    """
    key: Optional[str]
    value: Any = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.key is not None and self.warning is None
