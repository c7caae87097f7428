"""
Presentation option registry

Maps option names and their aliases to OptionSpec objects, normalizes raw
keys, and turns raw string values into checked, coerced values. Every path
that sets a presentation option (frontmatter, override comments, themes,
command line flags) goes through this registry.
"""

from typing import Any, Dict, List, Optional

from ..models.options import OptionSpec, OptionCategory, OptionResult
from ..models.settings import PresentationSettings


BORDER_STYLES = ["rounded", "square", "heavy", "double", "ascii", "none"]
PAGINATION_MODES = ["count", "bar"]
PAGINATION_STYLES = ["fraction", "slide", "percent"]


def key_normalize(key: str) -> str:
    """
    Normalize a raw option key before lookup.

    Example:
        >>> key_normalize("  Border-Color ")
        'border_color'
    """
    return key.strip().lower().replace("-", "_")


def value_unquote(value: str) -> Any:
    """
    Strip whitespace and one layer of matching quotes; map true/false to bool.

    Example:
        >>> value_unquote(' "Hello: world" ')
        'Hello: world'
        >>> value_unquote("false")
        False
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    if value == "true":
        return True
    if value == "false":
        return False
    return value


class OptionRegistry:
    """
    Registry of presentation option specifications

    Maps canonical names and aliases to OptionSpec objects.
    """

    def __init__(self) -> None:
        """Initialize the option registry and register all built-in options"""
        self.specs: Dict[str, OptionSpec] = {}
        self.colorOptions_register()
        self.layoutOptions_register()
        self.fontOptions_register()
        self.textOptions_register()

    def register(self, spec: OptionSpec) -> None:
        """Register an option specification"""
        self.specs[spec.name] = spec
        # Also register aliases
        for alias in spec.aliases:
            self.specs[alias] = spec

    def spec_get(self, key: str) -> Optional[OptionSpec]:
        """
        Get option specification for a raw key

        Args:
            key: Raw key as written by the author (any case, - or _)

        Returns:
            OptionSpec or None if the key is not a known option
        """
        return self.specs.get(key_normalize(key))

    def names_list(self) -> List[str]:
        """Canonical option names in registration order"""
        seen: List[str] = []
        for spec in self.specs.values():
            if spec.name not in seen:
                seen.append(spec.name)
        return seen

    def options_listByCategory(self, category: OptionCategory) -> List[OptionSpec]:
        """Get all options in a category"""
        return [self.specs[name] for name in self.names_list()
                if self.specs[name].category == category]

    def defaults_get(self) -> PresentationSettings:
        """Hard-coded defaults for every known option"""
        return PresentationSettings({name: self.specs[name].default for name in self.names_list()})

    def option_resolve(self, key: str, value: Any, pattern_check: bool = False) -> OptionResult:
        """
        Resolve one raw key/value pair into a canonical, checked value.

        Args:
            key: Raw key (normalized and alias-resolved here)
            value: Raw value; strings are unquoted and true/false coerced
            pattern_check: Also require the raw string to match the option's
                           override token pattern (used for <!-- --> comments)

        Returns:
            OptionResult; `ok` is False for unknown keys or rejected values
        """
        spec = self.spec_get(key)
        if spec is None:
            return OptionResult(key=None, warning=f"unknown option '{key.strip()}'")

        if isinstance(value, str):
            raw = value.strip()
            if pattern_check and not spec.pattern.fullmatch(raw):
                return OptionResult(
                    key=spec.name,
                    warning=f"invalid value '{raw}' for option '{spec.name}'",
                )
            value = value_unquote(raw)
            if isinstance(value, str) and spec.category == OptionCategory.TEXT:
                value = value.strip()

        reason = spec.value_check(value)
        if reason:
            return OptionResult(key=spec.name, warning=f"option '{spec.name}': {reason}")

        return OptionResult(key=spec.name, value=value)

    def colorOptions_register(self) -> None:
        """Register color options"""
        color_specs = [
            ('background', 'default', 'Background color of the whole screen', []),
            ('color', 'default', 'Body text color', []),
            ('border_color', 'cyan', 'Color of the slide border and pagination', []),
            ('title_color', 'yellow', 'Color of "# " title slides', ['h1_color']),
            ('section_color', 'cyan', 'Color of "## " section slides', ['h2_color']),
            ('header_color', 'magenta', 'Color of "### " slide headers', ['h3_color']),
        ]

        for name, default, desc, aliases in color_specs:
            self.register(OptionSpec(
                name=name,
                category=OptionCategory.COLOR,
                description=desc,
                default=default,
                aliases=aliases,
            ))

    def layoutOptions_register(self) -> None:
        """Register border and pagination options"""
        self.register(OptionSpec(
            name='border_style',
            category=OptionCategory.CHOICE,
            description='Box drawing style of the slide border',
            default='rounded',
            choices=BORDER_STYLES,
        ))

        self.register(OptionSpec(
            name='pagination',
            category=OptionCategory.BOOLEAN,
            description='Show the slide counter in the status line',
            default=True,
        ))

        self.register(OptionSpec(
            name='pagination_mode',
            category=OptionCategory.CHOICE,
            description='Counter as text ("count") or as a progress bar ("bar")',
            default='count',
            choices=PAGINATION_MODES,
        ))

        self.register(OptionSpec(
            name='pagination_style',
            category=OptionCategory.CHOICE,
            description='Counter text: "3 / 10", "Slide 3 of 10" or "30%"',
            default='fraction',
            choices=PAGINATION_STYLES,
        ))

    def fontOptions_register(self) -> None:
        """Register figlet font options (comma list = fallbacks)"""
        font_specs = [
            ('title_font', 'standard', 'Figlet font for "# " title slides', ['h1_font']),
            ('section_font', 'small', 'Figlet font for "## " section slides', ['h2_font']),
            ('header_font', 'mini', 'Figlet font for "### " slide headers', ['h3_font']),
        ]

        for name, default, desc, aliases in font_specs:
            self.register(OptionSpec(
                name=name,
                category=OptionCategory.FONT,
                description=desc,
                default=default,
                aliases=aliases,
            ))

    def textOptions_register(self) -> None:
        """Register free text options"""
        self.register(OptionSpec(
            name='header',
            category=OptionCategory.TEXT,
            description='Text shown on the top line of every slide',
        ))

        self.register(OptionSpec(
            name='footer',
            category=OptionCategory.TEXT,
            description='Text shown at the left of the status line',
        ))


# Shared instance; the registry holds no mutable state after construction
registry = OptionRegistry()
