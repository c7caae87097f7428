"""
Frontmatter resolver

Extracts the optional leading configuration block of a deck:

    ---
    background: black
    title_font: "slant"
    pagination: false
    ---

    # First slide

Only flat `key: value` lines are understood; this is deliberately not YAML.
"""

from typing import List, Optional

from ..models.parser import FrontmatterResult
from ..models.settings import PresentationSettings
from .options import registry
from .log import LOG


FRONTMATTER_DELIMITER = "---"


def frontmatter_resolve(text: str, base: Optional[PresentationSettings] = None) -> FrontmatterResult:
    """
    Split a document into settings and body.

    Args:
        text: Raw document text
        base: Settings to start from (defaults when None, or a theme)

    Returns:
        FrontmatterResult with settings, body text, 1-based body start line
        and any warnings for discarded entries

    Example:
        >>> result = frontmatter_resolve("---\\nbackground: black\\n---\\n# Hi")
        >>> result.settings["background"], result.body, result.body_start_line
        ('black', '# Hi', 4)
    """
    settings = base if base is not None else registry.defaults_get()
    lines = text.split("\n")

    if not lines or lines[0].rstrip("\r") != FRONTMATTER_DELIMITER:
        return FrontmatterResult(settings=settings, body=text, body_start_line=1)

    closing: Optional[int] = None
    for i in range(1, len(lines)):
        if lines[i].rstrip("\r") == FRONTMATTER_DELIMITER:
            closing = i
            break

    if closing is None:
        message = "frontmatter opened on line 1 is never closed, treating it as slide content"
        return FrontmatterResult(settings=settings, body=text, body_start_line=1, warnings=[message])

    values = settings.as_dict()
    warnings: List[str] = []

    for offset, line in enumerate(lines[1:closing]):
        line_number = offset + 2
        if not line.strip():
            continue

        if ":" not in line:
            warnings.append(f"frontmatter line {line_number}: expected 'key: value', got '{line.strip()}'")
            continue

        key, value = line.split(":", 1)
        result = registry.option_resolve(key, value)
        if not result.ok:
            warnings.append(f"frontmatter line {line_number}: {result.warning}, ignored")
            continue

        values[result.key] = result.value
        LOG(f"frontmatter: {result.key} = {result.value!r}", level=3)

    return FrontmatterResult(
        settings=PresentationSettings(values),
        body="\n".join(lines[closing + 1:]),
        body_start_line=closing + 2,
        warnings=warnings,
    )
