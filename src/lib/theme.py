"""
Theme loader for termdown presentations.

A theme is a YAML file of presentation option defaults. It replaces the
built-in defaults; the document frontmatter and command line still apply
on top of it:

    # dark.yaml
    background: black
    color: white
    border_style: heavy
    title_font: doom, standard
    footer: "ACME Corp"
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List

from ..models.settings import PresentationSettings
from .options import registry
from .log import LOG, WARN


class ThemeError(Exception):
    """Raised when theme loading or validation fails"""
    pass


class Theme:
    """
    Presentation defaults loaded from a YAML file.

    Attributes:
        path: Location of the theme file
        config: Raw mapping as parsed from YAML
        warnings: Entries that were discarded (unknown keys, bad values)
    """

    def __init__(self, path: str):
        """
        Load a theme file.

        Args:
            path: Path to the YAML file

        Raises:
            ThemeError: If the file doesn't exist, is not valid YAML, or is
                        not a key/value mapping
        """
        self.path = Path(path).expanduser()
        self.name = self.path.stem

        if not self.path.is_file():
            raise ThemeError(f"Theme file '{self.path}' not found")

        self.config = self._config_load()
        self.warnings: List[str] = []

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse the YAML file"""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ThemeError(f"Failed to parse {self.path}: {e}")
        except OSError as e:
            raise ThemeError(f"Failed to load {self.path}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ThemeError(f"{self.path}: expected a mapping of option: value")
        return config

    def settings_get(self) -> PresentationSettings:
        """
        Built-in defaults with every accepted theme entry applied.

        Unknown keys and unacceptable values are reported and skipped, the
        same way frontmatter entries are.

        Returns:
            PresentationSettings to use as the base layer of a document
        """
        values = registry.defaults_get().as_dict()
        self.warnings = []

        for key, value in self.config.items():
            if value is not None and not isinstance(value, (bool, str)):
                value = str(value)
            result = registry.option_resolve(str(key), value)
            if not result.ok:
                message = f"{self.path}: {result.warning}, ignored"
                self.warnings.append(message)
                WARN(message)
                continue
            values[result.key] = result.value
            LOG(f"theme {self.name}: {result.key} = {result.value!r}", level=3)

        return PresentationSettings(values)

    def __repr__(self) -> str:
        return f"Theme(name='{self.name}', path='{self.path}')"
