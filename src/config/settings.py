"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TERMDOWN_ prefix (e.g., TERMDOWN_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.

These are settings of the *program* (key bindings, image sizing, network
timeouts). Settings of a *presentation* (colors, fonts, pagination) come from
the document frontmatter and live in models.settings.PresentationSettings.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TERMDOWN_ prefix.

    Examples:
        TERMDOWN_KEYS_NEXT=right,space,l
        TERMDOWN_STRICT_MODE=true
        TERMDOWN_REMOTE_TIMEOUT=3.5
    """

    model_config = SettingsConfigDict(
        env_prefix="TERMDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Navigation key bindings (comma separated key names)
    keys_next: str = Field(
        default="right,l,j,down,space,enter,n,pagedown",
        description="Keys that advance to the next bullet or slide",
    )

    keys_previous: str = Field(
        default="left,h,k,up,p,backspace,pageup",
        description="Keys that step back to the previous bullet or slide",
    )

    keys_exit: str = Field(
        default="q,escape",
        description="Keys that end the presentation",
    )

    keys_help: str = Field(
        default="?",
        description="Keys that open the help overlay",
    )

    # Validation
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: validate every slide against the viewport before presenting",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output (tracebacks on fatal errors)",
    )

    # Image layout
    image_width_ratio: float = Field(
        default=0.8,
        description="Share of the available width an image takes when no {width=N} is given",
    )

    image_allowance: int = Field(
        default=4,
        description="Columns/rows reserved around an image for padding and border",
    )

    # Network
    remote_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for fetching remote documents and images",
    )

    def keys_list(self, action: str) -> List[str]:
        """
        Split the binding string for an action into key names.

        Args:
            action: One of "next", "previous", "exit", "help"

        Returns:
            Lower-cased key names with blanks removed

        Example:
            >>> settings = AppSettings(keys_exit="q, Escape")
            >>> settings.keys_list("exit")
            ['q', 'escape']
        """
        raw: str = getattr(self, f"keys_{action}")
        keys: List[str] = []
        for key in raw.split(","):
            key = key.strip()
            if not key:
                continue
            # Single characters keep their case ("N" and "n" may differ)
            keys.append(key if len(key) == 1 else key.lower())
        return keys


# Singleton instance - import this in your code
appsettings = AppSettings()
