"""UI theme definitions and selection helpers.

Themes are ANSI palettes for panel chrome, selection markers, token badges,
and the status row.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    dim: str
    border: str
    border_focused: str
    title: str
    title_focused: str
    marker_on: str
    marker_partial: str
    marker_off: str
    token_count: str
    token_pending: str
    token_failed: str
    hint: str
    status_ok: str
    status_error: str
    overlay: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    border="\033[38;5;240m",
    border_focused="\033[38;5;44m",
    title="\033[38;5;250m",
    title_focused="\033[1;38;5;81m",
    marker_on="\033[38;5;42m",
    marker_partial="\033[38;5;214m",
    marker_off="\033[2;38;5;250m",
    token_count="\033[38;5;109m",
    token_pending="\033[38;5;229m",
    token_failed="\033[38;5;203m",
    hint="\033[2;38;5;250m",
    status_ok="\033[38;5;42m",
    status_error="\033[1;38;5;203m",
    overlay="\033[1;38;5;255;48;5;236m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    border="\033[2;38;5;31m",
    border_focused="\033[38;5;39m",
    title="\033[38;5;153m",
    title_focused="\033[1;38;5;45m",
    marker_on="\033[38;5;84m",
    marker_partial="\033[38;5;215m",
    marker_off="\033[2;38;5;110m",
    token_count="\033[38;5;73m",
    token_pending="\033[38;5;153m",
    token_failed="\033[38;5;209m",
    hint="\033[2;38;5;110m",
    status_ok="\033[38;5;84m",
    status_error="\033[1;38;5;209m",
    overlay="\033[1;38;5;231;48;5;24m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    reverse="\033[7m",
    dim="",
    border="",
    border_focused="",
    title="",
    title_focused="",
    marker_on="",
    marker_partial="",
    marker_off="",
    token_count="",
    token_pending="",
    token_failed="",
    hint="",
    status_ok="",
    status_error="",
    overlay="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
    PLAIN_THEME.name: PLAIN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
