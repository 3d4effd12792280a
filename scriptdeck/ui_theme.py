"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (tabs, list, chrome). Syntax highlighting
style for previews remains a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    tab_active: str
    tab_inactive: str
    title: str
    directory: str
    script: str
    selected: str
    search_prompt: str
    search_text: str
    focus_border: str
    status: str
    dim: str


def _palette_theme(name: str, primary: int, secondary: int, accent: int, dim: int = 244) -> UITheme:
    return UITheme(
        name=name,
        divider=f"\033[38;5;{secondary}m",
        reverse="\033[7m",
        reset="\033[0m",
        tab_active=f"\033[1;30;48;5;{primary}m",
        tab_inactive=f"\033[38;5;{dim}m",
        title=f"\033[1;38;5;{primary}m",
        directory=f"\033[1;38;5;{secondary}m",
        script="\033[38;5;252m",
        selected=f"\033[1;38;5;{accent}m",
        search_prompt=f"\033[1;38;5;{accent}m",
        search_text="\033[38;5;252m",
        focus_border=f"\033[38;5;{primary}m",
        status=f"\033[38;5;{accent}m",
        dim=f"\033[2;38;5;{dim}m",
    )


OCEAN_BREEZE = _palette_theme("Ocean Breeze", primary=39, secondary=33, accent=45)
ROCKET_PINK = _palette_theme("Rocket Pink", primary=205, secondary=93, accent=198)
FOREST_NIGHT = _palette_theme("Forest Night", primary=46, secondary=34, accent=82)
SUNSET_GLOW = _palette_theme("Sunset Glow", primary=208, secondary=196, accent=226)
PURPLE_HAZE = _palette_theme("Purple Haze", primary=135, secondary=93, accent=171)
ARCTIC_FROST = _palette_theme("Arctic Frost", primary=51, secondary=39, accent=87)

DEFAULT_THEME = OCEAN_BREEZE

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="\033[7m",
    reset="\033[0m",
    tab_active="\033[7m",
    tab_inactive="",
    title="",
    directory="",
    script="",
    selected="",
    search_prompt="",
    search_text="",
    focus_border="",
    status="",
    dim="",
)

# Display order on the Options tab.
_THEMES: dict[str, UITheme] = {
    theme.name: theme
    for theme in (OCEAN_BREEZE, ROCKET_PINK, FOREST_NIGHT, SUNSET_GLOW, PURPLE_HAZE, ARCTIC_FROST)
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable theme names in menu order."""
    return tuple(_THEMES.keys())


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to the default.

    Matching ignores case and treats ``-``/``_`` like spaces, so
    ``rocket-pink`` selects "Rocket Pink".
    """
    if not name:
        return DEFAULT_THEME.name
    candidate = " ".join(str(name).replace("-", " ").replace("_", " ").split()).lower()
    for theme_name in _THEMES:
        if theme_name.lower() == candidate:
            return theme_name
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "ARCTIC_FROST",
    "DEFAULT_THEME",
    "FOREST_NIGHT",
    "OCEAN_BREEZE",
    "PLAIN_THEME",
    "PURPLE_HAZE",
    "ROCKET_PINK",
    "SUNSET_GLOW",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
