"""Theme definitions for Sankey diagrams."""

from flowsankey.themes.dark import DARK_THEME
from flowsankey.themes.light import LIGHT_THEME

THEMES = {
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}

__all__ = ["THEMES", "LIGHT_THEME", "DARK_THEME"]
