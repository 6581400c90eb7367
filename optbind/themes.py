# Optbind CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Color names and the Rich theme used when rendering usage and errors."""
from rich.theme import Theme


class OneColors:
    """Hex palette inspired by One Dark."""

    BLACK = "#282C34"
    GUTTER_GREY = "#4B5263"
    COMMENT_GREY = "#5C6370"
    WHITE = "#ABB2BF"
    DARK_RED = "#BE5046"
    LIGHT_RED = "#E06C75"
    DARK_YELLOW = "#D19A66"
    LIGHT_YELLOW = "#E5C07B"
    GREEN = "#98C379"
    CYAN = "#56B6C2"
    BLUE = "#61AFEF"
    MAGENTA = "#C678DD"

    BLUE_b = f"bold {BLUE}"
    CYAN_b = f"bold {CYAN}"
    DARK_RED_b = f"bold {DARK_RED}"


def get_theme() -> Theme:
    """Return the Rich theme registering optbind's named styles."""
    return Theme(
        {
            "usage": OneColors.BLUE_b,
            "option": OneColors.CYAN,
            "parameter": OneColors.LIGHT_YELLOW,
            "error": OneColors.DARK_RED_b,
            "hint": OneColors.COMMENT_GREY,
            "value": OneColors.GREEN,
        }
    )
