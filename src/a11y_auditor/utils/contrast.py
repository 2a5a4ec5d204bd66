# src/a11y_auditor/utils/contrast.py
import logging
import re
from typing import NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

# WCAG 2.x AA threshold for normal-size text
DEFAULT_THRESHOLD = 4.5

_RGB_PATTERN = re.compile(
    r"^rgba?\(\s*([\d.]+%?)\s*[,\s]\s*([\d.]+%?)\s*[,\s]\s*([\d.]+%?)\s*(?:[,/]\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE
)
_HEX_PATTERN = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)

# The 16 basic CSS colour keywords
NAMED_COLORS = {
    "black": (0, 0, 0), "silver": (192, 192, 192), "gray": (128, 128, 128),
    "white": (255, 255, 255), "maroon": (128, 0, 0), "red": (255, 0, 0),
    "purple": (128, 0, 128), "fuchsia": (255, 0, 255), "green": (0, 128, 0),
    "lime": (0, 255, 0), "olive": (128, 128, 0), "yellow": (255, 255, 0),
    "navy": (0, 0, 128), "blue": (0, 0, 255), "teal": (0, 128, 128),
    "aqua": (0, 255, 255),
}


class Color(NamedTuple):
    """An sRGB colour with every channel normalized to [0, 1]."""
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @property
    def is_transparent(self) -> bool:
        return self.alpha == 0


ColorLike = Union[Color, tuple]


def _channel(token: str) -> float:
    if token.endswith("%"):
        value = float(token[:-1]) / 100
    else:
        value = float(token) / 255
    return min(max(value, 0.0), 1.0)


def _alpha(token: Optional[str]) -> float:
    if token is None:
        return 1.0
    value = float(token[:-1]) / 100 if token.endswith("%") else float(token)
    return min(max(value, 0.0), 1.0)


def parse_color(text: Optional[str]) -> Optional[Color]:
    """
    Parses a textual colour into a normalized Color.

    Supports rgb()/rgba() (integer or percentage channels), #rgb, #rgba,
    #rrggbb, #rrggbbaa, the basic named colours and 'transparent'.
    Returns None for anything else; callers treat that as "unresolvable".
    """
    if not text or not isinstance(text, str):
        return None

    value = text.strip().lower()
    if value == "transparent":
        return Color(0.0, 0.0, 0.0, 0.0)

    if value in NAMED_COLORS:
        r, g, b = NAMED_COLORS[value]
        return Color(r / 255, g / 255, b / 255)

    match = _RGB_PATTERN.match(value)
    if match:
        try:
            red, green, blue = (_channel(t) for t in match.groups()[:3])
            return Color(red, green, blue, _alpha(match.group(4)))
        except ValueError:
            return None

    match = _HEX_PATTERN.match(value)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        channels = [int(digits[i:i + 2], 16) / 255 for i in range(0, len(digits), 2)]
        return Color(*channels)

    return None


def _linearize(channel: float) -> float:
    if channel <= 0.03928:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def relative_luminance(color: ColorLike) -> float:
    """Relative luminance of a normalized sRGB colour (alpha is ignored)."""
    red, green, blue = color[0], color[1], color[2]
    return 0.2126 * _linearize(red) + 0.7152 * _linearize(green) + 0.0722 * _linearize(blue)


def contrast_ratio(foreground: ColorLike, background: ColorLike) -> float:
    """
    Computes the WCAG contrast ratio between two normalized sRGB colours.
    The result lies in [1, 21] and is symmetric in its arguments.
    """
    l1 = relative_luminance(foreground)
    l2 = relative_luminance(background)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


class ContrastCalculator:
    """
    Thin adapter used by the rule set: parses colour strings and computes ratios.
    Unparseable input yields None so the calling rule can skip that node.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def ratio(self, foreground: str, background: str) -> Optional[float]:
        fg = parse_color(foreground)
        bg = parse_color(background)
        if fg is None or bg is None:
            logger.debug("Unparseable colour pair: %r on %r", foreground, background)
            return None
        return contrast_ratio(fg, bg)

    def passes(self, ratio: float) -> bool:
        return ratio >= self.threshold
