"""
Color literal detection and conversion.

All supported notations parse into a common ``Color`` (0-255 channels plus
an alpha in 0..1) and format back out as hex, rgb()/rgba() or hsl()/hsla().
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
import re

from .types import Detector, DetectorAction

HEX_COLOR_RE = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}\b")
HEX8_COLOR_RE = re.compile(r"#(?:[0-9a-fA-F]{4}){1,2}\b")
RGB_COLOR_RE = re.compile(
    r"rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)", re.IGNORECASE
)
RGBA_COLOR_RE = re.compile(
    r"rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([\d.]+)\s*\)", re.IGNORECASE
)
HSL_COLOR_RE = re.compile(
    r"hsl\(\s*(\d{1,3})\s*,\s*(\d{1,3})%\s*,\s*(\d{1,3})%\s*\)", re.IGNORECASE
)
HSLA_COLOR_RE = re.compile(
    r"hsla\(\s*(\d{1,3})\s*,\s*(\d{1,3})%\s*,\s*(\d{1,3})%\s*,\s*([\d.]+)\s*\)", re.IGNORECASE
)


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    a: float = 1.0


def _clamp_channel(value: int) -> int:
    return max(0, min(255, value))


def _parse_alpha(raw: str) -> float | None:
    try:
        alpha = float(raw)
    except ValueError:
        return None
    return max(0.0, min(1.0, alpha))


def _format_alpha(alpha: float) -> str:
    """Shortest round-tripping decimal, never in exponent form."""
    if alpha.is_integer():
        return str(int(alpha))
    return format(Decimal(repr(alpha)), "f")


def parse_hex(value: str) -> Color | None:
    h = value.lstrip("#")
    if len(h) in (3, 4):
        channels = [int(c * 2, 16) for c in h]
    elif len(h) in (6, 8):
        channels = [int(h[i:i + 2], 16) for i in range(0, len(h), 2)]
    else:
        return None
    alpha = channels[3] / 255 if len(channels) == 4 else 1.0
    return Color(channels[0], channels[1], channels[2], alpha)


def parse_rgb(value: str) -> Color | None:
    match = RGBA_COLOR_RE.search(value)
    if match:
        alpha = _parse_alpha(match.group(4))
        if alpha is None:
            return None
        r, g, b = (_clamp_channel(int(match.group(i))) for i in (1, 2, 3))
        return Color(r, g, b, alpha)
    match = RGB_COLOR_RE.search(value)
    if match:
        r, g, b = (_clamp_channel(int(match.group(i))) for i in (1, 2, 3))
        return Color(r, g, b)
    return None


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Hue in degrees, saturation and lightness in percent."""
    h = (h % 360) / 360
    s = max(0.0, min(100.0, s)) / 100
    l = max(0.0, min(100.0, l)) / 100
    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)
    return round(r * 255), round(g * 255), round(b * 255)


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[int, int, int]:
    rf, gf, bf = r / 255, g / 255, b / 255
    high = max(rf, gf, bf)
    low = min(rf, gf, bf)
    l = (high + low) / 2
    h = s = 0.0
    if high != low:
        d = high - low
        s = d / (2 - high - low) if l > 0.5 else d / (high + low)
        if high == rf:
            h = ((gf - bf) / d + (6 if gf < bf else 0)) / 6
        elif high == gf:
            h = ((bf - rf) / d + 2) / 6
        else:
            h = ((rf - gf) / d + 4) / 6
    return round(h * 360) % 360, round(s * 100), round(l * 100)


def parse_hsl(value: str) -> Color | None:
    match = HSLA_COLOR_RE.search(value)
    if match:
        alpha = _parse_alpha(match.group(4))
        if alpha is None:
            return None
        r, g, b = hsl_to_rgb(*(int(match.group(i)) for i in (1, 2, 3)))
        return Color(r, g, b, alpha)
    match = HSL_COLOR_RE.search(value)
    if match:
        r, g, b = hsl_to_rgb(*(int(match.group(i)) for i in (1, 2, 3)))
        return Color(r, g, b)
    return None


def extract_color(text: str) -> Color | None:
    """First color in the text, trying hex, then rgb, then hsl."""
    match = HEX8_COLOR_RE.search(text) or HEX_COLOR_RE.search(text)
    if match:
        return parse_hex(match.group(0))
    return parse_rgb(text) or parse_hsl(text)


def to_hex(color: Color) -> str:
    base = f"#{color.r:02x}{color.g:02x}{color.b:02x}"
    if color.a < 1:
        return f"{base}{round(color.a * 255):02x}"
    return base


def to_rgb(color: Color) -> str:
    if color.a < 1:
        return f"rgba({color.r}, {color.g}, {color.b}, {_format_alpha(color.a)})"
    return f"rgb({color.r}, {color.g}, {color.b})"


def to_hsl(color: Color) -> str:
    h, s, l = rgb_to_hsl(color.r, color.g, color.b)
    if color.a < 1:
        return f"hsla({h}, {s}%, {l}%, {_format_alpha(color.a)})"
    return f"hsl({h}, {s}%, {l}%)"


# Most specific notation first so converted output is never re-matched
# by a looser pattern later in the scan.
_REPLACE_ORDER: list[tuple[re.Pattern[str], Callable[[str], Color | None]]] = [
    (HSLA_COLOR_RE, parse_hsl),
    (HSL_COLOR_RE, parse_hsl),
    (RGBA_COLOR_RE, parse_rgb),
    (RGB_COLOR_RE, parse_rgb),
    (HEX8_COLOR_RE, parse_hex),
    (HEX_COLOR_RE, parse_hex),
]


def replace_colors(text: str, converter: Callable[[Color], str]) -> str:
    """Convert every color literal in ``text`` with ``converter``."""
    result = text
    for pattern, parser in _REPLACE_ORDER:
        def _swap(match: re.Match[str], parser=parser) -> str:
            color = parser(match.group(0))
            return converter(color) if color else match.group(0)

        result = pattern.sub(_swap, result)
    return result


def _has_hex(text: str) -> bool:
    return bool(HEX_COLOR_RE.search(text) or HEX8_COLOR_RE.search(text))


def _has_rgb(text: str) -> bool:
    return bool(RGB_COLOR_RE.search(text) or RGBA_COLOR_RE.search(text))


def _has_hsl(text: str) -> bool:
    return bool(HSL_COLOR_RE.search(text) or HSLA_COLOR_RE.search(text))


def has_color(text: str) -> bool:
    return _has_hex(text) or _has_rgb(text) or _has_hsl(text)


TO_HEX = DetectorAction(id="to-hex", label="To Hex", execute=lambda t: replace_colors(t, to_hex))
TO_RGB = DetectorAction(id="to-rgb", label="To RGB", execute=lambda t: replace_colors(t, to_rgb))
TO_HSL = DetectorAction(id="to-hsl", label="To HSL", execute=lambda t: replace_colors(t, to_hsl))


def color_actions(text: str) -> list[DetectorAction]:
    """Offer every conversion except to the only notation already present."""
    hex_, rgb, hsl = _has_hex(text), _has_rgb(text), _has_hsl(text)
    actions = []
    if not hex_ or rgb or hsl:
        actions.append(TO_HEX)
    if hex_ or not rgb or hsl:
        actions.append(TO_RGB)
    if hex_ or rgb or not hsl:
        actions.append(TO_HSL)
    return actions


def _toast(text: str) -> str:
    color = extract_color(text)
    if color is None:
        return "Color value detected"
    return f"Color detected: {to_hex(color)}"


color_detector = Detector(
    id="color",
    priority=11,
    detect=has_color,
    toast_message="Color value detected",
    actions=(TO_HEX, TO_RGB, TO_HSL),
    get_toast_message=_toast,
    get_actions=color_actions,
)
