"""
Color conversions and palette harmonies.
"""
import math
import random
import re
from typing import List, Optional, Tuple

from veer.exceptions import ValidationError

HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)

HARMONY_OFFSETS = {
    "complementary": (180,),
    "triadic": (120, 240),
    "analogous": (30, -30),
    "split": (150, 210),
}

PALETTE_SIZE = 5


def _round(value: float) -> int:
    # Halves round up, as in the browser widget
    return int(math.floor(value + 0.5))


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Parse ``#rrggbb`` (hash optional); anything else is black."""
    match = HEX_PATTERN.match(hex_color.strip()) if hex_color else None
    if not match:
        return (0, 0, 0)
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{max(0, min(255, _round(x))):02x}" for x in (r, g, b))


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """RGB (0-255) to HSL as whole degrees and percentages."""
    r, g, b = r / 255, g / 255, b / 255
    high, low = max(r, g, b), min(r, g, b)
    h = s = 0.0
    lightness = (high + low) / 2

    if high != low:
        d = high - low
        s = d / (2 - high - low) if lightness > 0.5 else d / (high + low)
        if high == r:
            h = ((g - b) / d + (6 if g < b else 0)) / 6
        elif high == g:
            h = ((b - r) / d + 2) / 6
        else:
            h = ((r - g) / d + 4) / 6

    return (_round(h * 360), _round(s * 100), _round(lightness * 100))


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


def hsl_to_rgb(h: float, s: float, lightness: float) -> Tuple[int, int, int]:
    """HSL (degrees, percent, percent) to RGB (0-255)."""
    h, s, lightness = h / 360, s / 100, lightness / 100
    if s == 0:
        r = g = b = lightness
    else:
        q = lightness * (1 + s) if lightness < 0.5 else lightness + s - lightness * s
        p = 2 * lightness - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)
    return (_round(r * 255), _round(g * 255), _round(b * 255))


def contrast_color(hex_color: str) -> str:
    """Black or white, whichever reads better on ``hex_color``."""
    r, g, b = hex_to_rgb(hex_color)
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#FFFFFF"


def random_color(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return f"#{rng.randrange(0xFFFFFF):06x}"


def harmony(hex_color: str, kind: str, fill: bool = False, rng: Optional[random.Random] = None) -> List[str]:
    """
    Colors that harmonise with ``hex_color``.

    Args:
        hex_color: Base color; it is always the first entry
        kind: complementary, triadic, analogous or split
        fill: Pad with random colors up to a five-color palette

    Raises:
        ValidationError: Unknown harmony kind
    """
    if kind not in HARMONY_OFFSETS:
        raise ValidationError(f"Unknown harmony: {kind}. Valid: {', '.join(HARMONY_OFFSETS)}", field="kind", value=kind)
    h, s, lightness = rgb_to_hsl(*hex_to_rgb(hex_color))
    colors = [hex_color]
    for offset in HARMONY_OFFSETS[kind]:
        colors.append(rgb_to_hex(*hsl_to_rgb((h + offset + 360) % 360, s, lightness)))
    while fill and len(colors) < PALETTE_SIZE:
        colors.append(random_color(rng))
    return colors[:PALETTE_SIZE]


def palette_css(colors: List[str]) -> str:
    """CSS custom properties for a palette."""
    body = "\n".join(f"--color-{i + 1}: {color};" for i, color in enumerate(colors))
    return f":root {{\n{body}\n}}"
