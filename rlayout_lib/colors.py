"""
rlayout_lib/colors.py: Color decoding and palette inference.

Colors set by graphics operators are normalized to 0-1 RGB, sorted into the
primary / text / muted buckets and tallied by hex value. The palette picks
the best representative of each bucket.
"""
import logging
import math
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import COLOR_OPS, RGB, Operator, OperatorCode
from .schema import ColorPalette

log_colors = logging.getLogger("rlayout.colors")


def _clamp(v: float) -> float:
    return max(0.0, min(1.0, v))


def normalize_rgb(r: float, g: float, b: float) -> RGB:
    """Maps channels to 0-1; any channel above 1 means a 0-255 encoding."""
    if r > 1 or g > 1 or b > 1:
        return _clamp(r / 255), _clamp(g / 255), _clamp(b / 255)
    return _clamp(r), _clamp(g), _clamp(b)


def gray_to_rgb(gray: float) -> RGB:
    value = _clamp(gray / 255 if gray > 1 else gray)
    return value, value, value


def cmyk_to_rgb(c: float, m: float, y: float, k: float) -> RGB:
    c, m, y, k = (_clamp(v) for v in (c, m, y, k))
    return (1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k)


def color_from_values(values: Sequence[float]) -> Optional[RGB]:
    """Decodes a gray (1), RGB (3) or CMYK (4) component list."""
    if len(values) == 1:
        return gray_to_rgb(values[0])
    if len(values) == 3:
        return normalize_rgb(*values)
    if len(values) == 4:
        return cmyk_to_rgb(*values)
    return None


def color_from_operator(op: Operator) -> Optional[RGB]:
    """Returns the color an operator sets, or None for non-color operators."""
    if op.opcode not in COLOR_OPS or not op.args:
        return None
    if op.opcode in (OperatorCode.SET_STROKE_RGB, OperatorCode.SET_FILL_RGB):
        return normalize_rgb(*op.args[:3]) if len(op.args) >= 3 else None
    if op.opcode in (OperatorCode.SET_STROKE_GRAY, OperatorCode.SET_FILL_GRAY):
        return gray_to_rgb(op.args[0])
    return color_from_values(op.args)


def to_hex(rgb: RGB) -> str:
    """Formats a 0-1 RGB triple as `#rrggbb`, rounding half up."""
    return "#" + "".join(
        f"{int(math.floor(_clamp(v) * 255 + 0.5)):02x}" for v in rgb
    )


def saturation(rgb: RGB) -> float:
    max_val, min_val = max(rgb), min(rgb)
    return (max_val - min_val) / max_val if max_val > 0 else 0.0


def brightness(rgb: RGB) -> float:
    return sum(rgb) / 3


def is_primary_color(rgb: RGB) -> bool:
    """Visibly colored: neither near-black, near-white nor gray."""
    sat, bright = saturation(rgb), brightness(rgb)
    if bright < 0.15 or bright > 0.85 or sat < 0.1:
        return False
    return sat > 0.15 and 0.2 < bright < 0.8


def is_text_color(rgb: RGB) -> bool:
    return brightness(rgb) < 0.4 and saturation(rgb) < 0.2


def is_muted_color(rgb: RGB) -> bool:
    return 0.3 < brightness(rgb) < 0.7 and saturation(rgb) < 0.3


def score_primary_color(rgb: RGB) -> float:
    """Favors moderate saturation and mid brightness (0.25 to 4)."""
    sat, bright = saturation(rgb), brightness(rgb)
    if 0.2 < sat < 0.6:
        sat_score = 2.0
    elif sat > 0.15:
        sat_score = 1.0
    else:
        sat_score = 0.5
    if 0.3 < bright < 0.7:
        bright_score = 2.0
    elif 0.2 < bright < 0.8:
        bright_score = 1.0
    else:
        bright_score = 0.5
    return sat_score * bright_score


COLOR_BUCKET_STRATEGIES: Tuple[Tuple[str, Callable[[RGB], bool]], ...] = (
    ("primary", is_primary_color),
    ("text", is_text_color),
    ("muted", is_muted_color),
)


def classify_color(rgb: RGB, strategies=COLOR_BUCKET_STRATEGIES) -> Optional[str]:
    """Returns the first bucket whose predicate accepts the color, if any."""
    for bucket, predicate in strategies:
        if predicate(rgb):
            return bucket
    return None


class ColorTally:
    """Per-bucket occurrence counts of every color seen in an operator stream."""

    def __init__(self):
        self.primary: Dict[str, List[float]] = {}  # hex -> [count, score]
        self.text: Counter = Counter()
        self.muted: Counter = Counter()
        self.seen: Counter = Counter()

    def observe(self, rgb: RGB):
        hex_color = to_hex(rgb)
        self.seen[hex_color] += 1
        bucket = classify_color(rgb)
        if bucket == "primary":
            entry = self.primary.setdefault(hex_color, [0, score_primary_color(rgb)])
            entry[0] += 1
        elif bucket == "text":
            self.text[hex_color] += 1
        elif bucket == "muted":
            self.muted[hex_color] += 1

    def observe_operators(self, operators: Iterable[Operator]) -> "ColorTally":
        for op in operators:
            rgb = color_from_operator(op)
            if rgb is not None:
                self.observe(rgb)
        return self

    def merge(self, other: "ColorTally"):
        for hex_color, (count, score) in other.primary.items():
            entry = self.primary.setdefault(hex_color, [0, score])
            entry[0] += count
        self.text.update(other.text)
        self.muted.update(other.muted)
        self.seen.update(other.seen)

    def palette(self) -> ColorPalette:
        """Selects the best representative of each bucket."""
        if self.seen:
            log_colors.debug(
                "Colors found: %s",
                ", ".join(f"{h}({c})" for h, c in self.seen.most_common(10)),
            )
        primary = None
        if self.primary:
            primary = max(self.primary.items(), key=lambda item: item[1][0] * item[1][1])[0]
            log_colors.debug("Primary color: %s", primary)
        text = self.text.most_common(1)[0][0] if self.text else None
        muted = self.muted.most_common(1)[0][0] if self.muted else None
        return ColorPalette(primary=primary, text=text, muted=muted)


def detect_palette(operators: Iterable[Operator]) -> ColorPalette:
    """Convenience wrapper: tally a single operator stream and pick the palette."""
    return ColorTally().observe_operators(operators).palette()
