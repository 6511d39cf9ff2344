# --- rlayout_lib/lines.py ---
import logging
import math
from typing import Dict, List, Sequence

from .constants import LINE_TOLERANCE
from .models import Line, Token

log_lines = logging.getLogger("rlayout.lines")


def line_key(origin_y: float, tolerance: float = LINE_TOLERANCE) -> int:
    """Buckets a baseline, rounding half up so keys never depend on parity."""
    return int(math.floor(origin_y / tolerance + 0.5))


def group_lines(tokens: Sequence[Token], tolerance: float = LINE_TOLERANCE) -> List[Line]:
    """
    Clusters tokens that share a baseline bucket into lines.

    Lines come back top of page first; tokens within a line are sorted left
    to right, keeping emission order for equal x positions.
    """
    buckets: Dict[int, List[Token]] = {}
    for token in tokens:
        buckets.setdefault(line_key(token.origin_y, tolerance), []).append(token)

    lines = [
        Line(key=key, tokens=sorted(group, key=lambda t: t.origin_x))
        for key, group in sorted(buckets.items(), key=lambda item: -item[0])
    ]
    log_lines.debug("Grouped %d tokens into %d lines.", len(tokens), len(lines))
    return lines
