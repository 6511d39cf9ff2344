# --- rlayout_lib/tokens.py ---
"""
rlayout_lib/tokens.py: Normalizes raw decoder records into Tokens and Operators.

The decoder may hand over plain dicts (as a JSON bridge would) or objects with
matching attributes. Anything malformed is skipped and logged; a single bad
record never aborts the page.
"""
import logging
import math
from numbers import Real
from typing import Any, Iterable, List, Optional

from .colors import color_from_values
from .constants import DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE
from .models import RGB, Operator, OperatorCode, Token

log_tokens = logging.getLogger("rlayout.tokens")

_MISSING = object()


def _field(raw: Any, *names: str) -> Any:
    """Reads the first present key/attribute among `names`."""
    for name in names:
        if isinstance(raw, dict):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    return _MISSING


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _parse_color(raw_color: Any) -> Optional[RGB]:
    if raw_color is _MISSING or raw_color is None:
        return None
    if _is_number(raw_color):
        raw_color = (raw_color,)
    try:
        values = [float(v) for v in raw_color if _is_number(v)]
        if len(values) != len(raw_color):
            return None
    except TypeError:
        return None
    return color_from_values(values)


def normalize_token(raw: Any) -> Optional[Token]:
    """
    Converts one raw text record into a Token.

    Returns:
        The Token, or None when the record is empty or malformed.
    """
    text = _field(raw, "text", "str")
    if text == "":
        return None
    if not isinstance(text, str):
        log_tokens.debug("Skipping token without text: %r", raw)
        return None

    transform = _field(raw, "transform")
    if (
        transform is _MISSING
        or isinstance(transform, (str, bytes))
        or not hasattr(transform, "__len__")
        or len(transform) < 6
        or not all(_is_number(v) for v in list(transform)[:6])
    ):
        log_tokens.debug("Skipping token %r: malformed transform %r", text, transform)
        return None
    t = [float(v) for v in list(transform)[:6]]

    height = _field(raw, "height")
    if not (_is_number(height) and height > 0):
        height = math.hypot(t[2], t[3]) or DEFAULT_FONT_SIZE

    width = _field(raw, "width")
    width = max(0.0, float(width)) if _is_number(width) else 0.0

    font_ref = _field(raw, "fontRef", "fontName", "font_ref")
    if not isinstance(font_ref, str) or not font_ref:
        font_ref = DEFAULT_FONT_NAME

    return Token(
        text=text,
        origin_x=t[4],
        origin_y=t[5],
        width=width,
        height=float(height),
        font_ref=font_ref,
        color_rgb=_parse_color(_field(raw, "color", "color_rgb")),
    )


def normalize_tokens(raw_tokens: Iterable[Any], page_number: int = 1) -> List[Token]:
    """Normalizes a page's text records, skipping the unusable ones."""
    tokens, skipped = [], 0
    for raw in raw_tokens or []:
        token = normalize_token(raw)
        if token is not None:
            tokens.append(token)
        elif _field(raw, "text", "str") != "":
            skipped += 1
    if skipped:
        log_tokens.warning(
            "Page %d: skipped %d malformed text token(s).", page_number, skipped
        )
    log_tokens.debug("Page %d: %d tokens normalized.", page_number, len(tokens))
    return tokens


def _parse_opcode(raw_opcode: Any):
    if isinstance(raw_opcode, OperatorCode):
        return raw_opcode
    if isinstance(raw_opcode, str):
        try:
            return OperatorCode(raw_opcode)
        except ValueError:
            pass
        try:
            return OperatorCode[raw_opcode]
        except KeyError:
            return raw_opcode
    return None


def normalize_operator(raw: Any) -> Optional[Operator]:
    """
    Converts one raw operator record into an Operator.

    Unknown opcodes are kept as raw strings; records with non-numeric
    arguments are dropped.
    """
    if isinstance(raw, Operator):
        return raw
    if isinstance(raw, (tuple, list)) and len(raw) in (1, 2):
        raw_opcode, args = raw[0], raw[1] if len(raw) == 2 else ()
    else:
        raw_opcode = _field(raw, "opcode", "op", "fn")
        args = _field(raw, "args")
        if args is _MISSING or args is None:
            args = ()

    opcode = _parse_opcode(raw_opcode)
    if opcode is None:
        log_tokens.debug("Dropping operator without opcode: %r", raw)
        return None
    if _is_number(args):
        args = (args,)
    if isinstance(args, (str, bytes)) or not all(_is_number(a) for a in args):
        log_tokens.debug("Dropping operator %s with non-numeric args %r", opcode, args)
        return None
    return Operator(opcode=opcode, args=tuple(float(a) for a in args))


def normalize_operators(raw_ops: Iterable[Any], page_number: int = 1) -> List[Operator]:
    """Normalizes a page's operator stream, preserving order."""
    operators = []
    for raw in raw_ops or []:
        try:
            op = normalize_operator(raw)
        except TypeError:
            log_tokens.debug("Dropping unreadable operator record: %r", raw)
            op = None
        if op is not None:
            operators.append(op)
    log_tokens.debug("Page %d: %d operators normalized.", page_number, len(operators))
    return operators
