# --- rlayout_lib/graphics.py ---
"""
rlayout_lib/graphics.py: Recovers paths, fills and rectangles from a page's
operator stream.

The running graphics state is an immutable value folded over the operators;
`apply_operator` returns the next state and, for painting operators, the
element that was produced.
"""
import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .colors import color_from_operator, to_hex
from .constants import DEFAULT_FILL_COLOR, DEFAULT_LINE_WIDTH, DEFAULT_STROKE_COLOR
from .models import FILL_COLOR_OPS, STROKE_COLOR_OPS, Operator, OperatorCode
from .schema import FillElement, GraphicElement, PathElement, Point, RectangleElement

log_graphics = logging.getLogger("rlayout.graphics")


@dataclass(frozen=True)
class GraphicsState:
    current_path: Tuple[Point, ...] = ()
    stroke_color: str = DEFAULT_STROKE_COLOR
    fill_color: str = DEFAULT_FILL_COLOR
    line_width: float = DEFAULT_LINE_WIDTH


def _set_color(state: GraphicsState, op: Operator) -> GraphicsState:
    rgb = color_from_operator(op)
    if rgb is None:
        return state
    if op.opcode in STROKE_COLOR_OPS:
        return replace(state, stroke_color=to_hex(rgb))
    return replace(state, fill_color=to_hex(rgb))


def _set_line_width(state: GraphicsState, op: Operator) -> GraphicsState:
    if not op.args:
        return state
    width = op.args[0]
    return replace(state, line_width=width if width > 0 else DEFAULT_LINE_WIDTH)


def _add_point(state: GraphicsState, op: Operator) -> GraphicsState:
    if len(op.args) < 2:
        return state
    return replace(state, current_path=state.current_path + (Point(op.args[0], op.args[1]),))


def apply_operator(
    state: GraphicsState, op: Operator
) -> Tuple[GraphicsState, Optional[GraphicElement]]:
    """Advances the graphics state by one operator."""
    code = op.opcode
    if code in STROKE_COLOR_OPS or code in FILL_COLOR_OPS:
        return _set_color(state, op), None
    if code == OperatorCode.SET_LINE_WIDTH:
        return _set_line_width(state, op), None
    if code in (OperatorCode.MOVE_TO, OperatorCode.LINE_TO):
        return _add_point(state, op), None
    if code == OperatorCode.STROKE_PATH:
        if not state.current_path:
            return state, None
        element = PathElement(
            points=list(state.current_path),
            strokeColor=state.stroke_color,
            lineWidth=state.line_width,
        )
        return replace(state, current_path=()), element
    if code == OperatorCode.FILL_PATH:
        if not state.current_path:
            return state, None
        element = FillElement(points=list(state.current_path), fillColor=state.fill_color)
        return replace(state, current_path=()), element
    if code == OperatorCode.RECTANGLE:
        if len(op.args) < 4:
            return state, None
        x, y, width, height = op.args[:4]
        return state, RectangleElement(
            x=x,
            y=y,
            width=width,
            height=height,
            strokeColor=state.stroke_color,
            fillColor=state.fill_color,
            lineWidth=state.line_width,
        )
    return state, None


def extract_graphics(operators: Sequence[Operator], page_number: int = 1) -> List[GraphicElement]:
    """Replays a page's operators and collects every emitted element."""
    state = GraphicsState()
    elements: List[GraphicElement] = []
    for op in operators:
        state, element = apply_operator(state, op)
        if element is not None:
            elements.append(element)
    log_graphics.debug("Page %d: %d graphic elements extracted.", page_number, len(elements))
    return elements
