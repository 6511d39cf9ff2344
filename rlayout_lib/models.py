"""
rlayout_lib/models.py: Internal data models shared by the pipeline stages.

These types never leave the engine; the JSON-facing output lives in schema.py.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

RGB = Tuple[float, float, float]


class OperatorCode(str, Enum):
    """The graphics operators the engine understands."""

    SET_STROKE_RGB = "setStrokeRGBColor"
    SET_FILL_RGB = "setFillRGBColor"
    SET_STROKE_COLOR_N = "setStrokeColorN"
    SET_FILL_COLOR_N = "setFillColorN"
    SET_STROKE_GRAY = "setStrokeGray"
    SET_FILL_GRAY = "setFillGray"
    SET_LINE_WIDTH = "setLineWidth"
    MOVE_TO = "moveTo"
    LINE_TO = "lineTo"
    STROKE_PATH = "stroke"
    FILL_PATH = "fill"
    RECTANGLE = "rectangle"


STROKE_COLOR_OPS = frozenset(
    {
        OperatorCode.SET_STROKE_RGB,
        OperatorCode.SET_STROKE_COLOR_N,
        OperatorCode.SET_STROKE_GRAY,
    }
)
FILL_COLOR_OPS = frozenset(
    {
        OperatorCode.SET_FILL_RGB,
        OperatorCode.SET_FILL_COLOR_N,
        OperatorCode.SET_FILL_GRAY,
    }
)
COLOR_OPS = STROKE_COLOR_OPS | FILL_COLOR_OPS


@dataclass(frozen=True)
class Operator:
    """A single graphics instruction. Unknown opcodes are kept as raw strings."""

    opcode: Union[OperatorCode, str]
    args: Tuple[float, ...] = ()

    @property
    def is_known(self) -> bool:
        return isinstance(self.opcode, OperatorCode)


@dataclass(frozen=True)
class Token:
    """One decoded glyph run in page space (origin bottom-left)."""

    text: str
    origin_x: float
    origin_y: float
    width: float
    height: float
    font_ref: str
    color_rgb: Optional[RGB] = None

    @property
    def right(self) -> float:
        return self.origin_x + self.width


@dataclass
class Line:
    """Tokens sharing a baseline bucket, ordered left to right."""

    key: int
    tokens: List[Token] = field(default_factory=list)

    @property
    def y(self) -> float:
        return self.tokens[0].origin_y if self.tokens else 0.0


@dataclass
class PageInput:
    """The per-page input handed over by the PDF decoder."""

    page_number: int
    width: float
    height: float
    text_tokens: list = field(default_factory=list)
    operators: list = field(default_factory=list)
