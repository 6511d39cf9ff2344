from rlayout_lib.graphics import GraphicsState, apply_operator, extract_graphics
from rlayout_lib.models import Operator, OperatorCode as Op
from rlayout_lib.schema import FillElement, PathElement, Point, RectangleElement


def test_stroked_separator_line():
    elements = extract_graphics(
        [
            Operator(Op.SET_STROKE_RGB, (1.0, 0.0, 0.0)),
            Operator(Op.SET_LINE_WIDTH, (2.0,)),
            Operator(Op.MOVE_TO, (10.0, 700.0)),
            Operator(Op.LINE_TO, (600.0, 700.0)),
            Operator(Op.STROKE_PATH),
        ]
    )
    assert elements == [
        PathElement(points=[Point(10, 700), Point(600, 700)], strokeColor="#ff0000", lineWidth=2.0)
    ]


def test_fill_uses_fill_color_and_clears_path():
    elements = extract_graphics(
        [
            Operator(Op.SET_FILL_GRAY, (0.5,)),
            Operator(Op.MOVE_TO, (0.0, 0.0)),
            Operator(Op.LINE_TO, (10.0, 0.0)),
            Operator(Op.LINE_TO, (10.0, 10.0)),
            Operator(Op.FILL_PATH),
            Operator(Op.STROKE_PATH),
        ]
    )
    assert elements == [
        FillElement(points=[Point(0, 0), Point(10, 0), Point(10, 10)], fillColor="#808080")
    ]


def test_painting_an_empty_path_emits_nothing():
    assert extract_graphics([Operator(Op.STROKE_PATH), Operator(Op.FILL_PATH)]) == []


def test_rectangle_leaves_current_path_alone():
    elements = extract_graphics(
        [
            Operator(Op.SET_FILL_RGB, (0.3, 0.5, 0.3)),
            Operator(Op.MOVE_TO, (0.0, 0.0)),
            Operator(Op.RECTANGLE, (36.0, 720.0, 540.0, 1.5)),
            Operator(Op.LINE_TO, (5.0, 5.0)),
            Operator(Op.STROKE_PATH),
        ]
    )
    assert elements[0] == RectangleElement(
        x=36.0,
        y=720.0,
        width=540.0,
        height=1.5,
        strokeColor="#000000",
        fillColor="#4d804d",
        lineWidth=1.0,
    )
    assert elements[1].points == [Point(0, 0), Point(5, 5)]


def test_non_positive_line_width_maps_to_one():
    state, _ = apply_operator(GraphicsState(), Operator(Op.SET_LINE_WIDTH, (0.0,)))
    assert state.line_width == 1.0


def test_unknown_and_malformed_operators_leave_state_unchanged():
    state = GraphicsState(current_path=(Point(1, 1),), stroke_color="#123456")
    for op in [
        Operator("closePath"),
        Operator(Op.MOVE_TO, (1.0,)),
        Operator(Op.SET_LINE_WIDTH),
        Operator(Op.SET_STROKE_RGB, (0.5,)),
        Operator(Op.RECTANGLE, (1.0, 2.0, 3.0)),
    ]:
        new_state, element = apply_operator(state, op)
        assert new_state is state
        assert element is None


def test_color_n_operators_set_colors():
    state, _ = apply_operator(GraphicsState(), Operator(Op.SET_STROKE_COLOR_N, (0.0, 0.0, 1.0)))
    state, _ = apply_operator(state, Operator(Op.SET_FILL_COLOR_N, (0.0, 0.0, 0.0, 1.0)))
    assert state.stroke_color == "#0000ff"
    assert state.fill_color == "#000000"
