import itertools

import pytest

from rlayout_lib.colors import (
    ColorTally,
    classify_color,
    cmyk_to_rgb,
    color_from_operator,
    detect_palette,
    gray_to_rgb,
    is_muted_color,
    is_primary_color,
    is_text_color,
    normalize_rgb,
    score_primary_color,
    to_hex,
)
from rlayout_lib.models import Operator, OperatorCode
from rlayout_lib.schema import ColorPalette


def _fill(*args):
    return Operator(OperatorCode.SET_FILL_RGB, tuple(float(a) for a in args))


def test_moderate_green_is_primary():
    sage = (0.3, 0.5, 0.3)
    assert is_primary_color(sage)
    assert not is_text_color(sage)
    assert not is_muted_color(sage)
    assert classify_color(sage) == "primary"


def test_normalization_detects_255_scale():
    assert normalize_rgb(255, 127.5, 0) == pytest.approx((1.0, 0.5, 0.0))
    assert normalize_rgb(0.2, 0.4, 0.6) == (0.2, 0.4, 0.6)
    assert gray_to_rgb(255) == (1.0, 1.0, 1.0)
    assert cmyk_to_rgb(0, 1, 1, 0) == (1, 0, 0)


def test_hex_rounds_half_up():
    assert to_hex((0.3, 0.5, 0.3)) == "#4d804d"
    assert to_hex((0.0, 0.0, 0.0)) == "#000000"
    assert to_hex((1.0, 1.0, 1.0)) == "#ffffff"


@pytest.mark.parametrize(
    "rgb, bucket",
    [
        ((0.0, 0.0, 0.0), "text"),
        ((0.13, 0.13, 0.13), "text"),
        ((0.5, 0.5, 0.5), "muted"),
        ((1.0, 1.0, 1.0), None),
        ((0.9, 0.1, 0.1), "primary"),
        ((1.0, 0.0, 0.0), "primary"),
        ((0.95, 0.95, 0.9), None),  # near white
        ((0.36, 0.3, 0.3), "primary"),  # passes both primary and text predicates
    ],
)
def test_classify_color(rgb, bucket):
    assert classify_color(rgb) == bucket


def test_classification_is_exclusive():
    steps = [i / 10 for i in range(11)]
    for rgb in itertools.product(steps, repeat=3):
        bucket = classify_color(rgb)
        matching = [
            name
            for name, predicate in (
                ("primary", is_primary_color),
                ("text", is_text_color),
                ("muted", is_muted_color),
            )
            if predicate(rgb)
        ]
        assert bucket == (matching[0] if matching else None)


def test_custom_strategy_order():
    overlap = (0.36, 0.3, 0.3)
    strategies = (("text", is_text_color), ("primary", is_primary_color))
    assert classify_color(overlap, strategies) == "text"


def test_primary_score_range():
    assert score_primary_color((0.3, 0.5, 0.3)) == 4.0
    assert score_primary_color((0.8, 0.2, 0.2)) == 2.0
    assert score_primary_color((0.5, 0.5, 0.5)) == 1.0


def test_color_from_operator():
    assert color_from_operator(Operator(OperatorCode.SET_STROKE_GRAY, (0.5,))) == (0.5, 0.5, 0.5)
    assert color_from_operator(Operator(OperatorCode.SET_FILL_COLOR_N, (0, 1, 1, 0))) == (1, 0, 0)
    assert color_from_operator(Operator(OperatorCode.SET_FILL_RGB, (0.1,))) is None
    assert color_from_operator(Operator(OperatorCode.MOVE_TO, (1, 2))) is None
    assert color_from_operator(Operator("setFillCMYKColor", (0, 0, 0, 1))) is None


def test_palette_picks_best_per_bucket():
    gray = Operator(OperatorCode.SET_FILL_GRAY, (0.1,))
    operators = [
        _fill(0.8, 0.2, 0.2),
        _fill(0.3, 0.5, 0.3),
        gray,
        _fill(0.3, 0.5, 0.3),
        gray,
        Operator(OperatorCode.SET_STROKE_GRAY, (0.5,)),
        gray,
        Operator(OperatorCode.MOVE_TO, (1, 2)),
    ]
    palette = detect_palette(operators)

    # 2 x score 4 beats 1 x score 2
    assert palette == ColorPalette(primary="#4d804d", text="#1a1a1a", muted="#808080")


def test_primary_tie_goes_to_first_seen():
    palette = detect_palette([_fill(0.8, 0.2, 0.2), _fill(0.2, 0.2, 0.8)])
    assert palette.primary == "#cc3333"


def test_empty_palette():
    assert detect_palette([]) == ColorPalette(primary=None, text=None, muted=None)


def test_merged_tallies_match_single_pass():
    ops_a = [_fill(0.3, 0.5, 0.3), Operator(OperatorCode.SET_FILL_GRAY, (0.2,))]
    ops_b = [_fill(0.8, 0.2, 0.2)] * 3 + [Operator(OperatorCode.SET_FILL_GRAY, (0.2,))]

    merged = ColorTally().observe_operators(ops_a)
    merged.merge(ColorTally().observe_operators(ops_b))

    assert merged.palette() == detect_palette(ops_a + ops_b)
