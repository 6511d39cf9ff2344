from rlayout_lib.lines import group_lines, line_key
from rlayout_lib.models import Token


def _token(text, x, y):
    return Token(text=text, origin_x=x, origin_y=y, width=10, height=12, font_ref="F1")


def test_line_key_rounds_half_up():
    assert line_key(1.0) == 1  # 0.5 bucket rounds up, not to even
    assert line_key(5.0) == 3
    assert line_key(700.4) == line_key(699.6)
    assert line_key(701.0) != line_key(699.6)


def test_lines_are_top_first_and_left_to_right():
    tokens = [
        _token("b", 200, 600),
        _token("c", 50, 700),
        _token("a", 50, 600),
        _token("d", 300, 700.5),
    ]
    lines = group_lines(tokens)

    assert [[t.text for t in line.tokens] for line in lines] == [["c", "d"], ["a", "b"]]
    assert lines[0].y == 700


def test_every_token_lands_in_exactly_one_line():
    tokens = [_token(str(i), (i * 37) % 400, 700 - (i % 7) * 13.3) for i in range(60)]
    lines = group_lines(tokens)

    grouped = [t for line in lines for t in line.tokens]
    assert len(grouped) == len(tokens)
    assert sorted(grouped, key=id) == sorted(tokens, key=id)


def test_stray_token_becomes_its_own_line():
    lines = group_lines([_token("only", 10, 100)])
    assert len(lines) == 1
    assert lines[0].tokens[0].text == "only"


def test_equal_x_keeps_emission_order():
    tokens = [_token("first", 10, 100), _token("second", 10, 100)]
    assert [t.text for t in group_lines(tokens)[0].tokens] == ["first", "second"]


def test_empty_page_has_no_lines():
    assert group_lines([]) == []
