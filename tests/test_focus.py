import pytest

from reqtui.focus import FOCUS_ORDER, Focus, advance, retreat


def test_advance_order():
    assert advance(Focus.URL) is Focus.METHOD
    assert advance(Focus.METHOD) is Focus.HEADERS
    assert advance(Focus.HEADERS) is Focus.BODY
    assert advance(Focus.BODY) is Focus.URL


@pytest.mark.parametrize("start", FOCUS_ORDER)
def test_four_advances_return_to_start(start):
    focus = start
    for _ in range(4):
        focus = advance(focus)
    assert focus is start


@pytest.mark.parametrize("start", FOCUS_ORDER)
def test_retreat_undoes_advance(start):
    assert retreat(advance(start)) is start


def test_name_field_is_not_in_the_cycle():
    with pytest.raises(ValueError):
        advance(Focus.NAME)
