from dataclasses import dataclass

import pytest

from nodekit.bisearch import bi_search


@dataclass
class MyElement:
    score: int


SCORES = [MyElement(10), MyElement(12), MyElement(14), MyElement(16)]


def _score(element):
    return element.score


@pytest.mark.parametrize(
    "value, expected",
    [(9, 0), (10, 0), (11, 1), (12, 1), (13, 2), (14, 2), (15, 3), (16, 3), (17, -1)],
)
def test_match_up_right(value, expected):
    assert bi_search(SCORES, value, 1, key=_score) == expected


@pytest.mark.parametrize("value, expected", [(9, -1), (11, 0), (41, 3), (30, 2)])
def test_match_up_left_documented(value, expected):
    assert bi_search([10, 20, 30, 40], value, -1) == expected


@pytest.mark.parametrize("value, expected", [(9, 0), (11, 1), (41, -1)])
def test_match_up_right_documented(value, expected):
    assert bi_search([10, 20, 30, 40], value, 1) == expected


def test_exact_match_required():
    assert bi_search([10, 20, 30, 40], 30, 0) == 2
    assert bi_search([10, 20, 30, 40], 31, 0) == -1


def test_empty_sequence():
    assert bi_search([], 5, 1) == -1
    assert bi_search([], 5, -1) == -1


def test_every_present_value_is_found():
    values = list(range(0, 200, 3))
    for index, v in enumerate(values):
        assert bi_search(values, v, 0) == index