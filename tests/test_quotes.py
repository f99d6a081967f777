import random

from quotes import MOTIVATIONAL_QUOTES, random_quote


def test_quote_comes_from_list():
    assert random_quote(random.Random(1)) in MOTIVATIONAL_QUOTES


def test_exclude_avoids_repeat():
    rng = random.Random(7)
    previous = MOTIVATIONAL_QUOTES[0]
    for _ in range(50):
        quote = random_quote(rng, exclude=previous)
        assert quote != previous
        previous = quote
