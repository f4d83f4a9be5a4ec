import pytest

from bucket_limiter import InvalidRuleError, Rule, parse_rules


def test_defaults_cost_to_one():
    r = Rule(10, 5)
    assert (r.window_seconds, r.limit, r.cost) == (10, 5, 1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"window_seconds": 0, "limit": 1},
        {"window_seconds": 1, "limit": 0},
        {"window_seconds": -5, "limit": 1},
        {"window_seconds": 1, "limit": 1, "cost": 0},
        {"window_seconds": 1.5, "limit": 1},
        {"window_seconds": True, "limit": 1},
    ],
)
def test_rejects_malformed_rules(kwargs):
    with pytest.raises(InvalidRuleError) as exc:
        Rule(**kwargs)
    assert exc.value.code == "invalid_rule"


def test_cost_above_limit_is_allowed():
    r = Rule(window_seconds=60, limit=2, cost=5)
    assert r.cost > r.limit


def test_rule_is_immutable():
    r = Rule(10, 10)
    with pytest.raises(AttributeError):
        r.limit = 20  # type: ignore[misc]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10/10s", Rule(10, 10)),
        ("600/1h", Rule(3600, 600)),
        ("10000/1d", Rule(86400, 10000)),
        ("5/1m*2", Rule(60, 5, 2)),
        (" 7 / 30 ", Rule(30, 7)),
    ],
)
def test_parse(text, expected):
    assert Rule.parse(text) == expected


@pytest.mark.parametrize("text", ["", "10", "ten/10s", "10/0s", "0/10s", "10/10w", "10/10s*0"])
def test_parse_rejects_bad_notation(text):
    with pytest.raises(InvalidRuleError):
        Rule.parse(text)


def test_parse_rules_list():
    assert parse_rules("10/10s, 600/1h,,10000/1d") == (Rule(10, 10), Rule(3600, 600), Rule(86400, 10000))


def test_str_round_trips_through_parse():
    r = Rule(60, 5, 2)
    assert Rule.parse(str(r)) == r
