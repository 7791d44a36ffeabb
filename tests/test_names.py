import pytest

from openbeta_site.parsing.names import sanitize_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("(6) Red Wall", "Red Wall"),
        ("04-Leavitt Peak", "Leavitt Peak"),
        ("Plain Name", "Plain Name"),
        ("(aa) Upper Tier", "Upper Tier"),
        ("10-Tenth Route", "Tenth Route"),
        ("9-Ninth Route", "Ninth Route"),
    ],
)
def test_sanitize_name(raw, expected):
    assert sanitize_name(raw) == expected


@pytest.mark.parametrize("raw", ["0-Zero", "00-Double Zero", "100-Hundred", "(abcd) Long", "Route 04-Mid"])
def test_sanitize_name_leaves_other_prefixes(raw):
    assert sanitize_name(raw) == raw


def test_sanitize_name_strips_only_one_marker():
    assert sanitize_name("(6) 04-Both") == "04-Both"


def test_sanitize_name_strips_short_parenthetical_names():
    # "(AI)" is indistinguishable from an ordering code
    assert sanitize_name("(AI) Foo") == "Foo"


@pytest.mark.parametrize("raw", ["Plain Name", "Red Wall", "Leavitt Peak (East)"])
def test_sanitize_name_idempotent_without_markers(raw):
    assert sanitize_name(sanitize_name(raw)) == sanitize_name(raw) == raw
