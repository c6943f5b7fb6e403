"""Tests for name/version query matching."""

from amplifier_bootstrap import VersionQuery
from amplifier_bootstrap.matching import contains_wildcard
from amplifier_bootstrap.matching import matches
from amplifier_bootstrap.matching import name_matches
from amplifier_bootstrap.matching import select
from amplifier_bootstrap.matching import version_in_range
from fakes import descriptor

CATALOG = [
    descriptor("NuGet", "2.8.5.208"),
    descriptor("NuGet", "2.8.5.127"),
    descriptor("nuget", "2.8.5.208"),  # duplicate, different case
    descriptor("Chocolatey", "2.8.5.130"),
    descriptor("PSL", "1.0.0.1"),
]


def _pairs(results):
    return [(d.name, d.version) for d in results]


def test_wildcard_detection():
    assert contains_wildcard("nu*")
    assert contains_wildcard("n?get")
    assert contains_wildcard("[nc]*")
    assert not contains_wildcard("nuget")
    assert not contains_wildcard(None)


def test_name_matching_is_case_insensitive():
    assert name_matches("NUGET", "NuGet")
    assert name_matches("nu*", "NuGet")
    assert name_matches("[cn]*", "Chocolatey")
    assert not name_matches("nu*", "Chocolatey")
    assert name_matches("", "anything")
    assert name_matches(None, "anything")


def test_range_bounds_are_inclusive():
    assert version_in_range("2.8.5.127", "2.8.5.127", "2.8.5.208")
    assert version_in_range("2.8.5.208", "2.8.5.127", "2.8.5.208")
    assert not version_in_range("2.8.5.209", None, "2.8.5.208")
    assert not version_in_range("2.8.5.126", "2.8.5.127", None)
    assert version_in_range("0.1", None, None)


def test_required_version_ignores_range():
    query = VersionQuery(name="nuget", required_version="2.8.5.127", minimum_version="3.0")
    assert _pairs(select(CATALOG, query)) == [("NuGet", "2.8.5.127")]


def test_required_version_compares_ordinally():
    query = VersionQuery(name="psl", required_version="1.0.0.1")
    assert len(list(select(CATALOG, query))) == 1
    assert not list(select(CATALOG, VersionQuery(name="psl", required_version="1.0")))


def test_all_versions_with_empty_name_returns_each_pair_once():
    results = _pairs(select(CATALOG, VersionQuery(all_versions=True)))
    assert results == [
        ("NuGet", "2.8.5.208"),
        ("NuGet", "2.8.5.127"),
        ("Chocolatey", "2.8.5.130"),
        ("PSL", "1.0.0.1"),
    ]


def test_range_returns_every_version_within_bounds():
    query = VersionQuery(name="*", minimum_version="2.8.5.127", maximum_version="2.8.5.130")
    assert _pairs(select(CATALOG, query)) == [("NuGet", "2.8.5.127"), ("Chocolatey", "2.8.5.130")]


def test_no_constraints_returns_best_per_name():
    results = _pairs(select(CATALOG, VersionQuery(name="*")))
    assert results == [("NuGet", "2.8.5.208"), ("Chocolatey", "2.8.5.130"), ("PSL", "1.0.0.1")]


def test_no_match_is_silent():
    assert list(select(CATALOG, VersionQuery(name="missing*"))) == []


def test_matches_predicate():
    nuget = CATALOG[0]
    assert matches(nuget, VersionQuery(name="nu*", minimum_version="2.0"))
    assert not matches(nuget, VersionQuery(name="nu*", maximum_version="2.0"))
    assert matches(nuget, VersionQuery(required_version="2.8.5.208"))
    assert matches(nuget, VersionQuery(all_versions=True, maximum_version="1.0"))
