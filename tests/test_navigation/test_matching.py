"""Tests for openapi_explorer.navigation.matching."""

from __future__ import annotations

import pytest

from openapi_explorer.navigation.matching import fuzzy_score, rank


class TestFuzzyScore:
    """Subsequence matching and scoring."""

    def test_empty_query_matches_with_zero(self) -> None:
        assert fuzzy_score("anything", "") == 0

    @pytest.mark.parametrize(
        ("candidate", "query"),
        [("user_id", "uid"), ("UserId", "uid"), ("created_at", "CRAT"), ("POST /users", "pu")],
    )
    def test_subsequence_matches(self, candidate: str, query: str) -> None:
        assert fuzzy_score(candidate, query) is not None

    @pytest.mark.parametrize(
        ("candidate", "query"),
        [("user_id", "xyz"), ("name", "namex"), ("abc", "cba"), ("", "a")],
    )
    def test_non_matches(self, candidate: str, query: str) -> None:
        assert fuzzy_score(candidate, query) is None

    def test_consecutive_beats_scattered(self) -> None:
        assert fuzzy_score("name", "nam") > fuzzy_score("nxaxm", "nam")

    def test_prefix_beats_middle(self) -> None:
        assert fuzzy_score("id", "id") > fuzzy_score("paid", "id")

    def test_word_boundary_bonus(self) -> None:
        assert fuzzy_score("owner_email", "e") > fuzzy_score("owner", "e")

    def test_camel_case_boundary(self) -> None:
        assert fuzzy_score("petId", "i") > fuzzy_score("petid", "i")

    def test_best_start_is_used(self) -> None:
        # The second "s" starts a tight run; the first does not.
        assert fuzzy_score("status_sku", "sku") == fuzzy_score("sku", "sku") - len("status_")


class TestRank:
    """Filtering and ordering of candidate lists."""

    def test_empty_query_sorts_ascending(self) -> None:
        assert rank(["name", "id", "code"], "") == ["code", "id", "name"]

    def test_drops_non_matches(self) -> None:
        assert rank(["name", "id", "code"], "na") == ["name"]

    def test_best_match_first(self) -> None:
        assert rank(["paid", "id", "identifier"], "id")[0] == "id"

    def test_ties_are_lexicographic(self) -> None:
        assert rank(["b_x", "a_x", "c_x"], "x") == ["a_x", "b_x", "c_x"]

    def test_accepts_any_iterable(self) -> None:
        assert rank({"b": 1, "a": 2}, "") == ["a", "b"]
