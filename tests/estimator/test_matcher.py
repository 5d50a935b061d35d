"""Tests for model relevance matching."""

import pytest

from src.estimator.matcher import (
    EXACT,
    FAMILY_SUBSTRING,
    PREFIX,
    SAME_FAMILY,
    family_token,
    is_prefix_match,
    is_related_model,
    model_relevance,
)


class TestFamilyToken:
    @pytest.mark.parametrize("model,expected", [
        ("ZX200-6", "ZX200"),
        ("ZX200", "ZX200"),
        ("PC200-8-MO", "PC200"),
        ("-X", "-X"),
        ("", ""),
    ])
    def test_family_token(self, model, expected):
        assert family_token(model) == expected


class TestModelRelevance:
    def test_exact_match(self):
        assert model_relevance("ZX200-6", "ZX200-6") == EXACT == 100

    def test_candidate_extends_query(self):
        assert model_relevance("ZX200", "ZX200-6") == PREFIX == 90

    def test_query_extends_candidate(self):
        assert model_relevance("ZX200-6A", "ZX200-6") == PREFIX

    def test_same_family_different_generation(self):
        assert model_relevance("ZX200-6", "ZX200-3") == SAME_FAMILY == 85

    def test_family_inside_other_model(self):
        assert model_relevance("ZX200-6", "EX-ZX200") == FAMILY_SUBSTRING == 80
        assert model_relevance("320D", "CAT320D-2") == FAMILY_SUBSTRING

    def test_unrelated(self):
        assert model_relevance("ZX200-6", "PC200-8") is None

    def test_case_sensitive(self):
        assert model_relevance("zx200-6", "ZX200-6") is None

    def test_blank_inputs(self):
        assert model_relevance("ZX200-6", None) is None
        assert model_relevance("ZX200-6", "") is None
        assert model_relevance("", "ZX200-6") is None

    def test_scores_ordered(self):
        assert EXACT > PREFIX > SAME_FAMILY > FAMILY_SUBSTRING > 0


class TestInclusion:
    def test_related_model_accepts_family(self):
        assert is_related_model("ZX200-6", "ZX200-3")
        assert not is_related_model("ZX200-6", "PC200-8")

    def test_prefix_match_is_stricter(self):
        assert is_prefix_match("ZX200-6", "ZX200-6")
        assert is_prefix_match("ZX200-6", "ZX200-6LC")
        assert not is_prefix_match("ZX200-6", "ZX200-3")
        assert not is_prefix_match("ZX200-6", "PC200-8")
