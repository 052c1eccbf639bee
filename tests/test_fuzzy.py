"""
Tests de la comparació aproximada de noms
"""
import pytest
from docverify.matching.fuzzy import (
    normalize_name, edit_similarity, ocr_corrected, corrected_equal,
    best_edit_distance, positional_similarity, compare_words, compare_names,
)


class TestNormalize:
    def test_uppercase_and_collapse(self):
        assert normalize_name("  arnav   mehta ") == "ARNAV MEHTA"

    def test_none(self):
        assert normalize_name(None) == ""


class TestEditSimilarity:
    def test_identical(self):
        assert edit_similarity("ARNAV", "ARNAV") == 1.0

    def test_one_substitution(self):
        assert edit_similarity("ABC", "ABD") == pytest.approx(1 - 1 / 3)

    def test_both_empty(self):
        assert edit_similarity("", "") == 0.0


class TestOcrCorrection:
    def test_m_between_letters_becomes_rn(self):
        assert ocr_corrected("AMAV") == "ARNAV"

    def test_leading_m_untouched(self):
        assert ocr_corrected("MEHTA") == "MEHTA"

    def test_corrected_equal_is_symmetric(self):
        assert corrected_equal("AMAV", "ARNAV")
        assert corrected_equal("ARNAV", "AMAV")

    def test_best_edit_distance_uses_correction(self):
        assert best_edit_distance("AMAV", "ARNAV") == 0

    def test_positional_identical(self):
        assert positional_similarity("ARNAV", "ARNAV") == 1.0

    def test_positional_partial_credit(self):
        # A=A (1) + RN/M (0.8) sobre 5 caràcters
        assert positional_similarity("ARNAV", "AMAV") == pytest.approx(1.8 / 5)


class TestCompareWords:
    def test_exact(self):
        assert compare_words("arnav", "ARNAV") == 1.0

    def test_rn_m(self):
        assert compare_words("Amav", "Arnav") == 0.95

    def test_empty(self):
        assert compare_words("", "ARNAV") == 0.0


class TestCompareNames:
    def test_exact_ignores_case_and_spaces(self):
        result = compare_names("Arnav Mehta", "ARNAV   MEHTA")
        assert result.match is True
        assert result.similarity == 1.0
        assert result.strategy == "exact"

    def test_rn_read_as_m(self):
        result = compare_names("Arnav Shah", "Amav Shah")
        assert result.match is True
        assert result.similarity == pytest.approx(0.95)
        assert result.strategy == "ocr_correction"

    def test_unrelated_names(self):
        assert compare_names("Arnav Shah", "Completely Different").match is False

    def test_first_name_priority(self):
        result = compare_names("Priya Sharma", "Priya Sarma")
        assert result.match is True
        assert result.strategy == "first_name"
        assert 0.85 < result.similarity < 1.0

    def test_word_order_swapped(self):
        result = compare_names("Mehta Arnav", "Arnav Mehta")
        assert result.match is True
        assert result.strategy == "word_set"

    def test_empty_name(self):
        result = compare_names("", "Arnav Mehta")
        assert result.match is False
        assert result.similarity == 0.0

    def test_similarity_is_symmetric(self):
        a = compare_names("Arnav Shah", "Amav Shah")
        b = compare_names("Amav Shah", "Arnav Shah")
        assert a.similarity == b.similarity

    def test_similarity_in_range(self):
        result = compare_names("Rahul Verma", "Arnav Mehta")
        assert 0.0 <= result.similarity <= 1.0
