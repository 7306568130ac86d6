"""Unit tests for text normalization."""
import pytest
from processor.text_normalizer import normalize


class TestNormalize:
    """Test cases for normalize()."""

    @pytest.mark.parametrize("text", ["MÚSICA", "Música", "musica", "música"])
    def test_accents_and_case_ignored(self, text):
        assert normalize(text) == "musica"

    def test_idempotent(self):
        for text in ["Dança Contemporânea", "ÇÃO", "Straße", "Hall 1", ""]:
            once = normalize(text)
            assert normalize(once) == once

    def test_none_and_empty(self):
        assert normalize(None) == ""
        assert normalize("") == ""

    def test_non_latin_text_kept(self):
        assert normalize("Café Tokyo 東京") == "cafe tokyo 東京"

