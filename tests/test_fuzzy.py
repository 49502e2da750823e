"""Tests for verse normalization and edit-distance similarity."""

from antakshari_mcp.fuzzy import first_char, normalize_verse, similarity, tokenize


class TestNormalization:
    def test_dandas_removed(self):
        assert normalize_verse("असतो मा सद्गमय ।") == "असतो मा सद्गमय"
        assert normalize_verse("किमकुर्वत सञ्जय ॥") == "किमकुर्वत सञ्जय"

    def test_verse_numbers_stripped(self):
        assert normalize_verse("ततः सुखम् ॥ ४७ ॥") == "ततः सुखम्"
        assert normalize_verse("ततः सुखम् ||2.47||") == "ततः सुखम्"

    def test_citation_dots_removed(self):
        assert normalize_verse("भ.गी. सुखम्") == "भगी सुखम्"

    def test_lines_joined(self):
        text = "धर्मक्षेत्रे कुरुक्षेत्रे ।\nमामकाः पाण्डवाश्चैव ॥"
        assert normalize_verse(text) == "धर्मक्षेत्रे कुरुक्षेत्रे मामकाः पाण्डवाश्चैव"

    def test_spaces_collapsed(self):
        assert normalize_verse("  अहम्   ब्रह्म\t अस्मि  ") == "अहम् ब्रह्म अस्मि"

    def test_lowercase(self):
        assert normalize_verse("Shloka  ONE") == "shloka one"

    def test_idempotent(self):
        samples = [
            "धर्मक्षेत्रे कुरुक्षेत्रे समवेता युयुत्सवः ।\nमामकाः पाण्डवाश्चैव किमकुर्वत सञ्जय ॥",
            "  ॥ १ ॥  ",
            "a . b | c",
            "",
        ]
        for s in samples:
            assert normalize_verse(normalize_verse(s)) == normalize_verse(s)

    def test_empty(self):
        assert normalize_verse("।। ॥ १२ ॥") == ""


class TestTokenize:
    def test_words(self):
        assert tokenize("अहम् ब्रह्म अस्मि ॥") == ["अहम्", "ब्रह्म", "अस्मि"]

    def test_empty_tokens_dropped(self):
        assert tokenize("  ।  ") == []

    def test_strict_variant_drops_short_tokens(self):
        assert tokenize("न हि ज्ञानेन", min_length=2) == ["हि", "ज्ञानेन"]
        assert tokenize("न हि ज्ञानेन") == ["न", "हि", "ज्ञानेन"]


class TestFirstChar:
    def test_leading_whitespace(self):
        assert first_char("  \nयदा यदा") == "य"

    def test_blank(self):
        assert first_char("   ") == ""


class TestSimilarity:
    def test_exact_match(self):
        assert similarity("धर्मक्षेत्रे", "धर्मक्षेत्रे") == 1.0

    def test_empty_strings(self):
        assert similarity("", "अहम्") == 0.0
        assert similarity("अहम्", "") == 0.0
        assert similarity("", "") == 1.0

    def test_single_edit(self):
        # One substitution in a four-character word
        assert similarity("abcd", "abce") == 0.75

    def test_insertion(self):
        assert similarity("kitten", "sitting") == 1 - 3 / 7

    def test_symmetric(self):
        pairs = [("धर्म", "कर्म"), ("युयुत्सवः", "युयुत्सवा"), ("a", "abc")]
        for a, b in pairs:
            assert similarity(a, b) == similarity(b, a)

    def test_range(self):
        assert 0.0 <= similarity("अ", "ब") <= 1.0
        assert similarity("अ", "ब") == 0.0
