"""
Тесты для компонента Lemmatizer.
"""

import pytest

from nlp_annotator.components.lemmatizer import Lemmatizer
from nlp_annotator.components.tokenizer import Tokenizer
from nlp_annotator.interfaces.text_annotator import UNKNOWN_LANGUAGE
from nlp_annotator.models.lemma_table import LemmaTable, SuffixRule


ENGLISH_CASES = [
    ("running", "VERB", "run"),
    ("cats", "NOUN", "cat"),
    ("are", "VERB", "be"),
    ("boxes", "NOUN", "box"),
    ("stories", "NOUN", "story"),
    ("making", "VERB", "make"),
    ("stopped", "VERB", "stop"),
    ("walked", "VERB", "walk"),
    ("goes", "VERB", "go"),
    ("children", "NOUN", "child"),
    ("classes", "NOUN", "class"),
    ("buses", "NOUN", "bus"),
    ("analysis", "NOUN", "analysis"),
    ("happiest", "ADJ", "happy"),
    ("bigger", "ADJ", "big"),
    ("better", "ADJ", "good"),
    ("The", "DET", "the"),
]


@pytest.fixture(scope="module")
def lemmatizer(bundle):
    return Lemmatizer(bundle)


class TestLemmatizer:
    """Тесты для Lemmatizer."""

    @pytest.mark.parametrize("word,pos,expected", ENGLISH_CASES)
    def test_english(self, lemmatizer, word, pos, expected):
        assert lemmatizer.lemmatize(word, pos, "en") == expected

    @pytest.mark.parametrize("word,pos,expected", [
        ("gatos", "NOUN", "gato"),
        ("flores", "NOUN", "flor"),
        ("canciones", "NOUN", "canción"),
        ("está", "VERB", "estar"),
        ("hablando", "VERB", "hablar"),
        ("comieron", "VERB", "comer"),
        ("bonitas", "ADJ", "bonito"),
        ("los", "DET", "el"),
    ])
    def test_spanish(self, lemmatizer, word, pos, expected):
        assert lemmatizer.lemmatize(word, pos, "es") == expected

    @pytest.mark.parametrize("word,pos,expected", [
        ("chats", "NOUN", "chat"),
        ("journaux", "NOUN", "journal"),
        ("mangé", "VERB", "manger"),
        ("jouent", "VERB", "jouer"),
        ("est", "VERB", "être"),
    ])
    def test_french(self, lemmatizer, word, pos, expected):
        assert lemmatizer.lemmatize(word, pos, "fr") == expected

    @pytest.mark.parametrize("word,pos,expected", [
        ("Katzen", "NOUN", "katze"),
        ("Häuser", "NOUN", "haus"),
        ("spielt", "VERB", "spielen"),
        ("machte", "VERB", "machen"),
        ("ist", "VERB", "sein"),
        ("kleinen", "ADJ", "klein"),
    ])
    def test_german(self, lemmatizer, word, pos, expected):
        assert lemmatizer.lemmatize(word, pos, "de") == expected

    def test_idempotent(self, lemmatizer):
        """Лемма леммы совпадает с леммой."""
        for word, pos, _ in ENGLISH_CASES:
            lemma = lemmatizer.lemmatize(word, pos, "en")
            assert lemmatizer.lemmatize(lemma, pos, "en") == lemma, word

    def test_total(self, lemmatizer):
        """Непустое слово всегда получает непустую лемму."""
        for word in ["s", "x", "es", "ing", "ed", "zzzzz", "Q"]:
            for pos in ["NOUN", "VERB", "ADJ", "X"]:
                assert lemmatizer.lemmatize(word, pos, "en")

    def test_clitics(self, lemmatizer):
        """Части сокращений при политике split."""
        assert lemmatizer.lemmatize("n't", "PART", "en") == "not"
        assert lemmatizer.lemmatize("ca", "VERB", "en") == "can"
        assert lemmatizer.lemmatize("'re", "VERB", "en") == "be"

    def test_unknown_language_lowercase(self, lemmatizer):
        assert lemmatizer.lemmatize("Running", "VERB", UNKNOWN_LANGUAGE) == "running"
        assert lemmatizer.lemmatize("Gatti", "NOUN", "it") == "gatti"

    def test_without_bundle(self):
        assert Lemmatizer().lemmatize("Cats", "NOUN", "en") == "cats"

    def test_empty(self, lemmatizer):
        assert lemmatizer.lemmatize("", "NOUN", "en") == ""

    def test_token_input(self, lemmatizer):
        token = Tokenizer().tokenize("cats")[0]
        assert lemmatizer.lemmatize(token, "NOUN", "en") == "cat"

    def test_batch(self, lemmatizer):
        """Пробелы и пунктуация сохраняют форму, длина совпадает."""
        tokens = Tokenizer().tokenize("The cats are running.")
        tags = ["DET", "SPACE", "NOUN", "SPACE", "VERB", "SPACE", "VERB", "PUNCT"]
        lemmas = lemmatizer.lemmatize_batch(tokens, tags, "en")
        assert lemmas == ["the", " ", "cat", " ", "be", " ", "run", "."]

    def test_batch_length_mismatch(self, lemmatizer):
        tokens = Tokenizer().tokenize("cats")
        with pytest.raises(ValueError):
            lemmatizer.lemmatize_batch(tokens, [], "en")


class TestLemmaTable:
    """Тесты таблицы лемматизации."""

    @pytest.fixture
    def table(self):
        return LemmaTable.from_dict("xx", {
            "undouble": "pt",
            "restore": ["e"],
            "exceptions": {"VERB": {"Went": "Go"}, "*": {"ca": "can"}},
            "rules": {"VERB": [["ing", ""], ["ss", "ss"]], "NOUN": [["s", ""]]},
            "base_forms": "make run",
        })

    def test_exceptions_lowercased(self, table):
        assert table.exception("WENT", "VERB") == "go"
        assert table.exception("ca", "NOUN") == "can"
        assert table.exception("went", "NOUN") is None

    def test_known_includes_exception_values(self, table):
        assert table.is_known("go")
        assert table.is_known("Make")
        assert not table.is_known("walk")

    def test_rules_sorted_longest_first(self, table):
        assert table.rules_for("VERB")[0] == SuffixRule("ing", "")
        assert table.rules_for("ADJ") == ()

    def test_candidates(self, table):
        rule = SuffixRule("ing", "")
        assert table.candidates("making", rule) == ["mak", "make"]
        assert table.candidates("putting", rule) == ["putt", "put", "putte"]
        # Основа короче min_stem
        assert table.candidates("xing", rule) == []
        assert table.default_candidate("putting", rule) == "put"

    def test_guard_rule(self, table):
        guard = SuffixRule("ss", "ss")
        assert guard.is_guard
        assert table.candidates("pass", guard) == ["pass"]

    def test_min_stem_from_file(self):
        table = LemmaTable.from_dict("xx", {"min_stem": 4}, min_stem=2)
        assert table.min_stem == 4
        assert LemmaTable.from_dict("xx", {}, min_stem=3).min_stem == 3

    def test_unknown_pos(self):
        with pytest.raises(ValueError):
            LemmaTable.from_dict("xx", {"rules": {"FOO": [["s", ""]]}})

    def test_bad_rule(self):
        with pytest.raises(ValueError):
            LemmaTable.from_dict("xx", {"rules": {"NOUN": [["s"]]}})
