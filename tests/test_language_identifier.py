"""
Тесты для компонента LanguageIdentifier.
"""

import pytest

from nlp_annotator.components.language_identifier import LanguageIdentifier
from nlp_annotator.interfaces.text_annotator import UNKNOWN_LANGUAGE
from nlp_annotator.models.ngram_profile import NgramProfile, extract_ngrams, extract_words

from .fixtures.sample_texts import SAMPLE_UNSUPPORTED_LATIN_TEXTS


class ProfilesOnly:
    """Набор моделей, в котором есть только профили."""

    def __init__(self, profiles):
        self._profiles = profiles

    def profiles(self):
        return iter(sorted(self._profiles, key=lambda p: p.language))


class TestLanguageIdentifier:
    """Тесты для LanguageIdentifier."""

    @pytest.mark.parametrize("code", ["en", "es", "fr", "de"])
    def test_supported_languages(self, bundle, sample_texts, code):
        """Связный текст на каждом языке определяется уверенно."""
        language, confidence = LanguageIdentifier(bundle).identify(sample_texts[code])
        assert language == code
        assert 0.0 < confidence <= 1.0

    def test_unsupported_language(self, bundle, sample_texts):
        """Кириллица не похожа ни на один профиль."""
        assert LanguageIdentifier(bundle).identify(sample_texts["ru"]) == (UNKNOWN_LANGUAGE, 0.0)

    @pytest.mark.parametrize("code", sorted(SAMPLE_UNSUPPORTED_LATIN_TEXTS))
    def test_unsupported_latin_language(self, bundle, code):
        """Итальянский, португальский и нидерландский не выдаются за es/de."""
        text = SAMPLE_UNSUPPORTED_LATIN_TEXTS[code]
        assert LanguageIdentifier(bundle).identify(text) == (UNKNOWN_LANGUAGE, 0.0)

    def test_names_only_sentence(self, bundle):
        """Предложение почти из одних имён собственных определяется как английское."""
        language, confidence = LanguageIdentifier(bundle).identify("Steve Jobs founded Apple Inc.")
        assert language == "en"
        assert confidence > 0.0

    @pytest.mark.parametrize("text, code", [
        ("The cats are running.", "en"),
        ("Die Katze schläft auf dem Sofa.", "de"),
        ("Los gatos duermen.", "es"),
    ])
    def test_short_sentences(self, bundle, text, code):
        assert LanguageIdentifier(bundle).identify(text)[0] == code

    def test_empty_and_symbols(self, bundle):
        identifier = LanguageIdentifier(bundle)
        assert identifier.identify("") == (UNKNOWN_LANGUAGE, 0.0)
        assert identifier.identify("12345 !!! ...") == (UNKNOWN_LANGUAGE, 0.0)

    def test_short_text_confidence_capped(self, bundle):
        """Короткий текст получает уверенность не выше порога."""
        identifier = LanguageIdentifier(bundle, min_text_length=10, short_text_cap=0.3)
        language, confidence = identifier.identify("the")
        assert language != UNKNOWN_LANGUAGE
        assert 0.0 < confidence <= 0.3

    def test_min_similarity(self, bundle, sample_texts):
        """Порог близости 1.0 недостижим на обычном тексте."""
        identifier = LanguageIdentifier(bundle, min_similarity=1.0)
        assert identifier.identify(sample_texts["en"]) == (UNKNOWN_LANGUAGE, 0.0)

    def test_scores_cover_all_languages(self, bundle, sample_texts):
        scores = LanguageIdentifier(bundle).scores(sample_texts["es"])
        assert set(scores) == set(bundle.languages)
        assert all(0.0 <= value <= 1.0 for value in scores.values())
        assert max(scores, key=scores.get) == "es"

    def test_tie_broken_alphabetically(self):
        """При равной близости выигрывает код, идущий раньше по алфавиту."""
        text = "the quick brown fox jumps over the lazy dog"
        profiles = [NgramProfile.from_text("xx", text), NgramProfile.from_text("aa", text)]
        identifier = LanguageIdentifier(ProfilesOnly(profiles), weights={1: 0.2, 2: 0.3, 3: 0.5})
        language, confidence = identifier.identify(text)
        assert language == "aa"
        assert confidence == pytest.approx(1.0)

    def test_no_profiles(self):
        identifier = LanguageIdentifier(ProfilesOnly([]), weights={1: 1.0})
        assert identifier.identify("hello world") == (UNKNOWN_LANGUAGE, 0.0)

    def test_deterministic(self, bundle, sample_texts):
        identifier = LanguageIdentifier(bundle)
        assert identifier.identify(sample_texts["fr"]) == identifier.identify(sample_texts["fr"])


class TestCommonWordShare:
    """Тесты проверки по служебным словам."""

    TEXT = "the quick brown fox jumps over the lazy dog"

    @pytest.fixture
    def identifier(self):
        profile = NgramProfile.from_text("en", self.TEXT, common_words=["the", "over"])
        return LanguageIdentifier(
            ProfilesOnly([profile]), weights={1: 0.2, 2: 0.3, 3: 0.5},
            min_similarity=0.0, min_common_word_share=0.3, common_word_min_count=3,
        )

    def test_share(self, identifier):
        profile = next(identifier.bundle.profiles())
        assert identifier.common_word_share("The fox is over the dog", profile) == pytest.approx(3 / 6)

    def test_capitalized_words_ignored(self, identifier):
        """Имена собственные не учитываются, служебные слова с заглавной учитываются."""
        profile = next(identifier.bundle.profiles())
        assert identifier.common_word_share("The Quick Brown Fox jumps over the dog", profile) \
            == pytest.approx(3 / 5)

    def test_too_few_words(self, identifier):
        profile = next(identifier.bundle.profiles())
        assert identifier.common_word_share("Steve Jobs founded Apple", profile) is None

    def test_profile_without_common_words(self, identifier):
        profile = NgramProfile.from_text("xx", self.TEXT)
        assert identifier.common_word_share("quick brown fox jumps", profile) is None

    def test_low_share_is_unknown(self, identifier):
        """Похожие буквы без служебных слов языка дают 'unknown'."""
        assert identifier.identify("quick brown fox jumps lazy dog") == (UNKNOWN_LANGUAGE, 0.0)
        assert identifier.identify(self.TEXT)[0] == "en"

    def test_bundle_profiles_have_common_words(self, bundle):
        for profile in bundle.profiles():
            assert profile.common_words
            assert all(word == word.lower() for word in profile.common_words)


class TestNgramProfile:
    """Тесты n-граммного профиля."""

    def test_extract_ngrams(self):
        counts = extract_ngrams("Ab ab", (1, 2, 3))
        assert counts[1] == {"a": 2, "b": 2}
        assert counts[2]["_a"] == 2
        assert counts[2]["b_"] == 2
        assert counts[3]["_ab"] == 2

    def test_digits_and_punctuation_ignored(self):
        counts = extract_ngrams("42 !?", (1, 2))
        assert not counts[1]
        assert not counts[2]

    def test_profile_size(self):
        profile = NgramProfile.from_text("xx", "abcdefghij", orders=(1,), profile_size=3)
        assert len(profile.frequencies[1]) == 3
        # При равной частоте n-граммы берутся по алфавиту
        assert set(profile.frequencies[1]) == {"a", "b", "c"}
        assert sum(profile.frequencies[1].values()) == pytest.approx(1.0)

    def test_similarity_range(self):
        profile = NgramProfile.from_text("xx", "hello world")
        counts = extract_ngrams("hello world")
        assert profile.similarity(counts, {1: 0.2, 2: 0.3, 3: 0.5}) == pytest.approx(1.0)
        assert profile.similarity(extract_ngrams("zzz"), {1: 0.2, 2: 0.3, 3: 0.5}) == 0.0

    def test_extract_words_keeps_case(self):
        assert extract_words("L'ombre, 42 Bäume!") == ["L", "ombre", "Bäume"]
