"""
Компонент для определения языка текста.

Сравнивает профиль символьных n-грамм текста (n = 1, 2, 3) с профилями
загруженных языков по косинусной близости. При равенстве выигрывает
код языка, идущий раньше по алфавиту.

Близкие по письму языки (итальянский и испанский, нидерландский и
немецкий) дают n-граммную близость того же порядка, что и родной язык,
поэтому ответ дополнительно проверяется по служебным словам: если среди
слов текста слишком мало артиклей, предлогов и союзов выбранного языка,
язык считается неизвестным.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

from ..config import config
from ..interfaces.text_annotator import UNKNOWN_LANGUAGE, LanguageIdentifierInterface
from ..models.base_model import ModelBundle
from ..models.ngram_profile import NgramProfile, extract_ngrams, extract_words

logger = logging.getLogger(__name__)

# Точность сравнения близостей, чтобы равенство не зависело от ошибок округления
_SCORE_PRECISION = 9


class LanguageIdentifier(LanguageIdentifierInterface):
    """Определитель языка по n-граммным профилям."""

    def __init__(self, bundle: ModelBundle,
                 weights: Optional[Mapping[int, float]] = None,
                 min_text_length: Optional[int] = None,
                 min_similarity: Optional[float] = None,
                 short_text_cap: Optional[float] = None,
                 min_common_word_share: Optional[float] = None,
                 common_word_min_count: Optional[int] = None):
        """
        Args:
            bundle: Загруженные модели
            weights: Вес каждого порядка n-грамм (по умолчанию из config)
            min_text_length: Порог длины в непробельных символах
            min_similarity: Минимальная близость, ниже которой язык 'unknown'
            short_text_cap: Максимальная уверенность для короткого текста
            min_common_word_share: Минимальная доля служебных слов языка
            common_word_min_count: Сколько слов нужно, чтобы проверять долю
        """
        self.bundle = bundle
        self.weights = dict(weights or config.get_ngram_weights())
        self.min_text_length = min_text_length if min_text_length is not None else config.get_min_text_length()
        self.min_similarity = min_similarity if min_similarity is not None else config.get_min_similarity()
        self.short_text_cap = short_text_cap if short_text_cap is not None else config.get_short_text_confidence_cap()
        self.min_common_word_share = (
            min_common_word_share if min_common_word_share is not None
            else config.get_min_common_word_share()
        )
        self.common_word_min_count = (
            common_word_min_count if common_word_min_count is not None
            else config.get_common_word_min_count()
        )

    def _profiles(self) -> Dict[str, NgramProfile]:
        return {profile.language: profile for profile in self.bundle.profiles()}

    def scores(self, text: str) -> Dict[str, float]:
        """Близость текста к каждому загруженному языку."""
        counts = extract_ngrams(text or '', self.weights.keys())
        return {
            code: profile.similarity(counts, self.weights)
            for code, profile in self._profiles().items()
        }

    def common_word_share(self, text: str, profile: NgramProfile) -> Optional[float]:
        """
        Доля служебных слов языка среди слов текста.

        Слова с заглавной буквы, которых нет в списке, считаются именами
        (или немецкими существительными) и не учитываются.

        Returns:
            Доля в [0, 1] или None, если у профиля нет списка или
            слов меньше common_word_min_count
        """
        if not profile.common_words:
            return None
        counted = 0
        common = 0
        for word in extract_words(text or ''):
            if word.lower() in profile.common_words:
                common += 1
            elif word[0].isupper():
                continue
            counted += 1
        if counted < self.common_word_min_count:
            return None
        return common / counted

    def identify(self, text: str) -> Tuple[str, float]:
        """
        Определяет язык текста.

        Никогда не выбрасывает исключений: пустой текст и текст без
        достаточно близкого профиля дают ('unknown', 0.0).

        Args:
            text: Текст

        Returns:
            (код языка, уверенность в диапазоне [0, 1])
        """
        text = text or ''
        scores = self.scores(text)
        if not scores:
            return UNKNOWN_LANGUAGE, 0.0

        best_language, best_score = min(
            scores.items(),
            key=lambda item: (-round(item[1], _SCORE_PRECISION), item[0]),
        )
        if best_score < self.min_similarity:
            logger.debug(f"Язык не определён: лучшая близость {best_score:.3f} ({best_language})")
            return UNKNOWN_LANGUAGE, 0.0

        share = self.common_word_share(text, self._profiles()[best_language])
        if share is not None and share < self.min_common_word_share:
            logger.debug(
                f"Язык не определён: служебных слов '{best_language}' {share:.2f} "
                f"при близости {best_score:.3f}"
            )
            return UNKNOWN_LANGUAGE, 0.0

        confidence = min(max(best_score, 0.0), 1.0)
        length = sum(1 for char in text if not char.isspace())
        if length < self.min_text_length:
            confidence = min(confidence * length / self.min_text_length, self.short_text_cap)
            logger.debug(f"Короткий текст ({length} символов): уверенность снижена до {confidence:.3f}")
        return best_language, confidence
