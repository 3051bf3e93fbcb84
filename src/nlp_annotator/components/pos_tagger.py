"""
Компонент для определения частей речи.

Теггер — HMM второго порядка с декодированием Витерби по каждому
предложению. Пробелы, пунктуация, числа и прочие символы получают
фиксированные теги без обращения к модели, но пунктуация и числа
участвуют в контексте переходов.

Эмиссия слова считается как P(тег | слово) / P(тег). Для неизвестных
слов распределение берётся из априорного распределения открытых
классов, смешанного с распределением по самому длинному известному
суффиксу и с признаком заглавной буквы.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from ..config import config
from ..interfaces.text_annotator import (
    UNKNOWN_LANGUAGE,
    Token,
    TokenKind,
    POSTaggerInterface,
)
from ..models.base_model import ModelBundle
from ..models.hmm import DEFAULT_OPEN_CLASS_PRIOR, HMMModel
from .tokenizer import split_sentences

logger = logging.getLogger(__name__)

# Теги, назначаемые без модели
FIXED_TAGS: Mapping[TokenKind, str] = {
    TokenKind.WHITESPACE: 'SPACE',
    TokenKind.PUNCTUATION: 'PUNCT',
    TokenKind.NUMBER: 'NUM',
    TokenKind.OTHER: 'SYM',
}

# Сдвиг к PROPN для заглавного слова в начале предложения
SENTENCE_INITIAL_PROPER_WEIGHT = 0.3


def _normalize(dist: Dict[str, float]) -> Dict[str, float]:
    total = sum(dist.values())
    if total <= 0:
        return {}
    return {tag: value / total for tag, value in dist.items() if value > 0}


def _blend(base: Mapping[str, float], other: Mapping[str, float], weight: float) -> Dict[str, float]:
    """(1 - weight) * base + weight * other."""
    result = {tag: (1.0 - weight) * value for tag, value in base.items()}
    for tag, value in other.items():
        result[tag] = result.get(tag, 0.0) + weight * value
    return _normalize(result)


def _is_capitalized(word: str) -> bool:
    return word[:1].isupper()


class POSTagger(POSTaggerInterface):
    """Теггер частей речи на основе HMM второго порядка."""

    def __init__(self, bundle: Optional[ModelBundle] = None,
                 suffix_weight: Optional[float] = None,
                 proper_noun_weight: Optional[float] = None):
        """
        Args:
            bundle: Загруженные модели (None — только эвристики)
            suffix_weight: Вес распределения по суффиксу для неизвестных слов
            proper_noun_weight: Вес PROPN для заглавных слов внутри предложения
        """
        self.bundle = bundle
        self.suffix_weight = suffix_weight if suffix_weight is not None else config.get_suffix_weight()
        self.proper_noun_weight = (
            proper_noun_weight if proper_noun_weight is not None else config.get_proper_noun_weight()
        )

    def _model_for(self, language: str) -> Optional[HMMModel]:
        if self.bundle is None or language == UNKNOWN_LANGUAGE or language not in self.bundle:
            return None
        return self.bundle.get(language).hmm

    def guess_distribution(self, word: str, sentence_initial: bool = False,
                           hmm: Optional[HMMModel] = None) -> Dict[str, float]:
        """
        Распределение тегов для слова, отсутствующего в словаре модели.

        Args:
            word: Поверхностная форма
            sentence_initial: Слово стоит первым в предложении
            hmm: Модель языка (None — только форма слова)

        Returns:
            Нормированное распределение {тег: вероятность}
        """
        prior = _normalize(dict(hmm.open_class_prior if hmm is not None else DEFAULT_OPEN_CLASS_PRIOR))
        dist = prior
        if hmm is not None:
            lower = word.lower()
            for suffix, suffix_dist in hmm.suffixes:
                if len(lower) > len(suffix) and lower.endswith(suffix):
                    dist = _blend(prior, _normalize(dict(suffix_dist)), self.suffix_weight)
                    break
        if _is_capitalized(word):
            weight = SENTENCE_INITIAL_PROPER_WEIGHT if sentence_initial else self._proper_weight(hmm)
            dist = _blend(dist, {'PROPN': 1.0}, weight)
        return dist

    def _proper_weight(self, hmm: Optional[HMMModel]) -> float:
        if hmm is not None and hmm.proper_noun_weight is not None:
            return hmm.proper_noun_weight
        return self.proper_noun_weight

    def word_distribution(self, word: str, sentence_initial: bool, hmm: HMMModel) -> Dict[str, float]:
        """P(тег | слово): по корпусу и лексикону, иначе эвристика."""
        if word != word.lower():
            exact = hmm.form_counts.get(word)
            if exact:
                return _normalize(dict(exact))
        lower = hmm.lower_counts.get(word.lower())
        if lower:
            dist = _normalize(dict(lower))
            # 'Apple' внутри предложения, известное только как 'apple'
            if _is_capitalized(word) and not sentence_initial:
                dist = _blend(dist, {'PROPN': 1.0}, self._proper_weight(hmm))
            return dist
        return self.guess_distribution(word, sentence_initial, hmm)

    def _emissions(self, tokens: Sequence[Token], hmm: HMMModel) -> np.ndarray:
        """Лог-эмиссии для токенов одного предложения (без пробелов), форма (n, T)."""
        n_tags = len(hmm.tags)
        log_unigram = np.log(hmm.unigram)
        emissions = np.full((len(tokens), n_tags), -np.inf)
        seen_word = False
        for i, token in enumerate(tokens):
            fixed = FIXED_TAGS.get(token.kind)
            if fixed is not None:
                emissions[i, hmm.tag_index(fixed)] = 0.0
                if token.kind == TokenKind.NUMBER:
                    seen_word = True
                continue
            dist = self.word_distribution(token.text, not seen_word, hmm)
            seen_word = True
            for tag, prob in dist.items():
                index = hmm.tag_index(tag)
                emissions[i, index] = np.log(prob) - log_unigram[index]
        return emissions

    @staticmethod
    def viterbi(emissions: np.ndarray, hmm: HMMModel) -> List[int]:
        """
        Наиболее вероятная последовательность тегов для модели второго порядка.

        Состояние — пара (предыдущий тег, текущий тег). При равенстве
        выбирается тег с меньшим индексом, так что результат детерминирован.

        Args:
            emissions: Лог-эмиссии, форма (n, T)
            hmm: Модель

        Returns:
            Индексы тегов длины n
        """
        n, n_tags = emissions.shape
        if n == 0:
            return []
        bos = hmm.bos
        log_a = hmm.log_transitions
        # delta[t0, t1]: лучший путь, заканчивающийся парой (t0, t1); строка bos означает начало
        delta = np.full((n_tags + 1, n_tags), -np.inf)
        delta[bos] = log_a[bos, bos] + emissions[0]
        back = []
        for i in range(1, n):
            # cand[t0, t1, t2] = delta[t0, t1] + log P(t2 | t0, t1)
            cand = delta[:, :, None] + log_a[:, :n_tags, :]
            pointers = np.argmax(cand, axis=0)
            best = np.take_along_axis(cand, pointers[None, :, :], axis=0)[0]
            back.append(pointers)
            delta = np.full((n_tags + 1, n_tags), -np.inf)
            delta[:n_tags] = best + emissions[i][None, :]

        flat = int(np.argmax(delta))
        prev, last = divmod(flat, n_tags)
        if n == 1:
            return [last]
        path = [prev, last]
        for i in range(n - 1, 1, -1):
            earlier = int(back[i - 1][path[0], path[1]])
            path.insert(0, earlier)
        return path

    def tag(self, tokens: Sequence[Token], language: str) -> List[str]:
        """
        Определяет часть речи каждого токена.

        Длина результата всегда равна числу токенов. Для неизвестного или
        незагруженного языка используются только эвристики по форме слова.

        Args:
            tokens: Токены документа
            language: Код языка

        Returns:
            Список POS-тегов
        """
        tags: List[Optional[str]] = [FIXED_TAGS.get(token.kind) for token in tokens]
        hmm = self._model_for(language)
        if hmm is None:
            logger.debug(f"POS: нет модели для языка '{language}', используются эвристики")

        for start, end in split_sentences(tokens):
            indices = [i for i in range(start, end) if tokens[i].kind != TokenKind.WHITESPACE]
            if not indices:
                continue
            if hmm is None:
                seen_word = False
                for i in indices:
                    if tokens[i].kind != TokenKind.WORD:
                        seen_word = seen_word or tokens[i].kind == TokenKind.NUMBER
                        continue
                    dist = self.guess_distribution(tokens[i].text, not seen_word)
                    seen_word = True
                    tags[i] = min(dist.items(), key=lambda item: (-item[1], item[0]))[0]
                continue
            sentence = [tokens[i] for i in indices]
            path = self.viterbi(self._emissions(sentence, hmm), hmm)
            for i, tag_index in zip(indices, path):
                if tags[i] is None:
                    tags[i] = hmm.tags[tag_index]

        return tags

    def tag_with_distribution(self, tokens: Sequence[Token], language: str) -> List[Dict[str, float]]:
        """Распределение тегов по каждому слову без учёта контекста (для отладки)."""
        hmm = self._model_for(language)
        result = []
        seen_word = False
        for token in tokens:
            fixed = FIXED_TAGS.get(token.kind)
            if fixed is not None:
                result.append({fixed: 1.0})
                continue
            if hmm is None:
                result.append(self.guess_distribution(token.text, not seen_word))
            else:
                result.append(self.word_distribution(token.text, not seen_word, hmm))
            seen_word = True
        return result
