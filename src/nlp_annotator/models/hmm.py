"""
Скрытая марковская модель второго порядка для POS-теггинга.

Переходы P(t3 | t1, t2) интерполируются из триграмм, биграмм и
сглаженных униграмм; веса интерполяции считаются удалённой
интерполяцией (deleted interpolation, как в TnT). Эмиссии хранятся
как частоты (слово, тег) из размеченного корпуса и лексикона
закрытых классов.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..interfaces.text_annotator import POS_TAGS

logger = logging.getLogger(__name__)

# Априорное распределение открытых классов для неизвестных слов
DEFAULT_OPEN_CLASS_PRIOR: Mapping[str, float] = MappingProxyType({
    'NOUN': 0.45, 'VERB': 0.2, 'ADJ': 0.17, 'ADV': 0.06, 'PROPN': 0.12,
})

# Веса (униграммы, биграммы, триграммы), если корпус слишком мал для оценки
DEFAULT_LAMBDAS = (0.1, 0.3, 0.6)
MIN_LAMBDA = 0.01


def parse_tagged_sentence(line: str) -> List[Tuple[str, str]]:
    """
    Разбирает строку корпуса вида 'The/DET cats/NOUN ./PUNCT'.

    Raises:
        ValueError: токен без тега или тег вне набора
    """
    pairs: List[Tuple[str, str]] = []
    for item in line.split():
        word, sep, tag = item.rpartition('/')
        if not sep or not word or not tag:
            raise ValueError(f"Токен без тега: '{item}'")
        if tag not in POS_TAGS:
            raise ValueError(f"Неизвестный тег '{tag}' у токена '{word}'")
        pairs.append((word, tag))
    return pairs


@dataclass(frozen=True)
class HMMModel:
    """Обученная модель. Массивы только читаются."""
    language: str
    tags: Tuple[str, ...]
    # log P(t3 | t1, t2), форма (S, S, T), где S = T + 1 (последний индекс — начало предложения)
    log_transitions: np.ndarray
    # Сглаженные униграммы P(t), форма (T,)
    unigram: np.ndarray
    lambdas: Tuple[float, float, float]
    # Частоты тегов по точной форме и по форме в нижнем регистре
    form_counts: Mapping[str, Mapping[str, int]]
    lower_counts: Mapping[str, Mapping[str, int]]
    open_class_prior: Mapping[str, float]
    # Суффикс -> распределение тегов, суффиксы отсортированы по убыванию длины
    suffixes: Tuple[Tuple[str, Mapping[str, float]], ...]
    # Вес сдвига к PROPN для заглавных слов внутри предложения (None — из config)
    proper_noun_weight: Optional[float] = None

    @property
    def bos(self) -> int:
        return len(self.tags)

    def tag_index(self, tag: str) -> int:
        return self.tags.index(tag)

    @classmethod
    def train(cls, language: str, sentences: Sequence[Sequence[Tuple[str, str]]],
              lexicon: Mapping[str, Iterable[str]] = None,
              open_class_prior: Mapping[str, float] = None,
              suffixes: Mapping[str, Mapping[str, float]] = None,
              smoothing: float = 0.1,
              proper_noun_weight: Optional[float] = None) -> "HMMModel":
        """
        Обучает модель на размеченных предложениях.

        Args:
            language: Код языка
            sentences: Предложения как списки пар (слово, тег)
            lexicon: Слово -> допустимые теги (псевдочастота 1 на тег)
            open_class_prior: Распределение тегов для неизвестных слов
            suffixes: Суффикс -> распределение тегов
            smoothing: Добавочная константа для униграмм
            proper_noun_weight: Вес PROPN для заглавных слов внутри предложения

        Raises:
            ValueError: пустой корпус или теги вне набора
        """
        if not sentences:
            raise ValueError("Пустой обучающий корпус")
        tags = POS_TAGS
        index = {tag: i for i, tag in enumerate(tags)}
        t_count = len(tags)
        s_count = t_count + 1
        bos = t_count

        trigrams = np.zeros((s_count, s_count, t_count), dtype=np.float64)
        form_counts: Dict[str, Dict[str, int]] = {}
        lower_counts: Dict[str, Dict[str, int]] = {}

        for sentence in sentences:
            prev2, prev1 = bos, bos
            for position, (word, tag) in enumerate(sentence):
                current = index[tag]
                trigrams[prev2, prev1, current] += 1
                prev2, prev1 = prev1, current
                form_counts.setdefault(word, {}).setdefault(tag, 0)
                form_counts[word][tag] += 1
                # Заглавные формы внутри предложения (имена) в нижний регистр не попадают
                if position == 0 or word == word.lower():
                    lower_counts.setdefault(word.lower(), {}).setdefault(tag, 0)
                    lower_counts[word.lower()][tag] += 1

        for word, word_tags in (lexicon or {}).items():
            for tag in word_tags:
                if tag not in index:
                    raise ValueError(f"Неизвестный тег '{tag}' в лексиконе для '{word}'")
                lower_counts.setdefault(word.lower(), {}).setdefault(tag, 0)
                lower_counts[word.lower()][tag] += 1

        bigrams = trigrams.sum(axis=0)          # (S, T): c(t2, t3)
        unigrams = bigrams.sum(axis=0)          # (T,):   c(t3)
        total = unigrams.sum()

        lambdas = cls._deleted_interpolation(trigrams, bigrams, unigrams)

        unigram = (unigrams + smoothing) / (total + smoothing * t_count)
        tri_hist = trigrams.sum(axis=2, keepdims=True)
        bi_hist = bigrams.sum(axis=1, keepdims=True)
        with np.errstate(divide='ignore', invalid='ignore'):
            p_tri = np.where(tri_hist > 0, trigrams / np.where(tri_hist > 0, tri_hist, 1.0), 0.0)
            p_bi = np.where(bi_hist > 0, bigrams / np.where(bi_hist > 0, bi_hist, 1.0), 0.0)
        l1, l2, l3 = lambdas
        mixed = l1 * unigram[None, None, :] + l2 * p_bi[None, :, :] + l3 * p_tri
        log_transitions = np.log(mixed)
        log_transitions.setflags(write=False)
        unigram.setflags(write=False)

        prior = dict(open_class_prior or DEFAULT_OPEN_CLASS_PRIOR)
        for tag in prior:
            if tag not in index:
                raise ValueError(f"Неизвестный тег '{tag}' в распределении открытых классов")
        suffix_table = []
        for suffix, dist in (suffixes or {}).items():
            for tag in dist:
                if tag not in index:
                    raise ValueError(f"Неизвестный тег '{tag}' у суффикса '{suffix}'")
            suffix_table.append((str(suffix).lower(), MappingProxyType(dict(dist))))
        suffix_table.sort(key=lambda item: (-len(item[0]), item[0]))

        logger.debug(
            f"HMM[{language}]: {len(sentences)} предложений, {int(total)} токенов, "
            f"λ=({l1:.3f}, {l2:.3f}, {l3:.3f})"
        )
        return cls(
            language=language,
            tags=tags,
            log_transitions=log_transitions,
            unigram=unigram,
            lambdas=(float(l1), float(l2), float(l3)),
            form_counts=MappingProxyType({w: MappingProxyType(c) for w, c in form_counts.items()}),
            lower_counts=MappingProxyType({w: MappingProxyType(c) for w, c in lower_counts.items()}),
            open_class_prior=MappingProxyType(prior),
            suffixes=tuple(suffix_table),
            proper_noun_weight=float(proper_noun_weight) if proper_noun_weight is not None else None,
        )

    @staticmethod
    def _deleted_interpolation(trigrams: np.ndarray, bigrams: np.ndarray,
                               unigrams: np.ndarray) -> Tuple[float, float, float]:
        """Оценивает веса интерполяции (униграммы, биграммы, триграммы)."""
        total = unigrams.sum()
        weights = [0.0, 0.0, 0.0]
        tri_hist = trigrams.sum(axis=2)
        for t1, t2, t3 in np.argwhere(trigrams > 0):
            count = trigrams[t1, t2, t3]
            c_hist = tri_hist[t1, t2]
            tri = (count - 1) / (c_hist - 1) if c_hist > 1 else 0.0
            c_bi_hist = bigrams[t2].sum()
            bi = (bigrams[t2, t3] - 1) / (c_bi_hist - 1) if c_bi_hist > 1 else 0.0
            uni = (unigrams[t3] - 1) / (total - 1) if total > 1 else 0.0
            best = int(np.argmax([uni, bi, tri]))
            weights[best] += count
        if sum(weights) <= 0:
            return DEFAULT_LAMBDAS
        floored = [max(w / sum(weights), MIN_LAMBDA) for w in weights]
        norm = sum(floored)
        return tuple(w / norm for w in floored)
