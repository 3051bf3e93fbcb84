"""
Профиль символьных n-грамм языка.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

# Буквенные последовательности; цифры, пунктуация и пробелы разделяют слова
_LETTERS_RE = re.compile(r"[^\W\d_]+")
BOUNDARY = "_"


def extract_ngrams(text: str, orders: Iterable[int] = (1, 2, 3)) -> Dict[int, Counter]:
    """
    Считает символьные n-граммы текста по порядкам.

    Униграммы берутся по буквам, для n > 1 слово дополняется
    граничным символом '_' с обеих сторон.

    Args:
        text: Текст
        orders: Порядки n-грамм

    Returns:
        {n: Counter(n-грамма -> частота)}
    """
    orders = tuple(orders)
    counts: Dict[int, Counter] = {n: Counter() for n in orders}
    for word in _LETTERS_RE.findall(text.lower()):
        padded = f"{BOUNDARY}{word}{BOUNDARY}"
        for n in orders:
            if n == 1:
                counts[n].update(word)
                continue
            for i in range(len(padded) - n + 1):
                counts[n][padded[i:i + n]] += 1
    return counts


def extract_words(text: str) -> List[str]:
    """Буквенные слова текста в исходном регистре (l'ombre -> l, ombre)."""
    return _LETTERS_RE.findall(text)


def _norm(vector: Mapping[str, float]) -> float:
    return math.sqrt(sum(v * v for v in vector.values()))


@dataclass(frozen=True)
class NgramProfile:
    """Частотный профиль языка, неизменяемый после построения."""
    language: str
    frequencies: Mapping[int, Mapping[str, float]]
    norms: Mapping[int, float] = field(default_factory=dict)
    # Служебные слова языка в нижнем регистре (артикли, предлоги, союзы)
    common_words: FrozenSet[str] = frozenset()

    @classmethod
    def from_text(cls, language: str, text: str, orders: Iterable[int] = (1, 2, 3),
                  profile_size: int = 1000, common_words: Iterable[str] = ()) -> "NgramProfile":
        """
        Строит профиль по обучающему тексту.

        Для каждого порядка оставляются profile_size самых частых n-грамм
        (при равной частоте в алфавитном порядке).
        """
        counts = extract_ngrams(text, orders)
        frequencies: Dict[int, Dict[str, float]] = {}
        norms: Dict[int, float] = {}
        for n, counter in counts.items():
            ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))[:profile_size]
            total = float(sum(count for _, count in ranked)) or 1.0
            frequencies[n] = {gram: count / total for gram, count in ranked}
            norms[n] = _norm(frequencies[n])
        return cls(
            language=language,
            frequencies=MappingProxyType({n: MappingProxyType(f) for n, f in frequencies.items()}),
            norms=MappingProxyType(norms),
            common_words=frozenset(word.lower() for word in common_words),
        )

    @property
    def orders(self) -> Tuple[int, ...]:
        return tuple(sorted(self.frequencies))

    def cosine(self, n: int, counts: Mapping[str, float], counts_norm: float) -> float:
        """Косинусная близость профиля порядка n и частот текста."""
        profile = self.frequencies.get(n)
        profile_norm = self.norms.get(n, 0.0)
        if not profile or not profile_norm or not counts_norm:
            return 0.0
        dot = sum(value * profile.get(gram, 0.0) for gram, value in counts.items())
        return dot / (profile_norm * counts_norm)

    def similarity(self, counts: Mapping[int, Mapping[str, float]], weights: Mapping[int, float]) -> float:
        """
        Взвешенное среднее косинусных близостей по порядкам n-грамм.

        Args:
            counts: Частоты n-грамм текста по порядкам
            weights: Вес каждого порядка

        Returns:
            Близость в диапазоне [0, 1]
        """
        total_weight = sum(w for n, w in weights.items() if n in self.frequencies)
        if total_weight <= 0:
            return 0.0
        score = 0.0
        for n, weight in weights.items():
            if n not in self.frequencies:
                continue
            text_counts = counts.get(n) or {}
            score += weight * self.cosine(n, text_counts, _norm(text_counts))
        return score / total_weight
