"""
Структуры загруженных моделей: ресурсы одного языка и набор языков.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from ..exceptions import UnsupportedLanguageError
from .gazetteer import Gazetteer
from .hmm import HMMModel
from .lemma_table import LemmaTable
from .ngram_profile import NgramProfile


@dataclass(frozen=True)
class LanguageResources:
    """Все таблицы одного языка. Только для чтения после загрузки."""
    language: str
    profile: NgramProfile
    hmm: HMMModel
    lemmas: LemmaTable
    gazetteer: Gazetteer

    def get_model_info(self) -> Dict[str, Any]:
        """Краткая информация о ресурсах языка."""
        return {
            'language': self.language,
            'profile_ngrams': {n: len(f) for n, f in self.profile.frequencies.items()},
            'hmm_vocabulary': len(self.hmm.lower_counts),
            'hmm_lambdas': self.hmm.lambdas,
            'lemma_exceptions': sum(len(m) for m in self.lemmas.exceptions.values()),
            'lemma_rules': sum(len(r) for r in self.lemmas.rules.values()),
            'gazetteer_entries': len(self.gazetteer),
        }


class ModelBundle:
    """
    Неизменяемый набор загруженных языков.

    Разделяется между потоками без блокировок: после создания
    ничего не меняется.
    """

    def __init__(self, resources: Mapping[str, LanguageResources], directory: Optional[Path] = None):
        self._resources = MappingProxyType(dict(resources))
        self.directory = directory

    @property
    def languages(self) -> Tuple[str, ...]:
        return tuple(sorted(self._resources))

    def get(self, language: str) -> LanguageResources:
        """
        Ресурсы языка.

        Raises:
            UnsupportedLanguageError: язык не загружен
        """
        try:
            return self._resources[language]
        except KeyError:
            raise UnsupportedLanguageError(language, self._resources.keys()) from None

    def profiles(self) -> Iterator[NgramProfile]:
        """Профили языков в алфавитном порядке кодов."""
        for code in self.languages:
            yield self._resources[code].profile

    def __contains__(self, language: object) -> bool:
        return language in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        return f"ModelBundle(languages={list(self.languages)}, directory={self.directory})"
