"""
Газеттир: известные именованные сущности и слова-триггеры для правил.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional

from ..interfaces.text_annotator import EntityKind
from .table_utils import split_words


def collapse_whitespace(text: str) -> str:
    """'Apple   Inc.' -> 'Apple Inc.'"""
    return ' '.join(text.split())


def _trigger_key(word: str) -> str:
    return word.lower().rstrip('.')


@dataclass(frozen=True)
class Gazetteer:
    language: str
    entries: Mapping[str, EntityKind]
    person_titles: FrozenSet[str] = frozenset()
    organization_suffixes: FrozenSet[str] = frozenset()
    place_prepositions: FrozenSet[str] = frozenset()
    max_chars: int = 0

    @classmethod
    def from_dict(cls, language: str, data: Mapping[str, Any]) -> "Gazetteer":
        """
        Строит газеттир из содержимого gazetteer.yaml.

        Запись, встречающаяся в нескольких разделах, получает тип
        первого раздела в порядке person, place, organization.

        Raises:
            ValueError: неизвестный раздел или раздел неверного типа
        """
        data = data or {}
        entries = {}
        sections = {kind.value for kind in EntityKind} | {'triggers'}
        for section in data:
            if section not in sections:
                raise ValueError(f"Неизвестный раздел газеттира: {section}")
        for kind in EntityKind:
            names = data.get(kind.value) or []
            if not isinstance(names, (list, tuple)):
                raise ValueError(
                    f"Раздел '{kind.value}' должен быть списком, получено: {type(names).__name__}"
                )
            for name in names:
                key = collapse_whitespace(str(name))
                if key:
                    entries.setdefault(key, kind)

        triggers = data.get("triggers") or {}
        if not isinstance(triggers, Mapping):
            raise ValueError("Раздел 'triggers' должен быть словарём")

        def trigger_set(name: str) -> FrozenSet[str]:
            return frozenset(_trigger_key(w) for w in split_words(triggers.get(name)))

        return cls(
            language=language,
            entries=MappingProxyType(entries),
            person_titles=trigger_set("person_titles"),
            organization_suffixes=trigger_set("organization_suffixes"),
            place_prepositions=trigger_set("place_prepositions"),
            max_chars=max((len(key) for key in entries), default=0),
        )

    def lookup(self, text: str) -> Optional[EntityKind]:
        return self.entries.get(collapse_whitespace(text))

    def is_person_title(self, word: str) -> bool:
        return _trigger_key(word) in self.person_titles

    def is_organization_suffix(self, word: str) -> bool:
        return _trigger_key(word) in self.organization_suffixes

    def is_place_preposition(self, word: str) -> bool:
        return _trigger_key(word) in self.place_prepositions

    def __len__(self) -> int:
        return len(self.entries)
