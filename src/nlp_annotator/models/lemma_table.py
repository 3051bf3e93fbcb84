"""
Таблицы лемматизации одного языка: исключения, суффиксные правила,
известные базовые формы.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from ..interfaces.text_annotator import POS_TAGS
from .table_utils import split_words

# Ключ исключений, действующих для любой части речи
ANY_POS = '*'


@dataclass(frozen=True)
class SuffixRule:
    """Правило: отрезать suffix и дописать replacement."""
    suffix: str
    replacement: str

    @property
    def is_guard(self) -> bool:
        """Правило-заглушка (ss -> ss): слово не меняется."""
        return self.suffix == self.replacement


@dataclass(frozen=True)
class LemmaTable:
    language: str
    exceptions: Mapping[str, Mapping[str, str]]
    rules: Mapping[str, Tuple[SuffixRule, ...]]
    known: FrozenSet[str]
    min_stem: int = 2
    # Буквы, удвоение которых снимается: runn -> run
    undouble: FrozenSet[str] = frozenset()
    # Окончания, восстанавливаемые после отрезания суффикса: mak -> make
    restore: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, language: str, data: Mapping[str, Any], min_stem: Optional[int] = None) -> "LemmaTable":
        """
        Строит таблицу из содержимого lemmas.yaml.

        Raises:
            ValueError: неизвестная часть речи или некорректное правило
        """
        data = data or {}
        exceptions: Dict[str, Dict[str, str]] = {}
        for pos, mapping in (data.get('exceptions') or {}).items():
            cls._check_pos(pos)
            exceptions[pos] = {str(k).lower(): str(v).lower() for k, v in (mapping or {}).items()}

        rules: Dict[str, Tuple[SuffixRule, ...]] = {}
        for pos, items in (data.get('rules') or {}).items():
            cls._check_pos(pos, allow_any=False)
            parsed: List[SuffixRule] = []
            for item in items or []:
                if not isinstance(item, (list, tuple)) or len(item) != 2 or not item[0]:
                    raise ValueError(f"Некорректное правило для {pos}: {item!r}")
                parsed.append(SuffixRule(str(item[0]).lower(), str(item[1] or '').lower()))
            # Самый длинный суффикс проверяется первым
            parsed.sort(key=lambda rule: (-len(rule.suffix), rule.suffix))
            rules[pos] = tuple(parsed)

        known = {word.lower() for word in split_words(data.get('base_forms'))}
        for mapping in exceptions.values():
            known.update(mapping.values())

        return cls(
            language=language,
            exceptions=MappingProxyType({p: MappingProxyType(m) for p, m in exceptions.items()}),
            rules=MappingProxyType(rules),
            known=frozenset(known),
            min_stem=int(data.get('min_stem', min_stem if min_stem is not None else 2)),
            undouble=frozenset(str(data.get('undouble') or '')),
            restore=tuple(str(s) for s in (data.get('restore') or [])),
        )

    @staticmethod
    def _check_pos(pos: str, allow_any: bool = True) -> None:
        if pos in POS_TAGS or (allow_any and pos == ANY_POS):
            return
        raise ValueError(f"Неизвестная часть речи в таблице лемм: {pos}")

    def exception(self, surface: str, pos: str) -> Optional[str]:
        """Лемма из словаря исключений: сначала для POS, затем для любой части речи."""
        lower = surface.lower()
        for key in (pos, ANY_POS):
            mapping = self.exceptions.get(key)
            if mapping and lower in mapping:
                return mapping[lower]
        return None

    def is_known(self, word: str) -> bool:
        return word.lower() in self.known

    def rules_for(self, pos: str) -> Tuple[SuffixRule, ...]:
        return self.rules.get(pos, ())

    def _undoubled(self, stem: str) -> Optional[str]:
        if len(stem) >= 2 and stem[-1] == stem[-2] and stem[-1] in self.undouble:
            return stem[:-1]
        return None

    def candidates(self, word: str, rule: SuffixRule) -> List[str]:
        """
        Кандидаты в леммы по одному правилу, от основного к запасным.

        Пустой список, если правило не подходит или основа короче min_stem.
        """
        if rule.is_guard:
            return [word] if word.endswith(rule.suffix) else []
        if not word.endswith(rule.suffix):
            return []
        stem = word[:-len(rule.suffix)]
        if len(stem) < self.min_stem:
            return []
        plain = stem + rule.replacement
        result = [plain]
        if not rule.replacement:
            undoubled = self._undoubled(stem)
            if undoubled:
                result.append(undoubled)
            result.extend(stem + ending for ending in self.restore)
        return result

    def default_candidate(self, word: str, rule: SuffixRule) -> Optional[str]:
        """Кандидат правила, когда ни одна форма не найдена среди известных."""
        candidates = self.candidates(word, rule)
        if not candidates:
            return None
        if rule.is_guard or rule.replacement:
            return candidates[0]
        return self._undoubled(candidates[0]) or candidates[0]
