"""
Компонент для поиска именованных сущностей (персоны, места, организации).

Два прохода:
1. газеттир: любые отрезки слов внутри предложения, текст которых
   (с нормализованными пробелами) есть в газеттире;
2. правила: серии слов с заглавной буквы с тегом NOUN/PROPN рядом со
   словами-триггерами (титул перед именем, 'Inc.' после названия,
   предлог места перед названием).

Пересечения разрешаются жадно: газеттир раньше правил, длинный отрезок
раньше короткого, левый раньше правого.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import config
from ..interfaces.text_annotator import (
    UNKNOWN_LANGUAGE,
    EntityKind,
    EntitySpan,
    NERTaggerInterface,
    TaggedToken,
    TokenKind,
)
from ..models.base_model import ModelBundle
from ..models.gazetteer import Gazetteer, collapse_whitespace
from .tokenizer import sentence_ids

logger = logging.getLogger(__name__)

SOURCE_GAZETTEER = 'gazetteer'
SOURCE_RULE = 'rule'

NAME_TAGS = frozenset({'NOUN', 'PROPN'})


class NERTagger(NERTaggerInterface):
    """Поиск сущностей по газеттиру и контекстным правилам."""

    def __init__(self, bundle: Optional[ModelBundle] = None,
                 gazetteer_confidence: Optional[float] = None,
                 rule_confidence: Optional[float] = None):
        """
        Args:
            bundle: Загруженные модели (None — сущности не ищутся)
            gazetteer_confidence: Уверенность для совпадений с газеттиром
            rule_confidence: Уверенность для сущностей, найденных правилами
        """
        self.bundle = bundle
        self.gazetteer_confidence = (
            gazetteer_confidence if gazetteer_confidence is not None else config.get_gazetteer_confidence()
        )
        self.rule_confidence = rule_confidence if rule_confidence is not None else config.get_rule_confidence()
        self._gazetteers: Tuple[Gazetteer, ...] = ()
        if bundle is not None:
            self._gazetteers = tuple(bundle.get(code).gazetteer for code in bundle.languages)

    def gazetteers_for(self, language: str) -> Tuple[Gazetteer, ...]:
        """
        Газеттиры в порядке приоритета: сначала язык документа, затем остальные.

        Имена собственные почти не зависят от языка текста, поэтому
        записи всех загруженных языков участвуют в поиске.
        """
        own = tuple(g for g in self._gazetteers if g.language == language)
        return own + tuple(g for g in self._gazetteers if g.language != language)

    def recognize(self, tagged_tokens: Sequence[TaggedToken], language: str = UNKNOWN_LANGUAGE) -> List[EntitySpan]:
        """
        Находит непересекающиеся сущности.

        Args:
            tagged_tokens: Токены с POS-тегами
            language: Код языка документа

        Returns:
            Сущности в порядке следования (пустой список, если ничего не найдено)
        """
        gazetteers = self.gazetteers_for(language)
        if not tagged_tokens or not gazetteers:
            return []
        sentences = sentence_ids([t.token for t in tagged_tokens])

        candidates = self._gazetteer_candidates(tagged_tokens, sentences, gazetteers)
        # Триггеры берутся из языка документа, а для неизвестного языка из всех
        triggers = gazetteers[:1] if gazetteers[0].language == language else gazetteers
        candidates.extend(self._rule_candidates(tagged_tokens, sentences, triggers))
        entities = self.resolve(candidates)
        logger.debug(f"NER: кандидатов {len(candidates)}, принято {len(entities)}")
        return entities

    @staticmethod
    def resolve(candidates: Sequence[EntitySpan]) -> List[EntitySpan]:
        """Жадный выбор непересекающихся отрезков по приоритету."""
        ranked = sorted(
            candidates,
            key=lambda s: (0 if s.source == SOURCE_GAZETTEER else 1, -(s.end - s.start), s.start),
        )
        accepted: List[EntitySpan] = []
        for span in ranked:
            if any(span.overlaps(other) for other in accepted):
                continue
            accepted.append(span)
        return sorted(accepted, key=lambda s: s.start)

    def _span(self, tokens: Sequence[TaggedToken], start: int, end: int,
              kind: EntityKind, source: str) -> EntitySpan:
        confidence = self.gazetteer_confidence if source == SOURCE_GAZETTEER else self.rule_confidence
        text = ''.join(t.text for t in tokens[start:end])
        return EntitySpan(start=start, end=end, kind=kind, confidence=confidence, text=text, source=source)

    def _gazetteer_candidates(self, tokens: Sequence[TaggedToken], sentences: Sequence[int],
                              gazetteers: Sequence[Gazetteer]) -> List[EntitySpan]:
        max_chars = max(g.max_chars for g in gazetteers)
        candidates = []
        n = len(tokens)
        for start in range(n):
            if tokens[start].kind not in (TokenKind.WORD, TokenKind.NUMBER):
                continue
            text = ''
            for end in range(start, n):
                if sentences[end] != sentences[start]:
                    break
                text += tokens[end].text
                collapsed = collapse_whitespace(text)
                if len(collapsed) > max_chars:
                    break
                if tokens[end].kind == TokenKind.WHITESPACE:
                    continue
                kind = self._lookup(gazetteers, collapsed)
                if kind is not None:
                    candidates.append(self._span(tokens, start, end + 1, kind, SOURCE_GAZETTEER))
        return candidates

    @staticmethod
    def _lookup(gazetteers: Sequence[Gazetteer], text: str) -> Optional[EntityKind]:
        for gazetteer in gazetteers:
            kind = gazetteer.lookup(text)
            if kind is not None:
                return kind
        return None

    def _rule_candidates(self, tokens: Sequence[TaggedToken], sentences: Sequence[int],
                         pool: Sequence[Gazetteer]) -> List[EntitySpan]:
        is_title = self._any(pool, Gazetteer.is_person_title)
        is_suffix = self._any(pool, Gazetteer.is_organization_suffix)
        is_preposition = self._any(pool, Gazetteer.is_place_preposition)

        content = [i for i, t in enumerate(tokens) if t.kind != TokenKind.WHITESPACE]

        def is_name(index: int) -> bool:
            token = tokens[index]
            return (
                token.kind == TokenKind.WORD
                and token.text[:1].isupper()
                and token.pos in NAME_TAGS
                and not is_title(token.text)
                and not is_suffix(token.text)
            )

        def neighbour(k: int, sentence: int) -> Optional[TaggedToken]:
            if 0 <= k < len(content) and sentences[content[k]] == sentence:
                return tokens[content[k]]
            return None

        candidates = []
        k = 0
        while k < len(content):
            first = content[k]
            if not is_name(first):
                k += 1
                continue
            sentence = sentences[first]
            last_k = k
            while neighbour(last_k + 1, sentence) is not None and is_name(content[last_k + 1]):
                last_k += 1
            start, end = first, content[last_k] + 1

            after = neighbour(last_k + 1, sentence)
            before = neighbour(k - 1, sentence)
            if after is not None and after.kind == TokenKind.WORD and is_suffix(after.text):
                suffix_end = content[last_k + 1] + 1
                candidates.append(self._span(tokens, start, suffix_end, EntityKind.ORGANIZATION, SOURCE_RULE))
            elif before is not None and is_title(before.text):
                candidates.append(self._span(tokens, start, end, EntityKind.PERSON, SOURCE_RULE))
            elif before is not None and before.kind == TokenKind.WORD and is_preposition(before.text):
                candidates.append(self._span(tokens, start, end, EntityKind.PLACE, SOURCE_RULE))
            k = last_k + 1
        return candidates

    @staticmethod
    def _any(pool: Sequence[Gazetteer], check: Callable[[Gazetteer, str], bool]) -> Callable[[str], bool]:
        return lambda word: any(check(g, word) for g in pool)

