"""
Структуры данных аннотации и абстрактные интерфейсы компонентов.

Все структуры неизменяемы: токены создаются токенизатором один раз,
результат пайплайна только читается.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union


UNKNOWN_LANGUAGE = "unknown"

# Набор тегов частей речи (UD UPOS без AUX: вспомогательные глаголы — VERB)
POS_TAGS: Tuple[str, ...] = (
    'ADJ', 'ADP', 'ADV', 'CCONJ', 'DET', 'INTJ', 'NOUN', 'NUM', 'PART',
    'PRON', 'PROPN', 'PUNCT', 'SCONJ', 'SPACE', 'SYM', 'VERB', 'X',
)

# Знаки, завершающие предложение
SENTENCE_TERMINALS = frozenset({'.', '!', '?'})


class TokenKind(str, Enum):
    """Тип токена."""
    WORD = "word"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"
    NUMBER = "number"
    OTHER = "other"


class EntityKind(str, Enum):
    """Тип именованной сущности."""
    PERSON = "person"
    PLACE = "place"
    ORGANIZATION = "organization"


class TagScheme(str, Enum):
    """Схемы тегов для перечисления результата."""
    TOKEN_TYPE = "token_type"
    LANGUAGE = "language"
    LEXICAL_CLASS = "lexical_class"
    NAME_TYPE = "name_type"
    LEMMA = "lemma"


@dataclass(frozen=True)
class Document:
    """Исходный текст и определённый язык."""
    text: str
    language: str = UNKNOWN_LANGUAGE
    language_confidence: float = 0.0


@dataclass(frozen=True)
class Token:
    """Токен: полуинтервал [start, end) в символах исходного текста."""
    start: int
    end: int
    text: str
    kind: TokenKind

    @property
    def is_word(self) -> bool:
        return self.kind == TokenKind.WORD

    @property
    def is_whitespace(self) -> bool:
        return self.kind == TokenKind.WHITESPACE

    @property
    def is_punctuation(self) -> bool:
        return self.kind == TokenKind.PUNCTUATION


@dataclass(frozen=True)
class TaggedToken:
    """Токен с частью речи и леммой."""
    token: Token
    pos: str
    lemma: str

    @property
    def text(self) -> str:
        return self.token.text

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end

    @property
    def kind(self) -> TokenKind:
        return self.token.kind


@dataclass(frozen=True)
class EntitySpan:
    """Именованная сущность: полуинтервал индексов токенов [start, end)."""
    start: int
    end: int
    kind: EntityKind
    confidence: float
    text: str = ""
    source: str = "gazetteer"

    def overlaps(self, other: "EntitySpan") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class AnnotationResult:
    """Результат аннотации документа. Единственный внешний артефакт пайплайна."""
    document: Document
    tokens: Tuple[TaggedToken, ...]
    entities: Tuple[EntitySpan, ...]

    @property
    def language(self) -> str:
        return self.document.language

    def words(self) -> List[TaggedToken]:
        """Токены без пробелов и пунктуации."""
        return [
            t for t in self.tokens
            if t.kind not in (TokenKind.WHITESPACE, TokenKind.PUNCTUATION)
        ]

    def sentences(self) -> List[Tuple[int, int]]:
        """Границы предложений как полуинтервалы индексов токенов."""
        from ..components.tokenizer import split_sentences
        return split_sentences([t.token for t in self.tokens])

    def entity_text(self, span: EntitySpan) -> str:
        """Текст сущности по исходному документу."""
        if span.start >= span.end:
            return ""
        start = self.tokens[span.start].start
        end = self.tokens[span.end - 1].end
        return self.document.text[start:end]

    def iter_tags(self, scheme: Union[TagScheme, str] = TagScheme.LEXICAL_CLASS,
                  omit_punctuation: bool = True, omit_whitespace: bool = True,
                  join_names: bool = True) -> Iterator[Tuple[Optional[str], str, Tuple[int, int]]]:
        """
        Лениво перечисляет (тег, текст, (start, end)) по выбранной схеме.

        Повторный вызов начинает перечисление заново. join_names действует
        только для схемы NAME_TYPE: сущность выдаётся одним элементом.
        Для токенов вне сущностей тег NAME_TYPE равен None.
        """
        scheme = TagScheme(scheme)
        entity_at: Dict[int, EntitySpan] = {}
        for span in self.entities:
            for index in range(span.start, span.end):
                entity_at[index] = span

        index = 0
        while index < len(self.tokens):
            tagged = self.tokens[index]
            if omit_whitespace and tagged.kind == TokenKind.WHITESPACE:
                index += 1
                continue
            if omit_punctuation and tagged.kind == TokenKind.PUNCTUATION:
                index += 1
                continue

            if scheme == TagScheme.NAME_TYPE:
                span = entity_at.get(index)
                if span is not None and join_names:
                    start = self.tokens[span.start].start
                    end = self.tokens[span.end - 1].end
                    yield span.kind.value, self.document.text[start:end], (start, end)
                    index = span.end
                    continue
                tag = span.kind.value if span is not None else None
            elif scheme == TagScheme.TOKEN_TYPE:
                tag = tagged.kind.value
            elif scheme == TagScheme.LANGUAGE:
                tag = self.document.language
            elif scheme == TagScheme.LEMMA:
                tag = tagged.lemma
            else:
                tag = tagged.pos
            yield tag, tagged.text, (tagged.start, tagged.end)
            index += 1

    def to_dict(self) -> Dict[str, Any]:
        """Структурированная запись без потерь (для экспорта)."""
        return {
            'text': self.document.text,
            'language': self.document.language,
            'language_confidence': self.document.language_confidence,
            'tokens': [
                {
                    'start': t.start,
                    'end': t.end,
                    'text': t.text,
                    'kind': t.kind.value,
                    'pos': t.pos,
                    'lemma': t.lemma,
                }
                for t in self.tokens
            ],
            'entities': [
                {
                    'start': e.start,
                    'end': e.end,
                    'kind': e.kind.value,
                    'confidence': e.confidence,
                    'text': e.text,
                    'source': e.source,
                }
                for e in self.entities
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnnotationResult":
        """Восстанавливает результат из записи to_dict()."""
        document = Document(
            text=data['text'],
            language=data.get('language', UNKNOWN_LANGUAGE),
            language_confidence=float(data.get('language_confidence', 0.0)),
        )
        tokens = tuple(
            TaggedToken(
                token=Token(
                    start=int(t['start']),
                    end=int(t['end']),
                    text=t['text'],
                    kind=TokenKind(t['kind']),
                ),
                pos=t['pos'],
                lemma=t['lemma'],
            )
            for t in data.get('tokens', [])
        )
        entities = tuple(
            EntitySpan(
                start=int(e['start']),
                end=int(e['end']),
                kind=EntityKind(e['kind']),
                confidence=float(e['confidence']),
                text=e.get('text', ''),
                source=e.get('source', 'gazetteer'),
            )
            for e in data.get('entities', [])
        )
        return cls(document=document, tokens=tokens, entities=entities)


class TokenizerInterface(ABC):
    """Интерфейс для токенизации текста."""

    @abstractmethod
    def tokenize(self, text: str, require_non_empty: bool = False) -> List[Token]:
        """Разбивает текст на токены."""
        pass

    @abstractmethod
    def iter_tokens(self, text: str) -> Iterator[Token]:
        """Лениво выдаёт токены."""
        pass


class LanguageIdentifierInterface(ABC):
    """Интерфейс для определения языка."""

    @abstractmethod
    def identify(self, text: str) -> Tuple[str, float]:
        """Возвращает (код языка, уверенность)."""
        pass


class POSTaggerInterface(ABC):
    """Интерфейс для определения частей речи."""

    @abstractmethod
    def tag(self, tokens: Sequence[Token], language: str) -> List[str]:
        """Возвращает по одному POS-тегу на каждый токен."""
        pass


class LemmatizerInterface(ABC):
    """Интерфейс для лемматизации слов."""

    @abstractmethod
    def lemmatize(self, token: Union[Token, str], pos: str, language: str) -> str:
        """Приводит слово к базовой форме."""
        pass

    @abstractmethod
    def lemmatize_batch(self, tokens: Sequence[Token], pos_tags: Sequence[str], language: str) -> List[str]:
        """Приводит список токенов к базовым формам."""
        pass


class NERTaggerInterface(ABC):
    """Интерфейс для поиска именованных сущностей."""

    @abstractmethod
    def recognize(self, tagged_tokens: Sequence[TaggedToken], language: str = UNKNOWN_LANGUAGE) -> List[EntitySpan]:
        """Возвращает непересекающиеся сущности."""
        pass
