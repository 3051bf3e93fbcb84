"""
Интерфейсы и структуры данных аннотации.

Определяет неизменяемые структуры результата и абстрактные базовые классы
для всех компонентов, обеспечивая единообразный API и возможность замены реализаций.
"""

from .text_annotator import (
    UNKNOWN_LANGUAGE,
    POS_TAGS,
    SENTENCE_TERMINALS,
    TokenKind,
    EntityKind,
    TagScheme,
    Document,
    Token,
    TaggedToken,
    EntitySpan,
    AnnotationResult,
    TokenizerInterface,
    LanguageIdentifierInterface,
    POSTaggerInterface,
    LemmatizerInterface,
    NERTaggerInterface,
)

__all__ = [
    'UNKNOWN_LANGUAGE',
    'POS_TAGS',
    'SENTENCE_TERMINALS',
    'TokenKind',
    'EntityKind',
    'TagScheme',
    'Document',
    'Token',
    'TaggedToken',
    'EntitySpan',
    'AnnotationResult',
    'TokenizerInterface',
    'LanguageIdentifierInterface',
    'POSTaggerInterface',
    'LemmatizerInterface',
    'NERTaggerInterface',
]
