"""
NLP Annotator - аннотация текста без готовых теггеров

Этот модуль предоставляет инструменты для:
- Токенизации со смещениями и графемными кластерами
- Определения языка по n-граммным профилям
- Определения частей речи (HMM второго порядка)
- Лемматизации по таблицам исключений и правилам
- Поиска именованных сущностей
- Экспорта результатов в JSON, CSV и Excel
"""

__version__ = "0.1.0"
__author__ = "Sergey"

from .annotator import annotate, annotate_batch, load_models
from .components import AnnotationPipeline, PipelineStage, ResultExporter
from .exceptions import (
    AnnotatorError,
    AnnotationError,
    EmptyInputError,
    ModelLoadError,
    UnsupportedLanguageError,
)
from .interfaces import AnnotationResult, EntityKind, TagScheme, TokenKind
from .models import ModelBundle

__all__ = [
    "annotate",
    "annotate_batch",
    "load_models",
    "AnnotationPipeline",
    "PipelineStage",
    "ResultExporter",
    "AnnotatorError",
    "AnnotationError",
    "EmptyInputError",
    "ModelLoadError",
    "UnsupportedLanguageError",
    "AnnotationResult",
    "EntityKind",
    "TagScheme",
    "TokenKind",
    "ModelBundle",
]
