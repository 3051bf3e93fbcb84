"""
Точки входа уровня модуля поверх пайплайна по умолчанию.
"""

import threading
from typing import Iterable, List, Optional

from .components.model_manager import get_default_bundle
from .components.text_pipeline import AnnotationPipeline
from .interfaces.text_annotator import AnnotationResult
from .models.model_factory import load_models

_default_pipeline: Optional[AnnotationPipeline] = None
_pipeline_lock = threading.Lock()


def get_default_pipeline() -> AnnotationPipeline:
    """Пайплайн над моделями процесса (создаётся один раз)."""
    global _default_pipeline
    if _default_pipeline is None:
        with _pipeline_lock:
            if _default_pipeline is None:
                _default_pipeline = AnnotationPipeline(get_default_bundle())
    return _default_pipeline


def reset_default_pipeline() -> None:
    """Сбрасывает пайплайн по умолчанию (после смены моделей)."""
    global _default_pipeline
    with _pipeline_lock:
        _default_pipeline = None


def annotate(text: str, language: Optional[str] = None) -> AnnotationResult:
    """Аннотирует текст моделями процесса."""
    return get_default_pipeline().annotate(text, language)


def annotate_batch(texts: Iterable[str], max_workers: Optional[int] = None) -> List[AnnotationResult]:
    """Аннотирует несколько текстов параллельно, сохраняя порядок."""
    return get_default_pipeline().annotate_batch(texts, max_workers)


__all__ = [
    "annotate",
    "annotate_batch",
    "load_models",
    "get_default_pipeline",
    "reset_default_pipeline",
]
