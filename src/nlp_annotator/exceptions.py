"""
Исключения, общие для всего пакета.

- EmptyInputError          : пустой документ там, где вызывающий требует хотя бы один токен
- UnsupportedLanguageError : запрошен язык, для которого не загружены модели
- ModelLoadError           : файлы моделей отсутствуют или повреждены (фатально при старте)
- AnnotationError          : единая ошибка пайплайна с указанием упавшей стадии
"""

from typing import Optional


class AnnotatorError(Exception):
    """Базовое исключение пакета."""
    pass


class EmptyInputError(AnnotatorError, ValueError):
    """Документ нулевой длины при требовании непустого ввода."""
    pass


class UnsupportedLanguageError(AnnotatorError, LookupError):
    """Для кода языка нет загруженной модели."""

    def __init__(self, language: str, available=None):
        self.language = language
        self.available = sorted(available or [])
        message = f"Язык '{language}' не поддерживается"
        if self.available:
            message += f" (загружены: {', '.join(self.available)})"
        super().__init__(message)


class ModelLoadError(AnnotatorError, OSError):
    """Ошибка загрузки файлов моделей."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message}: {path}"
        super().__init__(message)


class AnnotationError(AnnotatorError, RuntimeError):
    """Агрегированная ошибка пайплайна.

    Attributes:
        stage: стадия, которой пайплайн не смог достичь
        cause: исходное исключение
    """

    def __init__(self, stage, cause: BaseException):
        self.stage = stage
        self.cause = cause
        stage_name = getattr(stage, "value", stage)
        super().__init__(f"Ошибка на стадии '{stage_name}': {cause}")
