"""
Централизованный менеджер языковых моделей для процесса.

Загружает модели один раз (языки и каталог из config) и отдаёт
неизменяемый ModelBundle всем компонентам. Загрузка защищена
блокировкой: параллельные первые обращения дождутся одной загрузки.
"""

import logging
import threading
from typing import Any, Dict, Optional

from ..config import config
from ..models.base_model import ModelBundle
from ..models.model_factory import load_models

logger = logging.getLogger(__name__)


class ModelManager:
    """
    Синглтон с набором моделей процесса.

    Обеспечивает:
    - Однократную загрузку моделей
    - Потокобезопасную инициализацию
    - Единый источник моделей для пайплайна
    """

    _instance: Optional['ModelManager'] = None
    _bundle: Optional[ModelBundle] = None
    _lock = threading.Lock()
    _load_count = 0

    def __new__(cls) -> 'ModelManager':
        """Синглтон для избежания множественной загрузки моделей."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def get_bundle(self) -> ModelBundle:
        """
        Возвращает загруженные модели, загружая их при первом обращении.

        Raises:
            ModelLoadError: файлы моделей отсутствуют или повреждены
        """
        bundle = ModelManager._bundle
        if bundle is not None:
            return bundle
        with ModelManager._lock:
            if ModelManager._bundle is None:
                ModelManager._bundle = self._load_bundle()
            return ModelManager._bundle

    def _load_bundle(self) -> ModelBundle:
        languages = config.get_languages()
        directory = config.get_model_directory()
        logger.info(f"Загрузка моделей: языки={languages}, каталог={directory}")
        bundle = load_models(languages, directory)
        ModelManager._load_count += 1
        return bundle

    @property
    def is_loaded(self) -> bool:
        return ModelManager._bundle is not None

    @property
    def load_count(self) -> int:
        """Сколько раз выполнялась загрузка (для диагностики)."""
        return ModelManager._load_count

    def get_model_info(self) -> Dict[str, Any]:
        """Возвращает информацию о загруженных моделях."""
        if ModelManager._bundle is None:
            return {'loaded': False}
        bundle = ModelManager._bundle
        return {
            'loaded': True,
            'languages': list(bundle.languages),
            'directory': str(bundle.directory),
            'models': {code: bundle.get(code).get_model_info() for code in bundle.languages},
        }

    @classmethod
    def reset(cls) -> None:
        """Сбрасывает загруженные модели (для тестов и смены конфигурации)."""
        with cls._lock:
            cls._bundle = None
            cls._load_count = 0


def get_default_bundle() -> ModelBundle:
    """Модели процесса по умолчанию."""
    return ModelManager().get_bundle()
