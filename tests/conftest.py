import sys
from pathlib import Path
from typing import Dict, Any

import pytest

# Пакет лежит в src/: тесты запускаются и без установки
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nlp_annotator.config import Config  # noqa: E402
from nlp_annotator.components.text_pipeline import AnnotationPipeline  # noqa: E402
from nlp_annotator.models.model_factory import load_models  # noqa: E402


@pytest.fixture(scope="session")
def test_config() -> Dict[str, Any]:
    """Возвращает настройки для тестов из config.yaml.

    Включает раздел `testing` с порогами качества и производительности.
    """
    return Config().get_testing_config()


@pytest.fixture
def temp_directory(tmp_path: Path) -> Path:
    """Временная директория для тестов.

    Возвращает уникальную директорию для каждого теста.
    """
    return tmp_path


@pytest.fixture(scope="session")
def bundle():
    """Модели всех поставляемых языков (загружаются один раз на сессию)."""
    return load_models()


@pytest.fixture(scope="session")
def pipeline(bundle):
    """Пайплайн над моделями сессии."""
    return AnnotationPipeline(bundle)


@pytest.fixture(scope="session")
def sample_texts():
    """Тексты на поддерживаемых языках."""
    from .fixtures.sample_texts import (
        SAMPLE_ENGLISH_TEXT,
        SAMPLE_SPANISH_TEXT,
        SAMPLE_FRENCH_TEXT,
        SAMPLE_GERMAN_TEXT,
        SAMPLE_RUSSIAN_TEXT,
        SAMPLE_ENTITIES_TEXT,
    )

    return {
        "en": SAMPLE_ENGLISH_TEXT,
        "es": SAMPLE_SPANISH_TEXT,
        "fr": SAMPLE_FRENCH_TEXT,
        "de": SAMPLE_GERMAN_TEXT,
        "ru": SAMPLE_RUSSIAN_TEXT,
        "entities": SAMPLE_ENTITIES_TEXT,
    }


def pytest_configure(config):
    """Регистрируем маркеры для проекта."""
    config.addinivalue_line("markers", "integration: интеграционные тесты")
    config.addinivalue_line("markers", "performance: тесты производительности")
    config.addinivalue_line("markers", "quality: тесты качества/точности")
