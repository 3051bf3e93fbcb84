"""
Тесты для ModelManager и точек входа уровня модуля.
"""

import threading

import pytest

import nlp_annotator
from nlp_annotator.annotator import get_default_pipeline, reset_default_pipeline
from nlp_annotator.components.model_manager import ModelManager, get_default_bundle


@pytest.fixture
def fresh_manager():
    ModelManager.reset()
    reset_default_pipeline()
    yield ModelManager()
    reset_default_pipeline()


class TestModelManager:
    """Тесты для ModelManager."""

    def test_singleton(self):
        assert ModelManager() is ModelManager()

    def test_lazy_loading(self, fresh_manager):
        assert not fresh_manager.is_loaded
        assert fresh_manager.get_model_info() == {'loaded': False}
        bundle = fresh_manager.get_bundle()
        assert fresh_manager.is_loaded
        assert fresh_manager.get_bundle() is bundle
        assert fresh_manager.load_count == 1

    def test_concurrent_first_access(self, fresh_manager):
        """Параллельные первые обращения дожидаются одной загрузки."""
        bundles = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            bundles.append(get_default_bundle())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(bundles) == 8
        assert all(b is bundles[0] for b in bundles)
        assert fresh_manager.load_count == 1

    def test_model_info(self, fresh_manager):
        fresh_manager.get_bundle()
        info = fresh_manager.get_model_info()
        assert info['loaded'] is True
        assert info['languages'] == ["de", "en", "es", "fr"]
        assert set(info['models']) == {"de", "en", "es", "fr"}


class TestModuleEntryPoints:
    """Тесты для nlp_annotator.annotate / annotate_batch."""

    def test_annotate(self, fresh_manager):
        result = nlp_annotator.annotate("The cats are running.")
        assert result.language == "en"
        assert get_default_pipeline() is get_default_pipeline()

    def test_annotate_batch(self, fresh_manager):
        results = nlp_annotator.annotate_batch(["Hello there.", "", "Guten Morgen."])
        assert [r.document.text for r in results] == ["Hello there.", "", "Guten Morgen."]

    def test_version(self):
        assert nlp_annotator.__version__ == "0.1.0"
