"""
Фабрика для загрузки языковых моделей из каталога.

Каталог содержит по подкаталогу на код языка:
profile.yaml, pos.yaml, lemmas.yaml, gazetteer.yaml.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml

from ..config import config
from ..exceptions import ModelLoadError
from .base_model import LanguageResources, ModelBundle
from .gazetteer import Gazetteer
from .hmm import HMMModel, parse_tagged_sentence
from .lemma_table import LemmaTable
from .table_utils import invert_lexicon, split_words
from .ngram_profile import NgramProfile

logger = logging.getLogger(__name__)


class ModelFactory:
    """Создаёт ресурсы языков из файлов моделей."""

    @staticmethod
    def read_yaml(path: Path) -> Dict[str, Any]:
        """
        Читает YAML-файл модели.

        Raises:
            ModelLoadError: файла нет, он повреждён или не является словарём
        """
        if not path.is_file():
            raise ModelLoadError("Файл модели не найден", str(path))
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ModelLoadError(f"Файл модели повреждён ({e})", str(path)) from e
        if not isinstance(data, dict):
            raise ModelLoadError("Файл модели должен содержать словарь", str(path))
        return data

    @staticmethod
    def create(language: str, directory: Path) -> LanguageResources:
        """Загружает и обучает ресурсы одного языка (Fail Fast).

        Args:
            language: Код языка
            directory: Корневой каталог моделей

        Returns:
            Ресурсы языка

        Raises:
            ModelLoadError: если хотя бы одна таблица не загружается
        """
        lang_dir = directory / language
        if not lang_dir.is_dir():
            raise ModelLoadError(f"Нет каталога модели для языка '{language}'", str(lang_dir))

        profile_path = lang_dir / 'profile.yaml'
        profile_data = ModelFactory.read_yaml(profile_path)
        text = profile_data.get('text') or ''
        if not isinstance(text, str):
            raise ModelLoadError(
                f"Текст профиля должен быть строкой, получено: {type(text).__name__}", str(profile_path)
            )
        if not text.strip():
            raise ModelLoadError("Пустой текст профиля", str(profile_path))
        try:
            common_words = split_words(profile_data.get('common_words'))
        except ValueError as e:
            raise ModelLoadError(f"Некорректный список служебных слов ({e})", str(profile_path)) from e
        profile = NgramProfile.from_text(
            language, text,
            orders=tuple(config.get_ngram_weights()),
            profile_size=config.get_profile_size(),
            common_words=common_words,
        )

        pos_path = lang_dir / 'pos.yaml'
        pos_data = ModelFactory.read_yaml(pos_path)
        try:
            sentences = [
                parse_tagged_sentence(line)
                for line in (pos_data.get('corpus') or '').splitlines()
                if line.strip()
            ]
            hmm = HMMModel.train(
                language, sentences,
                lexicon=invert_lexicon(pos_data.get('lexicon')),
                open_class_prior=pos_data.get('open_classes'),
                suffixes=pos_data.get('suffixes'),
                smoothing=config.get_unigram_smoothing(),
                proper_noun_weight=pos_data.get('proper_noun_weight'),
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise ModelLoadError(f"Некорректная POS-модель ({e})", str(pos_path)) from e

        lemmas_path = lang_dir / 'lemmas.yaml'
        try:
            lemmas = LemmaTable.from_dict(
                language, ModelFactory.read_yaml(lemmas_path),
                min_stem=config.get_min_stem_length(),
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise ModelLoadError(f"Некорректная таблица лемм ({e})", str(lemmas_path)) from e

        gazetteer_path = lang_dir / 'gazetteer.yaml'
        try:
            gazetteer = Gazetteer.from_dict(language, ModelFactory.read_yaml(gazetteer_path))
        except (ValueError, TypeError, AttributeError) as e:
            raise ModelLoadError(f"Некорректный газеттир ({e})", str(gazetteer_path)) from e

        return LanguageResources(
            language=language,
            profile=profile,
            hmm=hmm,
            lemmas=lemmas,
            gazetteer=gazetteer,
        )


def load_models(language_codes: Optional[Iterable[str]] = None,
                model_directory: Optional[Union[str, Path]] = None) -> ModelBundle:
    """
    Загружает модели указанных языков.

    Args:
        language_codes: Коды языков (по умолчанию из config)
        model_directory: Каталог моделей (по умолчанию из config)

    Returns:
        Неизменяемый набор моделей

    Raises:
        ModelLoadError: каталог или файлы отсутствуют либо повреждены
    """
    codes = sorted(set(language_codes if language_codes is not None else config.get_languages()))
    directory = Path(model_directory) if model_directory is not None else config.get_model_directory()
    if not directory.is_dir():
        raise ModelLoadError("Каталог моделей не найден", str(directory))

    t0 = time.time()
    resources = {}
    for code in codes:
        resources[code] = ModelFactory.create(code, directory)
        logger.debug(f"Модель '{code}' загружена: {resources[code].get_model_info()}")
    logger.info(f"Загружены модели {codes} из {directory} за {time.time() - t0:.2f}s")
    return ModelBundle(resources, directory=directory)
