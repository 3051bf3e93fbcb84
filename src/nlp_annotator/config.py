"""
Модуль для работы с конфигурацией проекта

Функции:
- Загрузка config.yaml (+ профили: config.prod.yaml, config.test.yaml)
- ENV-переопределения (префикс NLP_ANNOTATOR_, вложенность через __)
- Валидация значений
- Настройка логирования
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv
import logging
from datetime import datetime

logger = logging.getLogger(__name__)

# Каталог моделей, поставляемых вместе с пакетом
PACKAGE_MODELS_DIR = Path(__file__).parent / "data" / "models"


class Config:
    """Класс для работы с конфигурацией проекта"""

    def __init__(self, config_path: str = None):
        """
        Инициализация конфигурации

        Args:
            config_path: Путь к файлу конфигурации
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            # Ищем config.yaml в текущей директории и выше
            current_dir = Path.cwd()
            config_path = current_dir / "config.yaml"

            while not config_path.exists() and current_dir.parent != current_dir:
                current_dir = current_dir.parent
                config_path = current_dir / "config.yaml"

            self.config_path = config_path

        self.config_data = {}

        self._load_config()
        self._load_env()
        self._apply_env_overrides()
        self._validate()
        # Логирование настраивается идемпотентно
        self._configure_logging_if_needed()

    def _resolve_config_path(self) -> Path:
        env = os.getenv('NLP_ANNOTATOR_ENV', '').lower().strip()
        root = self.config_path.parent if self.config_path else Path.cwd()
        if env == 'production':
            candidate = root / 'config.prod.yaml'
        elif env == 'testing':
            candidate = root / 'config.test.yaml'
        else:
            candidate = root / 'config.yaml'
        if env and candidate.exists():
            return candidate
        return self.config_path

    def _load_config(self):
        """Загружает конфигурацию из YAML файла поверх значений по умолчанию"""
        self.config_data = self._get_default_config()
        self.config_path = self._resolve_config_path()
        if not self.config_path.exists():
            logger.debug(f"Файл конфигурации {self.config_path} не найден, используются значения по умолчанию")
            return
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                file_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Ошибка загрузки конфигурации {self.config_path}: {e}")
            return
        if not isinstance(file_data, dict):
            logger.error(f"Некорректный формат конфигурации {self.config_path}: ожидается словарь")
            return
        self._merge(self.config_data, file_data)
        logger.debug(f"Конфигурация загружена: {self.config_path}")

    def _load_env(self):
        """Загружает переменные окружения из .env файла"""
        load_dotenv()

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._merge(base[key], value)
            else:
                base[key] = value

    def _set_nested(self, data: Dict[str, Any], dotted: str, value: Any) -> None:
        cur = data
        keys = dotted.split('.')
        for k in keys[:-1]:
            if k not in cur or not isinstance(cur[k], dict):
                cur[k] = {}
            cur = cur[k]
        cur[keys[-1]] = value

    def _apply_env_overrides(self) -> None:
        """Переопределяет конфиг значениями из ENV (NLP_ANNOTATOR_*)."""
        prefix = 'NLP_ANNOTATOR_'
        for key, val in os.environ.items():
            if not key.startswith(prefix):
                continue
            if key in ('NLP_ANNOTATOR_ENV',):
                continue
            tail = key[len(prefix):]
            # Вложенность разделяется двойным подчёркиванием
            dotted = tail.replace('__', '.').lower()
            parsed: Any = val
            if val.lower() in ('true', 'false'):
                parsed = (val.lower() == 'true')
            else:
                try:
                    if '.' in val:
                        parsed = float(val)
                    else:
                        parsed = int(val)
                except ValueError:
                    parsed = val
            self._set_nested(self.config_data, dotted, parsed)
        if os.getenv('NLP_ANNOTATOR_ENV'):
            logger.info(f"Активирован профиль: {os.getenv('NLP_ANNOTATOR_ENV')}")

    def _clamp(self, key: str, low: float, high: float, default: float) -> None:
        try:
            value = float(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning(f"{key}: нечисловое значение — установлено {default}")
            self._set_nested(self.config_data, key, default)
            return
        if value < low or value > high:
            clamped = min(max(value, low), high)
            logger.warning(f"{key}={value} вне диапазона [{low}, {high}] — принудительно установлено {clamped}")
            self._set_nested(self.config_data, key, clamped)

    def _validate(self) -> None:
        """Проверяет диапазоны значений."""
        self._clamp('ner.gazetteer_confidence', 0.0, 1.0, 0.95)
        self._clamp('ner.rule_confidence', 0.0, 1.0, 0.6)
        self._clamp('language_identification.min_similarity', 0.0, 1.0, 0.15)
        self._clamp('language_identification.min_common_word_share', 0.0, 1.0, 0.3)
        self._clamp('language_identification.short_text_confidence_cap', 0.0, 1.0, 0.3)
        self._clamp('pos_tagging.suffix_weight', 0.0, 1.0, 0.7)
        self._clamp('pos_tagging.proper_noun_weight', 0.0, 1.0, 0.8)
        for key, default in (('language_identification.min_text_length', 10),
                             ('language_identification.common_word_min_count', 3),
                             ('lemmatization.min_stem_length', 2),
                             ('pipeline.workers', 4)):
            try:
                value = int(self.get(key, default))
            except (TypeError, ValueError):
                value = default
            if value < 1:
                logger.warning(f"{key} < 1 — принудительно установлено в 1")
                value = 1
            self._set_nested(self.config_data, key, value)
        policy = str(self.get('tokenizer.contractions', 'keep')).lower()
        if policy not in ('keep', 'split'):
            logger.warning(f"tokenizer.contractions='{policy}' не поддерживается — используется 'keep'")
            policy = 'keep'
        self._set_nested(self.config_data, 'tokenizer.contractions', policy)

    def _configure_logging_if_needed(self, force: bool = False) -> None:
        """Инициализирует/переинициализирует базовое логирование по config.

        Повторная конфигурация выполняется, если:
          - ранее не конфигурировалось, или
          - изменился уровень/формат/файл логирования, или
          - явно указан force=True
        """
        root = logging.getLogger()

        console_level_name = str(self.get_console_logging_level()).upper()
        file_level_name = str(self.get_file_logging_level()).upper()
        console_level = getattr(logging, console_level_name, logging.WARNING)
        file_level = getattr(logging, file_level_name, logging.DEBUG)

        desired_fmt = self.get_logging_format()
        desired_file = self.get_logging_file() if self.is_logging_to_file_enabled() else None

        if getattr(root, "_nlp_annotator_configured", False) and not force:
            current_console_level = getattr(root, "_nlp_annotator_console_level", None)
            current_file_level = getattr(root, "_nlp_annotator_file_level", None)
            current_fmt = getattr(root, "_nlp_annotator_format", None)
            current_file = getattr(root, "_nlp_annotator_file", None)
            if (
                current_console_level == console_level_name and
                current_file_level == file_level_name and
                current_fmt == desired_fmt and
                current_file == desired_file
            ):
                return

        handlers: List[logging.Handler] = []
        console = logging.StreamHandler()
        console.setLevel(console_level)
        console.setFormatter(logging.Formatter(desired_fmt))
        handlers.append(console)

        if desired_file:
            self.cleanup_old_log_files()
            log_file = Path(desired_file)
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                fh = logging.FileHandler(log_file, encoding='utf-8')
                fh.setLevel(file_level)
                fh.setFormatter(logging.Formatter(desired_fmt))
                handlers.append(fh)
            except OSError as e:
                logger.warning(f"Не удалось открыть файл лога: {e}")

        root_level = min(console_level, file_level) if desired_file else console_level
        logging.basicConfig(level=root_level, handlers=handlers, format=desired_fmt, force=True)
        setattr(root, "_nlp_annotator_configured", True)
        setattr(root, "_nlp_annotator_console_level", console_level_name)
        setattr(root, "_nlp_annotator_file_level", file_level_name)
        setattr(root, "_nlp_annotator_format", desired_fmt)
        setattr(root, "_nlp_annotator_file", desired_file)

    def _get_default_config(self) -> Dict[str, Any]:
        """Возвращает конфигурацию по умолчанию"""
        return {
            'models': {
                # None — модели из пакета (nlp_annotator/data/models)
                'directory': None,
                'languages': ['de', 'en', 'es', 'fr'],
            },
            'tokenizer': {
                # keep — "they're" остаётся одним токеном, split — "they" + "'re"
                'contractions': 'keep',
                # Дополнительные символы, считающиеся пунктуацией (помимо Unicode P*)
                'extra_punctuation': '',
                'abbreviations': [
                    'mr', 'mrs', 'ms', 'dr', 'prof', 'sr', 'sra', 'srta', 'jr', 'st',
                    'mt', 'inc', 'ltd', 'corp', 'co', 'vs', 'etc', 'dept', 'mme', 'mlle',
                ],
            },
            'language_identification': {
                'ngram_weights': {1: 0.2, 2: 0.3, 3: 0.5},
                'profile_size': 1000,
                # Порог в непробельных символах, ниже которого уверенность снижается
                'min_text_length': 10,
                'min_similarity': 0.15,
                # Доля служебных слов языка, ниже которой язык считается неизвестным
                'min_common_word_share': 0.3,
                'common_word_min_count': 3,
                'short_text_confidence_cap': 0.3,
            },
            'pos_tagging': {
                'unigram_smoothing': 0.1,
                'suffix_weight': 0.7,
                'proper_noun_weight': 0.8,
            },
            'lemmatization': {
                'min_stem_length': 2,
            },
            'ner': {
                'gazetteer_confidence': 0.95,
                'rule_confidence': 0.6,
            },
            'pipeline': {
                'require_non_empty': False,
                'workers': 4,
            },
            'files': {
                'results_folder': "data/results",
            },
            'logging': {
                'console_level': "WARNING",
                'file_level': "DEBUG",
                'format': "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                'log_to_file': False,
                'log_file': "logs/nlp_annotator.log",
                'max_log_files': 10,
            },
            'testing': {
                'quality': {
                    'min_pos_accuracy': 0.7,
                },
                'performance': {
                    'max_seconds': 5.0,
                },
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Получает значение конфигурации по ключу

        Args:
            key: Ключ в формате 'section.subsection.parameter'
            default: Значение по умолчанию

        Returns:
            Значение параметра или default
        """
        try:
            keys = key.split('.')
            value = self.config_data

            for k in keys:
                value = value[k]

            return value
        except (KeyError, TypeError):
            return default

    # --- Модели ---
    def get_model_directory(self) -> Path:
        """Каталог с моделями языков"""
        directory = self.get('models.directory')
        if not directory:
            return PACKAGE_MODELS_DIR
        return Path(os.path.expanduser(str(directory)))

    def get_languages(self) -> List[str]:
        """Коды языков, загружаемых при старте"""
        languages = self.get('models.languages', ['de', 'en', 'es', 'fr'])
        if isinstance(languages, str):
            languages = [code.strip() for code in languages.split(',') if code.strip()]
        return sorted(set(languages))

    # --- Токенизация ---
    def get_contraction_policy(self) -> str:
        return self.get('tokenizer.contractions', 'keep')

    def get_extra_punctuation(self) -> str:
        return self.get('tokenizer.extra_punctuation', '') or ''

    def get_abbreviations(self) -> List[str]:
        return list(self.get('tokenizer.abbreviations', []) or [])

    # --- Определение языка ---
    def get_ngram_weights(self) -> Dict[int, float]:
        """Веса порядков n-грамм (ключи приводятся к int — ENV/YAML дают строки)"""
        weights = self.get('language_identification.ngram_weights', {1: 0.2, 2: 0.3, 3: 0.5}) or {}
        return {int(order): float(weight) for order, weight in weights.items()}

    def get_profile_size(self) -> int:
        return int(self.get('language_identification.profile_size', 1000))

    def get_min_text_length(self) -> int:
        return int(self.get('language_identification.min_text_length', 10))

    def get_min_similarity(self) -> float:
        return float(self.get('language_identification.min_similarity', 0.15))

    def get_short_text_confidence_cap(self) -> float:
        return float(self.get('language_identification.short_text_confidence_cap', 0.3))

    def get_min_common_word_share(self) -> float:
        return float(self.get('language_identification.min_common_word_share', 0.3))

    def get_common_word_min_count(self) -> int:
        return int(self.get('language_identification.common_word_min_count', 3))

    # --- POS ---
    def get_unigram_smoothing(self) -> float:
        return float(self.get('pos_tagging.unigram_smoothing', 0.1))

    def get_suffix_weight(self) -> float:
        return float(self.get('pos_tagging.suffix_weight', 0.7))

    def get_proper_noun_weight(self) -> float:
        return float(self.get('pos_tagging.proper_noun_weight', 0.8))

    # --- Лемматизация ---
    def get_min_stem_length(self) -> int:
        return int(self.get('lemmatization.min_stem_length', 2))

    # --- NER ---
    def get_gazetteer_confidence(self) -> float:
        return float(self.get('ner.gazetteer_confidence', 0.95))

    def get_rule_confidence(self) -> float:
        return float(self.get('ner.rule_confidence', 0.6))

    # --- Пайплайн ---
    def is_non_empty_required(self) -> bool:
        return bool(self.get('pipeline.require_non_empty', False))

    def get_pipeline_workers(self) -> int:
        return int(self.get('pipeline.workers', 4))

    def get_results_folder(self) -> str:
        """Получает папку для результатов экспорта"""
        return self.get('files.results_folder', "data/results")

    # --- Логирование ---
    def get_console_logging_level(self) -> str:
        """Получает уровень логирования для консоли"""
        # Поддержка формата logging.level для обратной совместимости
        return self.get('logging.console_level', self.get('logging.level', "WARNING"))

    def get_file_logging_level(self) -> str:
        """Получает уровень логирования для файла"""
        return self.get('logging.file_level', "DEBUG")

    def get_logging_format(self) -> str:
        """Получает формат логов"""
        return self.get('logging.format', "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def get_logging_file(self) -> str:
        """Получает путь к файлу логов ({timestamp} заменяется временной меткой)"""
        log_file_template = self.get('logging.log_file', "logs/nlp_annotator.log")
        if "{timestamp}" in log_file_template:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            return log_file_template.replace("{timestamp}", timestamp)
        return log_file_template

    def is_logging_to_file_enabled(self) -> bool:
        """Проверяет, включено ли логирование в файл"""
        return bool(self.get('logging.log_to_file', False))

    def get_max_log_files(self) -> int:
        """Получает максимальное количество файлов логов для хранения"""
        return int(self.get('logging.max_log_files', 10))

    def cleanup_old_log_files(self) -> None:
        """Удаляет старые файлы логов, оставляя только последние max_log_files"""
        logs_dir = Path(self.get_logging_file()).parent
        if not logs_dir.exists():
            return

        log_files = list(logs_dir.glob("nlp_annotator*.log"))
        max_files = self.get_max_log_files()
        if len(log_files) <= max_files:
            return

        # Самые новые — последними
        log_files.sort(key=lambda f: f.stat().st_mtime)
        for old_file in log_files[:-max_files]:
            try:
                old_file.unlink()
                logger.debug(f"Удален старый лог файл: {old_file}")
            except OSError as e:
                logger.debug(f"Не удалось удалить лог файл {old_file}: {e}")

    def get_testing_config(self) -> Dict[str, Any]:
        """Параметры тестов (пороги качества и производительности)"""
        return self.get('testing', {}) or {}


# Глобальный экземпляр конфигурации
config = Config()
