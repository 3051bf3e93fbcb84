"""
Компонент для экспорта результатов аннотации.

Отвечает за экспорт результатов в различные форматы:
JSON (без потерь, читается обратно), CSV по токенам, Excel с листами
токенов, сущностей и сводки.
"""

import json
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pandas as pd

from ..interfaces.text_annotator import AnnotationResult

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class ResultExporter:
    """Экспортёр результатов аннотации."""

    def __init__(self, output_dir: Union[str, Path] = "data/results"):
        """
        Инициализирует экспортёр.

        Args:
            output_dir: Папка для сохранения результатов
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _with_suffix(filepath: Union[str, Path], suffix: str) -> Path:
        filepath = Path(filepath)
        if not filepath.suffix:
            filepath = filepath.with_suffix(suffix)
        return filepath

    @staticmethod
    def tokens_frame(result: AnnotationResult) -> pd.DataFrame:
        """Таблица токенов: одна строка на токен."""
        sentence_of = {}
        for number, (start, end) in enumerate(result.sentences()):
            for index in range(start, end):
                sentence_of[index] = number
        entity_of = {}
        for span in result.entities:
            for index in range(span.start, span.end):
                entity_of[index] = span.kind.value
        rows = [
            {
                'index': i,
                'start': t.start,
                'end': t.end,
                'text': t.text,
                'kind': t.kind.value,
                'pos': t.pos,
                'lemma': t.lemma,
                'sentence': sentence_of.get(i, 0),
                'entity': entity_of.get(i, ''),
            }
            for i, t in enumerate(result.tokens)
        ]
        columns = ['index', 'start', 'end', 'text', 'kind', 'pos', 'lemma', 'sentence', 'entity']
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def entities_frame(result: AnnotationResult) -> pd.DataFrame:
        """Таблица сущностей."""
        rows = [
            {
                'start': e.start,
                'end': e.end,
                'kind': e.kind.value,
                'confidence': e.confidence,
                'source': e.source,
                'text': result.entity_text(e),
            }
            for e in result.entities
        ]
        return pd.DataFrame(rows, columns=['start', 'end', 'kind', 'confidence', 'source', 'text'])

    @staticmethod
    def summary(result: AnnotationResult) -> Dict[str, Any]:
        """Сводная статистика по документу."""
        words = result.words()
        pos_distribution = Counter(t.pos for t in words)
        return {
            'language': result.language,
            'language_confidence': round(result.document.language_confidence, 4),
            'characters': len(result.document.text),
            'tokens': len(result.tokens),
            'words': len(words),
            'sentences': len(result.sentences()),
            'entities': len(result.entities),
            'pos_distribution': dict(sorted(pos_distribution.items())),
        }

    def export_to_json(self, result: AnnotationResult, filepath: Union[str, Path]) -> Path:
        """
        Экспортирует результат в JSON (без потерь).

        Args:
            result: Результат аннотации
            filepath: Путь для сохранения файла

        Returns:
            Путь к файлу
        """
        filepath = self._with_suffix(filepath, '.json')
        try:
            json_data = {
                'metadata': {
                    'timestamp': datetime.now().isoformat(),
                    'format_version': FORMAT_VERSION,
                },
                'result': result.to_dict(),
            }
            with open(filepath, 'w', encoding='utf-8') as jsonfile:
                json.dump(json_data, jsonfile, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Ошибка экспорта в JSON: {e}")
            raise
        logger.info(f"Результат экспортирован в JSON: {filepath}")
        return filepath

    def load_from_json(self, filepath: Union[str, Path]) -> AnnotationResult:
        """
        Читает результат, сохранённый export_to_json.

        Raises:
            OSError: файл не читается
            ValueError: содержимое не является результатом аннотации
        """
        filepath = Path(filepath)
        with open(filepath, 'r', encoding='utf-8') as jsonfile:
            data = json.load(jsonfile)
        try:
            return AnnotationResult.from_dict(data['result'])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Некорректный файл результата {filepath}: {e}")
            raise ValueError(f"Некорректный файл результата: {filepath}") from e

    def export_to_csv(self, result: AnnotationResult, filepath: Union[str, Path]) -> Path:
        """
        Экспортирует токены в CSV.

        Args:
            result: Результат аннотации
            filepath: Путь для сохранения файла

        Returns:
            Путь к файлу
        """
        filepath = self._with_suffix(filepath, '.csv')
        try:
            self.tokens_frame(result).to_csv(filepath, index=False, encoding='utf-8')
        except (OSError, ValueError) as e:
            logger.error(f"Ошибка экспорта в CSV: {e}")
            raise
        logger.info(f"Результат экспортирован в CSV: {filepath} ({len(result.tokens)} токенов)")
        return filepath

    def export_to_excel(self, result: AnnotationResult, filepath: Union[str, Path]) -> Path:
        """
        Экспортирует результат в Excel (листы tokens, entities, summary).

        Args:
            result: Результат аннотации
            filepath: Путь для сохранения файла

        Returns:
            Путь к файлу
        """
        filepath = self._with_suffix(filepath, '.xlsx')
        summary = self.summary(result)
        stats = {
            'Параметр': [
                'Язык',
                'Уверенность определения языка',
                'Символов',
                'Токенов',
                'Слов',
                'Предложений',
                'Сущностей',
                'Дата анализа',
            ],
            'Значение': [
                summary['language'],
                summary['language_confidence'],
                summary['characters'],
                summary['tokens'],
                summary['words'],
                summary['sentences'],
                summary['entities'],
                datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            ],
        }
        try:
            with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
                self.tokens_frame(result).to_excel(writer, sheet_name='tokens', index=False)
                self.entities_frame(result).to_excel(writer, sheet_name='entities', index=False)
                pd.DataFrame(stats).to_excel(writer, sheet_name='summary', index=False)
        except (OSError, ValueError) as e:
            logger.error(f"Ошибка экспорта в Excel: {e}")
            raise
        logger.info(f"Результат экспортирован в Excel: {filepath}")
        return filepath

    def export_all_formats(self, results: Union[AnnotationResult, Sequence[AnnotationResult]],
                           base_filename: str) -> Dict[str, List[Path]]:
        """
        Экспортирует результат (или несколько) во все форматы.

        Args:
            results: Результат или список результатов
            base_filename: Базовое имя файла без расширения

        Returns:
            Словарь формат -> список путей
        """
        if isinstance(results, AnnotationResult):
            results = [results]
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        exported: Dict[str, List[Path]] = {'json': [], 'csv': [], 'excel': []}
        for number, result in enumerate(results):
            name = f"{base_filename}_{timestamp}" if len(results) == 1 else f"{base_filename}_{timestamp}_{number}"
            exported['json'].append(self.export_to_json(result, self.output_dir / f"{name}.json"))
            exported['csv'].append(self.export_to_csv(result, self.output_dir / f"{name}.csv"))
            exported['excel'].append(self.export_to_excel(result, self.output_dir / f"{name}.xlsx"))
        logger.info(f"Результаты экспортированы во все форматы в папку: {self.output_dir}")
        return exported
