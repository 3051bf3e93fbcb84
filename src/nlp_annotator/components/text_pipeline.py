"""
Пайплайн аннотации текста.

Стадии выполняются строго по порядку:
Created -> Tokenized -> LanguageIdentified -> POSTagged -> Lemmatized
-> EntitiesResolved -> Complete.

Пайплайн атомарен: либо возвращается полный AnnotationResult, либо
выбрасывается одна AnnotationError с указанием стадии, которой не
удалось достичь. Частичные результаты наружу не выходят.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from ..config import config
from ..exceptions import AnnotationError
from ..interfaces.text_annotator import (
    UNKNOWN_LANGUAGE,
    AnnotationResult,
    Document,
    EntitySpan,
    TaggedToken,
    LanguageIdentifierInterface,
    LemmatizerInterface,
    NERTaggerInterface,
    POSTaggerInterface,
    TokenizerInterface,
)
from ..models.base_model import ModelBundle
from .language_identifier import LanguageIdentifier
from .lemmatizer import Lemmatizer
from .model_manager import get_default_bundle
from .ner_tagger import NERTagger
from .pos_tagger import POSTagger
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

T = TypeVar('T')


class PipelineStage(str, Enum):
    """Состояния пайплайна (линейный автомат)."""
    CREATED = "created"
    TOKENIZED = "tokenized"
    LANGUAGE_IDENTIFIED = "language_identified"
    POS_TAGGED = "pos_tagged"
    LEMMATIZED = "lemmatized"
    ENTITIES_RESOLVED = "entities_resolved"
    COMPLETE = "complete"


class AnnotationPipeline:
    """
    Единый проход аннотации над документом.

    Компоненты не хранят состояния между вызовами, модели только
    читаются, поэтому один экземпляр можно использовать из нескольких
    потоков одновременно.
    """

    def __init__(self, bundle: Optional[ModelBundle] = None,
                 tokenizer: Optional[TokenizerInterface] = None,
                 language_identifier: Optional[LanguageIdentifierInterface] = None,
                 pos_tagger: Optional[POSTaggerInterface] = None,
                 lemmatizer: Optional[LemmatizerInterface] = None,
                 ner_tagger: Optional[NERTaggerInterface] = None,
                 require_non_empty: Optional[bool] = None):
        """
        Инициализирует пайплайн.

        Args:
            bundle: Загруженные модели (по умолчанию — модели процесса)
            tokenizer: Токенизатор
            language_identifier: Определитель языка
            pos_tagger: POS-теггер
            lemmatizer: Лемматизатор
            ner_tagger: Поиск сущностей
            require_non_empty: Требовать непустой документ (по умолчанию из config)
        """
        self.bundle = bundle if bundle is not None else get_default_bundle()
        self.tokenizer = tokenizer or Tokenizer()
        self.language_identifier = language_identifier or LanguageIdentifier(self.bundle)
        self.pos_tagger = pos_tagger or POSTagger(self.bundle)
        self.lemmatizer = lemmatizer or Lemmatizer(self.bundle)
        self.ner_tagger = ner_tagger or NERTagger(self.bundle)
        self.require_non_empty = (
            require_non_empty if require_non_empty is not None else config.is_non_empty_required()
        )

    @staticmethod
    def _run_stage(target: PipelineStage, func: Callable[..., T], *args: Any) -> T:
        """Выполняет стадию; любая ошибка превращается в AnnotationError(target)."""
        t0 = time.time()
        try:
            result = func(*args)
        except Exception as e:
            logger.debug(f"Стадия {target.value} завершилась ошибкой: {e!r}")
            raise AnnotationError(target, e) from e
        logger.debug(f"Стадия {target.value}: {(time.time() - t0) * 1000:.1f} мс")
        return result

    def _identify(self, text: str, language: Optional[str]):
        if language is None:
            return self.language_identifier.identify(text)
        # Принудительный язык проверяется по загруженным моделям
        self.bundle.get(language)
        return language, 1.0

    def annotate(self, text: str, language: Optional[str] = None) -> AnnotationResult:
        """
        Аннотирует документ.

        Args:
            text: Исходный текст
            language: Код языка, если его нужно задать явно

        Returns:
            Полный результат аннотации

        Raises:
            AnnotationError: ошибка на одной из стадий (с .stage и .cause);
                незагруженный принудительный язык даёт стадию LANGUAGE_IDENTIFIED
        """
        if text is None:
            text = ""
        t0 = time.time()

        tokens = self._run_stage(
            PipelineStage.TOKENIZED, self.tokenizer.tokenize, text, self.require_non_empty
        )
        code, confidence = self._run_stage(
            PipelineStage.LANGUAGE_IDENTIFIED, self._identify, text, language
        )
        if code == UNKNOWN_LANGUAGE:
            logger.debug("Язык не определён: POS и леммы по эвристикам формы слова")
        document = Document(text=text, language=code, language_confidence=confidence)

        pos_tags = self._run_stage(PipelineStage.POS_TAGGED, self.pos_tagger.tag, tokens, code)
        lemmas = self._run_stage(
            PipelineStage.LEMMATIZED, self.lemmatizer.lemmatize_batch, tokens, pos_tags, code
        )
        tagged = tuple(
            TaggedToken(token=token, pos=pos, lemma=lemma)
            for token, pos, lemma in zip(tokens, pos_tags, lemmas)
        )
        entities: List[EntitySpan] = self._run_stage(
            PipelineStage.ENTITIES_RESOLVED, self.ner_tagger.recognize, tagged, code
        )
        result = self._run_stage(
            PipelineStage.COMPLETE, AnnotationResult, document, tagged, tuple(entities)
        )
        logger.debug(
            f"Аннотация: {len(tokens)} токенов, язык={code} ({confidence:.2f}), "
            f"сущностей={len(entities)}, {(time.time() - t0) * 1000:.1f} мс"
        )
        return result

    def annotate_batch(self, texts: Iterable[str], max_workers: Optional[int] = None,
                       language: Optional[str] = None) -> List[AnnotationResult]:
        """
        Аннотирует несколько документов параллельно.

        Порядок результатов совпадает с порядком текстов. Первая ошибка
        прерывает пакет.

        Args:
            texts: Тексты
            max_workers: Число потоков (по умолчанию из config)
            language: Код языка для всех документов

        Returns:
            Результаты в исходном порядке
        """
        texts = list(texts)
        if not texts:
            return []
        workers = max(1, max_workers or config.get_pipeline_workers())
        logger.info(f"Пакетная аннотация: {len(texts)} документов, потоков {workers}")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda t: self.annotate(t, language), texts))

    def get_model_info(self) -> Dict[str, Any]:
        """Возвращает информацию о пайплайне."""
        return {
            'languages': list(self.bundle.languages),
            'require_non_empty': self.require_non_empty,
            'tokenizer': type(self.tokenizer).__name__,
            'contractions': getattr(self.tokenizer, 'contractions', None),
        }

