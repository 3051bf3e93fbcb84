"""
Компоненты пайплайна аннотации.

Каждый компонент отвечает за одну конкретную задачу:
- Tokenizer - токенизация текста со смещениями
- LanguageIdentifier - определение языка по n-граммам
- POSTagger - определение частей речи (HMM + Витерби)
- Lemmatizer - приведение слов к базовой форме
- NERTagger - поиск именованных сущностей
- AnnotationPipeline - единый проход по всем стадиям
- ResultExporter - экспорт результатов
- ModelManager - однократная загрузка моделей процесса
"""

from .tokenizer import Tokenizer, grapheme_clusters, split_sentences
from .language_identifier import LanguageIdentifier
from .pos_tagger import POSTagger
from .lemmatizer import Lemmatizer
from .ner_tagger import NERTagger
from .model_manager import ModelManager, get_default_bundle
from .text_pipeline import AnnotationPipeline, PipelineStage
from .exporter import ResultExporter

__all__ = [
    'Tokenizer',
    'grapheme_clusters',
    'split_sentences',
    'LanguageIdentifier',
    'POSTagger',
    'Lemmatizer',
    'NERTagger',
    'ModelManager',
    'get_default_bundle',
    'AnnotationPipeline',
    'PipelineStage',
    'ResultExporter',
]
