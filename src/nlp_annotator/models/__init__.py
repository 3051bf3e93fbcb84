from .base_model import LanguageResources, ModelBundle
from .gazetteer import Gazetteer
from .hmm import HMMModel
from .lemma_table import LemmaTable, SuffixRule
from .ngram_profile import NgramProfile
from .model_factory import ModelFactory, load_models

__all__ = [
    "LanguageResources",
    "ModelBundle",
    "Gazetteer",
    "HMMModel",
    "LemmaTable",
    "SuffixRule",
    "NgramProfile",
    "ModelFactory",
    "load_models",
]
