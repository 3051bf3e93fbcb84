"""
Компонент для лемматизации слов.

Порядок поиска леммы:
1. словарь исключений по (форма в нижнем регистре, POS), затем для любой POS;
2. форма уже является известной базовой формой;
3. суффиксные правила для POS, начиная с самого длинного суффикса;
   правила применяются повторно, пока слово меняется;
4. форма в нижнем регистре.

Лемматизация тотальна: результат никогда не пуст для непустого слова.
"""

import logging
from typing import List, Optional, Sequence, Union

from ..interfaces.text_annotator import UNKNOWN_LANGUAGE, LemmatizerInterface, Token, TokenKind
from ..models.base_model import ModelBundle
from ..models.lemma_table import LemmaTable

logger = logging.getLogger(__name__)


class Lemmatizer(LemmatizerInterface):
    """Лемматизатор на таблицах исключений и суффиксных правилах."""

    def __init__(self, bundle: Optional[ModelBundle] = None):
        """
        Args:
            bundle: Загруженные модели (None — только приведение к нижнему регистру)
        """
        self.bundle = bundle

    def _table_for(self, language: str) -> Optional[LemmaTable]:
        if self.bundle is None or language == UNKNOWN_LANGUAGE or language not in self.bundle:
            return None
        return self.bundle.get(language).lemmas

    def lemmatize(self, token: Union[Token, str], pos: str, language: str) -> str:
        """
        Приводит слово к базовой форме.

        Args:
            token: Токен или строка
            pos: POS-тег слова
            language: Код языка

        Returns:
            Лемма (в нижнем регистре)
        """
        surface = token.text if isinstance(token, Token) else str(token or '')
        if not surface:
            return surface
        table = self._table_for(language)
        if table is None:
            return surface.lower()
        return self._lemmatize_with(table, surface, pos)

    @staticmethod
    def _lemmatize_with(table: LemmaTable, surface: str, pos: str) -> str:
        exception = table.exception(surface, pos)
        if exception:
            return exception

        word = surface.lower()
        # Правила дают более короткую форму; число шагов ограничено длиной слова
        for _ in range(len(word)):
            if table.is_known(word):
                return word
            rules = table.rules_for(pos)
            chosen = None
            for rule in rules:
                candidates = table.candidates(word, rule)
                known = next((c for c in candidates if table.is_known(c)), None)
                if known is not None:
                    chosen = known
                    break
            if chosen is None:
                chosen = next(
                    (c for c in (table.default_candidate(word, rule) for rule in rules) if c is not None),
                    None,
                )
            if not chosen or chosen == word:
                return word
            word = chosen
        return word

    def lemmatize_batch(self, tokens: Sequence[Token], pos_tags: Sequence[str], language: str) -> List[str]:
        """
        Лемматизирует последовательность токенов.

        Слова, числа и прочие токены лемматизируются; пробелы и пунктуация
        сохраняют свою форму.

        Args:
            tokens: Токены
            pos_tags: POS-теги той же длины
            language: Код языка

        Returns:
            Список лемм той же длины
        """
        if len(tokens) != len(pos_tags):
            raise ValueError(f"Число токенов ({len(tokens)}) и тегов ({len(pos_tags)}) не совпадает")
        table = self._table_for(language)
        if table is None:
            logger.debug(f"Лемматизация: нет таблиц для языка '{language}', используется нижний регистр")
        lemmas = []
        for token, pos in zip(tokens, pos_tags):
            if token.kind in (TokenKind.WHITESPACE, TokenKind.PUNCTUATION):
                lemmas.append(token.text)
            elif table is None:
                lemmas.append(token.text.lower())
            else:
                lemmas.append(self._lemmatize_with(table, token.text, pos))
        return lemmas
