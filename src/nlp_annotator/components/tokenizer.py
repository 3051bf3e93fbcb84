"""
Компонент для токенизации текста.

Разбивает текст на токены слов, чисел, пунктуации, пробелов и прочих
символов со смещениями в исходном тексте. Объединение всех токенов по
порядку восстанавливает исходный текст без изменений, поэтому Unicode-
нормализация здесь не выполняется.

Работа идёт по графемным кластерам: комбинируемые знаки, селекторы
вариантов, модификаторы эмодзи, последовательности с ZWJ и пары
региональных индикаторов никогда не разрезаются.
"""

import re
import unicodedata
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..config import config
from ..exceptions import EmptyInputError
from ..interfaces.text_annotator import (
    SENTENCE_TERMINALS,
    Token,
    TokenKind,
    TokenizerInterface,
)

ZWJ = '\u200d'
HYPHENS = frozenset('-\u2010\u2011')
APOSTROPHES = frozenset("'\u2019")
NUMBER_SEPARATORS = frozenset('.,')
CONTRACTION_POLICIES = ('keep', 'split')

_NEGATION_CLITIC_RE = re.compile(r"^(.+?)(n['’]t)$", re.IGNORECASE)


def _is_extend(char: str) -> bool:
    """Символ продолжает графемный кластер."""
    code = ord(char)
    if unicodedata.category(char) in ('Mn', 'Me', 'Mc'):
        return True
    if 0xFE00 <= code <= 0xFE0F:          # селекторы вариантов
        return True
    if 0x1F3FB <= code <= 0x1F3FF:        # модификаторы цвета кожи
        return True
    if 0xE0020 <= code <= 0xE007F:        # теговые символы флагов
        return True
    return False


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def grapheme_clusters(text: str) -> List[Tuple[int, int]]:
    """
    Делит текст на графемные кластеры.

    Args:
        text: Исходный текст

    Returns:
        Список полуинтервалов (start, end)
    """
    clusters: List[Tuple[int, int]] = []
    n = len(text)
    i = 0
    while i < n:
        start = i
        char = text[i]
        i += 1
        if char == '\r' and i < n and text[i] == '\n':
            clusters.append((start, i + 1))
            i += 1
            continue
        if _is_regional_indicator(char) and i < n and _is_regional_indicator(text[i]):
            i += 1
        while i < n:
            nxt = text[i]
            if _is_extend(nxt):
                i += 1
            elif nxt == ZWJ:
                i += 1
                if i < n and not text[i].isspace():
                    i += 1
            else:
                break
        clusters.append((start, i))
    return clusters


def split_sentences(tokens: Sequence[Token]) -> List[Tuple[int, int]]:
    """
    Границы предложений по токенам '.', '!', '?'.

    Серия завершающих знаков ('?!') закрывает предложение один раз.
    Пробелы после границы относятся к следующему предложению.

    Returns:
        Список полуинтервалов индексов токенов
    """
    sentences: List[Tuple[int, int]] = []
    start = 0
    n = len(tokens)
    for i, token in enumerate(tokens):
        if token.kind != TokenKind.PUNCTUATION or token.text not in SENTENCE_TERMINALS:
            continue
        j = i + 1
        while j < n and tokens[j].kind == TokenKind.WHITESPACE:
            j += 1
        if j < n and tokens[j].kind == TokenKind.PUNCTUATION and tokens[j].text in SENTENCE_TERMINALS:
            continue
        sentences.append((start, i + 1))
        start = i + 1
    if start < n:
        sentences.append((start, n))
    return sentences


def sentence_ids(tokens: Sequence[Token]) -> List[int]:
    """Номер предложения для каждого токена."""
    ids = [0] * len(tokens)
    for number, (start, end) in enumerate(split_sentences(tokens)):
        for i in range(start, end):
            ids[i] = number
    return ids


class Tokenizer(TokenizerInterface):
    """Токенизатор с сохранением смещений."""

    def __init__(self, contractions: Optional[str] = None,
                 extra_punctuation: Optional[str] = None,
                 abbreviations: Optional[Iterable[str]] = None):
        """
        Инициализирует токенизатор.

        Args:
            contractions: Политика для сокращений: 'keep' (they're — один токен)
                или 'split' (they + 're, ca + n't). По умолчанию из config
            extra_punctuation: Символы, считающиеся пунктуацией помимо Unicode P*
            abbreviations: Слова, точка после которых входит в токен (Mr., Inc.)
        """
        policy = (contractions or config.get_contraction_policy()).lower()
        if policy not in CONTRACTION_POLICIES:
            raise ValueError(f"Неизвестная политика сокращений: {policy}")
        self.contractions = policy
        if extra_punctuation is None:
            extra_punctuation = config.get_extra_punctuation()
        self.extra_punctuation = frozenset(extra_punctuation)
        if abbreviations is None:
            abbreviations = config.get_abbreviations()
        self.abbreviations = frozenset(a.lower().rstrip('.') for a in abbreviations)

    def _cluster_class(self, base: str) -> str:
        if base.isspace():
            return 'space'
        if base in self.extra_punctuation:
            return 'punct'
        category = unicodedata.category(base)
        if category == 'Nd':
            return 'digit'
        if category[0] == 'L':
            return 'letter'
        if category[0] == 'P':
            return 'punct'
        return 'other'

    def iter_tokens(self, text: str) -> Iterator[Token]:
        """
        Лениво выдаёт токены текста.

        Генератор конечен; повторный вызов начинает разбор заново.

        Args:
            text: Исходный текст

        Yields:
            Token в порядке следования
        """
        if not text:
            return
        clusters = grapheme_clusters(text)
        classes = [self._cluster_class(text[start]) for start, _ in clusters]
        n = len(clusters)
        i = 0
        while i < n:
            cls = classes[i]
            start = clusters[i][0]

            if cls == 'space':
                j = i + 1
                while j < n and classes[j] == 'space':
                    j += 1
                yield Token(start, clusters[j - 1][1], text[start:clusters[j - 1][1]], TokenKind.WHITESPACE)
                i = j
                continue

            if cls == 'letter':
                j = self._scan_acronym(clusters, classes, i, text)
                if j is not None:
                    end = clusters[j - 1][1]
                    yield Token(start, end, text[start:end], TokenKind.WORD)
                    i = j
                    continue

            if cls in ('letter', 'digit'):
                j = self._scan_alnum(clusters, classes, i, text)
                end = clusters[j - 1][1]
                has_letter = any(classes[k] == 'letter' for k in range(i, j))
                if has_letter and j < n and text[clusters[j][0]:clusters[j][1]] == '.' \
                        and text[start:end].lower() in self.abbreviations:
                    end = clusters[j][1]
                    j += 1
                kind = TokenKind.WORD if has_letter else TokenKind.NUMBER
                if kind == TokenKind.WORD and self.contractions == 'split':
                    yield from self._split_contraction(text, start, end)
                else:
                    yield Token(start, end, text[start:end], kind)
                i = j
                continue

            end = clusters[i][1]
            kind = TokenKind.PUNCTUATION if cls == 'punct' else TokenKind.OTHER
            yield Token(start, end, text[start:end], kind)
            i += 1

    @staticmethod
    def _scan_acronym(clusters: List[Tuple[int, int]], classes: List[str], i: int,
                      text: str) -> Optional[int]:
        """
        Аббревиатура из пар 'буква + точка' (U.S., e.g.), не меньше двух пар.

        Точка с диакритикой уже не точка, поэтому кластеры не разрезаются.

        Returns:
            Индекс кластера после аббревиатуры или None
        """
        n = len(clusters)
        j = i
        pairs = 0
        while j + 1 < n and classes[j] == 'letter' \
                and text[clusters[j + 1][0]:clusters[j + 1][1]] == '.':
            j += 2
            pairs += 1
        if pairs < 2 or (j < n and classes[j] in ('letter', 'digit')):
            return None
        return j

    def _scan_alnum(self, clusters: List[Tuple[int, int]], classes: List[str], i: int, text: str) -> int:
        """Находит конец слова/числа с учётом дефисов, апострофов и разделителей чисел."""
        n = len(clusters)
        j = i + 1
        while j < n:
            cls = classes[j]
            if cls in ('letter', 'digit'):
                j += 1
                continue
            if j + 1 >= n:
                break
            char = text[clusters[j][0]:clusters[j][1]]
            next_char = text[clusters[j + 1][0]:clusters[j + 1][1]]
            prev_cls, next_cls = classes[j - 1], classes[j + 1]
            after_next = classes[j + 2] if j + 2 < n else None
            if char in HYPHENS and next_cls in ('letter', 'digit'):
                j += 2
            elif char in HYPHENS and next_char in APOSTROPHES and after_next == 'letter':
                # rock-'n'-roll
                j += 3
            elif char in APOSTROPHES and prev_cls == 'letter' and next_cls == 'letter':
                j += 2
            elif char in APOSTROPHES and prev_cls == 'letter' and next_char in HYPHENS \
                    and after_next in ('letter', 'digit'):
                j += 1
            elif char in NUMBER_SEPARATORS and prev_cls == 'digit' and next_cls == 'digit':
                j += 2
            else:
                break
        return j

    def _split_contraction(self, text: str, start: int, end: int) -> Iterator[Token]:
        """Политика 'split': they're -> they + 're, can't -> ca + n't."""
        surface = text[start:end]
        match = _NEGATION_CLITIC_RE.match(surface)
        if match:
            cut = start + len(match.group(1))
        else:
            positions = [k for k, ch in enumerate(surface) if ch in APOSTROPHES]
            # Апостроф сразу после дефиса принадлежит составному слову
            if not positions or positions[0] == 0 or surface[positions[0] - 1] in HYPHENS:
                yield Token(start, end, surface, TokenKind.WORD)
                return
            cut = start + positions[0]
        yield Token(start, cut, text[start:cut], TokenKind.WORD)
        yield Token(cut, end, text[cut:end], TokenKind.WORD)

    def tokenize(self, text: str, require_non_empty: bool = False) -> List[Token]:
        """
        Разбивает текст на токены.

        Args:
            text: Исходный текст
            require_non_empty: Требовать хотя бы один токен

        Returns:
            Список токенов (пустой для пустого текста)

        Raises:
            EmptyInputError: текст нулевой длины при require_non_empty=True
        """
        if text is None:
            text = ""
        if not text and require_non_empty:
            raise EmptyInputError("Пустой документ: требуется хотя бы один токен")
        return list(self.iter_tokens(text))

    def get_token_statistics(self, tokens: Sequence[Token]) -> Dict[str, object]:
        """
        Возвращает статистику по токенам.

        Args:
            tokens: Список токенов

        Returns:
            Словарь со статистикой
        """
        by_kind: Dict[str, int] = {kind.value: 0 for kind in TokenKind}
        word_lengths = []
        for token in tokens:
            by_kind[token.kind.value] += 1
            if token.kind == TokenKind.WORD:
                word_lengths.append(len(token.text))
        return {
            'total_tokens': len(tokens),
            'by_kind': by_kind,
            'avg_word_length': round(sum(word_lengths) / len(word_lengths), 1) if word_lengths else 0.0,
        }
