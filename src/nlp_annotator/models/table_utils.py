"""
Общие помощники для чтения таблиц моделей из YAML.
"""

from typing import Any, Dict, List, Mapping


def split_words(value: Any) -> List[str]:
    """
    Список слов из строки через пробел или из списка YAML.

    Строки удобнее списков: YAML 1.1 превращает голые yes/no/on/off
    в булевы значения.

    Raises:
        ValueError: значение не строка и не список
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise ValueError(f"Ожидалась строка или список слов, получено: {type(value).__name__}")


def invert_lexicon(lexicon: Mapping[str, Any]) -> Dict[str, List[str]]:
    """{тег: 'слово слово'} -> {слово: [теги]} с сохранением порядка тегов."""
    words: Dict[str, List[str]] = {}
    for tag, value in (lexicon or {}).items():
        for word in split_words(value):
            tags = words.setdefault(word, [])
            if tag not in tags:
                tags.append(tag)
    return words
