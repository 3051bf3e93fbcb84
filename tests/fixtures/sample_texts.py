"""Наборы текстов для тестирования.

По одному связному тексту на каждый поддерживаемый язык, тексты на
неподдерживаемых языках и текст с именованными сущностями.
"""

SAMPLE_ENGLISH_TEXT = """
The children were playing in the garden while their parents talked under the
trees. Every morning the old fisherman walks with his dog along the river.
""".strip()


SAMPLE_SPANISH_TEXT = """
Los niños están jugando en el parque mientras sus padres conversan a la sombra
de los árboles. Cada mañana el viejo pescador camina con su perro por la orilla.
""".strip()


SAMPLE_FRENCH_TEXT = """
Les enfants jouent dans le jardin pendant que leurs parents discutent à l'ombre
des arbres. Chaque matin, le vieux pêcheur se promène avec son chien.
""".strip()


SAMPLE_GERMAN_TEXT = """
Die Kinder spielen im Garten, während ihre Eltern sich unter den Bäumen
unterhalten. Jeden Morgen geht der alte Fischer mit seinem Hund spazieren.
""".strip()


SAMPLE_RUSSIAN_TEXT = """
Дети играют в саду, пока родители беседуют в тени деревьев.
""".strip()


SAMPLE_ENTITIES_TEXT = """
Steve Jobs founded Apple Inc. in California. Later Tim Cook became the head of
the company, and Mr. Brown moved from London to Paris.
""".strip()


# Языки на латинице без загруженных моделей
SAMPLE_UNSUPPORTED_LATIN_TEXTS = {
    "it": (
        "Questo è un testo scritto in lingua italiana, che non è supportata "
        "dal sistema di annotazione. Gli studenti leggono molti libri nella "
        "biblioteca della città."
    ),
    "pt": (
        "Este é um texto escrito em português, que não é suportado pelo "
        "sistema. Os alunos leem muitos livros na biblioteca da cidade e depois "
        "voltam para casa."
    ),
    "nl": (
        "Dit is een tekst in het Nederlands, die niet door het systeem wordt "
        "ondersteund. De kinderen lezen veel boeken in de bibliotheek van de stad."
    ),
}
