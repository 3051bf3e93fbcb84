"""
Тесты для компонента NERTagger.
"""

import pytest

from nlp_annotator.components.ner_tagger import SOURCE_GAZETTEER, SOURCE_RULE, NERTagger
from nlp_annotator.components.tokenizer import sentence_ids
from nlp_annotator.interfaces.text_annotator import UNKNOWN_LANGUAGE, EntityKind, EntitySpan
from nlp_annotator.models.gazetteer import Gazetteer, collapse_whitespace


def entities(pipeline, text, language="en"):
    result = pipeline.annotate(text, language)
    return [(result.entity_text(e), e.kind) for e in result.entities], result


class TestNERTagger:
    """Тесты для NERTagger."""

    def test_gazetteer_entities(self, pipeline):
        """Steve Jobs founded Apple Inc. -> персона и организация."""
        found, result = entities(pipeline, "Steve Jobs founded Apple Inc.")
        assert found == [
            ("Steve Jobs", EntityKind.PERSON),
            ("Apple Inc.", EntityKind.ORGANIZATION),
        ]
        assert all(e.source == SOURCE_GAZETTEER for e in result.entities)
        assert all(e.confidence == pytest.approx(0.95) for e in result.entities)

    def test_title_and_preposition_rules(self, pipeline):
        """Титул перед именем и предлог места перед названием."""
        found, result = entities(pipeline, "Mr. Smith lives in Springfield.")
        assert found == [
            ("Smith", EntityKind.PERSON),
            ("Springfield", EntityKind.PLACE),
        ]
        assert all(e.source == SOURCE_RULE for e in result.entities)
        assert all(e.confidence == pytest.approx(0.6) for e in result.entities)

    def test_organization_suffix_rule(self, pipeline):
        """Суффикс организации входит в сущность."""
        found, _ = entities(pipeline, "She works for Globex Corp.")
        assert found == [("Globex Corp.", EntityKind.ORGANIZATION)]

    def test_longest_gazetteer_match(self, pipeline):
        """'Apple Inc.' выигрывает у 'Apple'."""
        found, _ = entities(pipeline, "They visited Apple Inc. today.")
        assert ("Apple Inc.", EntityKind.ORGANIZATION) in found
        assert ("Apple", EntityKind.ORGANIZATION) not in found

    def test_multiple_sentences(self, pipeline, sample_texts):
        found, result = entities(pipeline, sample_texts["entities"])
        expected = {
            ("Steve Jobs", EntityKind.PERSON),
            ("Apple Inc.", EntityKind.ORGANIZATION),
            ("California", EntityKind.PLACE),
            ("Tim Cook", EntityKind.PERSON),
            ("Brown", EntityKind.PERSON),
            ("London", EntityKind.PLACE),
            ("Paris", EntityKind.PLACE),
        }
        assert expected <= set(found)

        # Сущности не пересекаются, идут по порядку и не выходят за предложение
        spans = result.entities
        for left, right in zip(spans, spans[1:]):
            assert left.end <= right.start
        ids = sentence_ids([t.token for t in result.tokens])
        for span in spans:
            assert ids[span.start] == ids[span.end - 1]

    def test_entity_text_matches_document(self, pipeline):
        _, result = entities(pipeline, "Bill   Gates met Tim Cook.")
        for span in result.entities:
            assert span.text == result.entity_text(span)
        assert ("Bill   Gates", EntityKind.PERSON) in [
            (result.entity_text(e), e.kind) for e in result.entities
        ]

    def test_spanish_entities(self, pipeline):
        found, _ = entities(pipeline, "Pedro Almodóvar vive en Madrid.", language="es")
        assert found == [
            ("Pedro Almodóvar", EntityKind.PERSON),
            ("Madrid", EntityKind.PLACE),
        ]

    def test_unknown_language_uses_all_gazetteers(self, bundle, pipeline):
        """Имена ищутся по газеттирам всех загруженных языков."""
        tagged = pipeline.annotate("Steve Jobs", "en").tokens
        spans = NERTagger(bundle).recognize(tagged, UNKNOWN_LANGUAGE)
        assert [(s.start, s.end, s.kind) for s in spans] == [(0, 3, EntityKind.PERSON)]

    def test_no_entities(self, pipeline):
        found, _ = entities(pipeline, "the cats are running.")
        assert found == []

    def test_empty_input(self, bundle):
        assert NERTagger(bundle).recognize([], "en") == []

    def test_without_bundle(self, pipeline):
        tagged = pipeline.annotate("Steve Jobs", "en").tokens
        assert NERTagger().recognize(tagged, "en") == []

    def test_gazetteers_order(self, bundle):
        tagger = NERTagger(bundle)
        order = [g.language for g in tagger.gazetteers_for("fr")]
        assert order[0] == "fr"
        assert sorted(order) == sorted(bundle.languages)


class TestResolve:
    """Тесты разрешения пересечений."""

    @staticmethod
    def span(start, end, source, kind=EntityKind.PERSON):
        return EntitySpan(start=start, end=end, kind=kind, confidence=0.5, source=source)

    def test_gazetteer_beats_rule(self):
        gazetteer = self.span(0, 2, SOURCE_GAZETTEER)
        rule = self.span(1, 4, SOURCE_RULE)
        assert NERTagger.resolve([rule, gazetteer]) == [gazetteer]

    def test_longer_beats_shorter(self):
        short = self.span(0, 1, SOURCE_RULE)
        long = self.span(0, 3, SOURCE_RULE)
        assert NERTagger.resolve([short, long]) == [long]

    def test_left_beats_right(self):
        left = self.span(0, 2, SOURCE_RULE)
        right = self.span(1, 3, SOURCE_RULE)
        assert NERTagger.resolve([right, left]) == [left]

    def test_disjoint_sorted(self):
        first = self.span(0, 1, SOURCE_RULE)
        second = self.span(2, 3, SOURCE_GAZETTEER)
        assert NERTagger.resolve([second, first]) == [first, second]


class TestGazetteer:
    """Тесты газеттира."""

    def test_from_dict(self):
        gazetteer = Gazetteer.from_dict("xx", {
            "person": ["Ada  Lovelace"],
            "place": ["Ada  Lovelace", "Paris"],
            "triggers": {"person_titles": "Dr. Mr.", "place_prepositions": "in"},
        })
        assert len(gazetteer) == 2
        # Первый раздел в порядке person, place, organization
        assert gazetteer.lookup("Ada Lovelace") == EntityKind.PERSON
        assert gazetteer.lookup("Ada \n Lovelace") == EntityKind.PERSON
        assert gazetteer.lookup("paris") is None
        assert gazetteer.is_person_title("DR.")
        assert gazetteer.is_person_title("Mr")
        assert gazetteer.is_place_preposition("In")
        assert not gazetteer.is_organization_suffix("Inc.")
        assert gazetteer.max_chars == len("Ada Lovelace")

    def test_unknown_section(self):
        with pytest.raises(ValueError):
            Gazetteer.from_dict("xx", {"animals": ["Cat"]})

    @pytest.mark.parametrize("data", [
        {"person": "Steve Jobs"},
        {"place": {"Paris": 1}},
        {"triggers": ["Mr"]},
    ])
    def test_section_of_wrong_type(self, data):
        with pytest.raises(ValueError):
            Gazetteer.from_dict("xx", data)

    def test_collapse_whitespace(self):
        assert collapse_whitespace(" Apple \t Inc. ") == "Apple Inc."
