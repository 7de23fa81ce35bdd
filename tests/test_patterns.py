import pytest

from wordwise.models.events import SuggestionAccepted, SuggestionDismissed
from wordwise.models.suggestion import Explanation
from wordwise.services.patterns import ErrorPatternAggregator, categorize
from wordwise.utils.storage import PatternRepository


def _accepted(original, replacement, category="grammar", explanation=""):
    return SuggestionAccepted(
        suggestion_id="s1",
        category=category,
        original_text=original,
        replacement_text=replacement,
        explanation=Explanation.parse(explanation),
    )


@pytest.mark.parametrize("original,replacement,category,explanation,expected", [
    ("goed", "went", "grammar", 'Past tense of "go" is "went"', ("Verb Tenses", "Past Tense")),
    ("teh", "the", "spelling", "Spelling error", ("Spelling", "Common Misspellings")),
    ("realy", "really", "spelling", "Spelling error", ("Spelling", "Double Letters")),
    ("their", "there", "spelling", "", ("Spelling", "Homophones")),
    ("a hour", "an hour", "grammar", 'Use "an" before vowel sounds', ("Articles", "Wrong Article")),
    ("in the beach", "to the beach", "grammar", 'Use "to" for destinations', ("Prepositions", "Direction Prepositions")),
    ("there is many", "there are many", "grammar", "Subject-verb agreement error",
     ("Subject-Verb Agreement", "Singular/Plural Mismatch")),
    ("go to school", "go to the school", "grammar", "", ("Articles", "Missing Article")),
    ("cat", "cats", "grammar", "", ("Plurals", "Regular Plurals")),
    ("to fast", "too fast", "grammar", 'Use "too" for "excessively"', ("Spelling", "Homophones")),
    ("your welcome", "you're welcome", "spelling", "Contraction: you are welcome", ("Spelling", "Homophones")),
])
def test_categorize(original, replacement, category, explanation, expected):
    assert categorize(_accepted(original, replacement, category, explanation)) == expected


def test_vocabulary_is_not_categorized():
    assert categorize(_accepted("very good", "excellent", "vocabulary", "Use more precise vocabulary")) is None


def test_recording_is_isolated_to_one_pattern():
    agg = ErrorPatternAggregator()
    agg.record_opportunities("Articles", "Wrong Article", 10)
    agg.record_fixed("Articles", "Wrong Article", "a hour", "an hour")
    before = {p.key: p.accuracy for p in agg.patterns}

    agg.record_fixed("Spelling", "Common Misspellings", "teh", "the")
    after = {p.key: p.accuracy for p in agg.patterns}
    changed = {k for k in before if before[k] != after[k]}
    assert changed <= {"Spelling_Common Misspellings"}
    assert after["Articles_Wrong Article"] == before["Articles_Wrong Article"]


def test_accuracy_bounded():
    agg = ErrorPatternAggregator()
    for _ in range(50):
        agg.record_fixed("Spelling", "Common Misspellings", "teh", "the")
    p = agg.pattern("Spelling", "Common Misspellings")
    assert p.count == 50
    assert 0.0 <= p.accuracy <= 100.0
    for p in agg.patterns:
        assert 0.0 <= p.accuracy <= 100.0


def test_examples_and_recent_errors_bounded():
    agg = ErrorPatternAggregator()
    for i in range(12):
        agg.record_fixed("Spelling", "Common Misspellings", f"w{i}", f"word{i}")
    agg.record_fixed("Spelling", "Common Misspellings", "w0", "word0")
    p = agg.pattern("Spelling", "Common Misspellings")
    assert p.examples == ["w0", "w1", "w2", "w3", "w4"]
    assert len(p.recent_errors) == 10
    assert p.recent_errors[0].text == "w0"
    assert p.fixed_count == 13


def test_unknown_pattern_is_rejected():
    agg = ErrorPatternAggregator()
    assert agg.record_fixed("Nope", "Nothing", "a", "b") is False
    assert agg.record_opportunities("Articles", "Wrong Article", 0) is False


def test_handle_event_counts_accepts_only():
    agg = ErrorPatternAggregator()
    agg.handle_event(SuggestionDismissed(suggestion_id="x", category="spelling", original_text="teh"))
    assert agg.snapshot().total_errors == 0
    agg.handle_event(_accepted("teh", "the", "spelling"))
    assert agg.pattern("Spelling", "Common Misspellings").count == 1


def test_snapshot_empty():
    report = ErrorPatternAggregator().snapshot()
    assert report.patterns == []
    assert report.categories == []
    assert report.overall_accuracy == 100.0
    assert report.most_problematic_area == "None"
    assert report.strongest_area == "None"


def test_snapshot_breakdown_and_ties():
    agg = ErrorPatternAggregator()
    agg.record_opportunities("Spelling", "Common Misspellings", 9)
    agg.record_fixed("Spelling", "Common Misspellings", "teh", "the")       # 1 / 10
    agg.record_opportunities("Articles", "Wrong Article", 3)
    agg.record_fixed("Articles", "Wrong Article", "a hour", "an hour")       # 1 / 4
    agg.record_opportunities("Plurals", "Regular Plurals", 5)                 # 0 / 5
    agg.record_opportunities("Prepositions", "Time Prepositions", 2)          # 0 / 2

    report = agg.snapshot()
    cats = {c.category: c.accuracy for c in report.categories}
    assert cats == {"Spelling": 90.0, "Articles": 75.0, "Plurals": 100.0, "Prepositions": 100.0}
    assert report.total_errors == 2
    assert report.overall_accuracy == round(100 * (1 - 2 / 21), 2)
    assert report.most_problematic_area == "Articles"
    # Prepositions and Plurals tie at 100; Prepositions is declared first
    assert report.strongest_area == "Prepositions"
    assert {p.key for p in report.patterns} == {
        "Spelling_Common Misspellings", "Articles_Wrong Article",
        "Plurals_Regular Plurals", "Prepositions_Time Prepositions",
    }


def test_reset():
    agg = ErrorPatternAggregator()
    agg.record_fixed("Spelling", "Common Misspellings", "teh", "the")
    agg.reset()
    assert agg.snapshot().total_errors == 0
    assert len(agg.patterns) == 27


def test_persistence_round_trip(tmp_path):
    repo = PatternRepository(str(tmp_path / "patterns.json"))
    agg = ErrorPatternAggregator()
    agg.record_fixed("Verb Tenses", "Past Tense", "goed", "went")
    repo.save(agg.to_records())

    restored = ErrorPatternAggregator(repo.load())
    p = restored.pattern("Verb Tenses", "Past Tense")
    assert p.count == 1
    assert p.examples == ["goed"]
    assert p.recent_errors[0].correction == "went"


def test_load_tolerates_garbage(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text("{not json", encoding="utf-8")
    assert PatternRepository(str(path)).load() == []

    agg = ErrorPatternAggregator([
        {"category": "Spelling"},
        {"category": "Made Up", "subcategory": "Thing", "count": 3},
        {"category": "Spelling", "subcategory": "Homophones", "count": 2, "total_opportunities": 4},
    ])
    assert agg.pattern("Spelling", "Homophones").accuracy == 50.0
    assert agg.pattern("Made Up", "Thing") is None
