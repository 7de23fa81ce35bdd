from wordwise.models.suggestion import RawSuggestion
from wordwise.services.normalize import normalize
from wordwise.services.resolve import resolve_overlaps


def test_rank_zero_wins_same_position(make_suggestion):
    text = "teh cat"
    low = make_suggestion(text, 0, 3, "the", rank=0)
    high = make_suggestion(text, 0, 3, "tea", category="vocabulary", rank=1)
    assert resolve_overlaps([high, low]) == [low]


def test_teh_cat_sat_scenario():
    text = "teh cat sat"
    a = normalize("spelling", 0, [RawSuggestion(
        category="spelling", original_text="teh", replacement_text="the",
        reported_start=0, reported_end=3)], text)
    b = normalize("vocabulary", 1, [RawSuggestion(
        category="vocabulary", original_text="teh cat", replacement_text="the feline",
        reported_start=0, reported_end=7)], text)
    out = resolve_overlaps(a.suggestions + b.suggestions)
    assert len(out) == 1
    assert out[0].original_text == "teh"
    assert out[0].replacement_text == "the"


def test_same_rank_earlier_start_wins_and_output_sorted(make_suggestion):
    text = "abcdefghij"
    late = make_suggestion(text, 6, 9, "x")
    mid = make_suggestion(text, 2, 7, "y")
    early = make_suggestion(text, 0, 2, "z")
    out = resolve_overlaps([late, mid, early])
    assert out == [early, mid]


def test_first_of_identical_spans_wins(make_suggestion):
    text = "teh"
    first = make_suggestion(text, 0, 3, "the")
    second = make_suggestion(text, 0, 3, "tea")
    assert resolve_overlaps([first, second]) == [first]


def test_adjacent_spans_do_not_overlap(make_suggestion):
    text = "abcdef"
    a = make_suggestion(text, 0, 3, "x")
    b = make_suggestion(text, 3, 6, "y", rank=1)
    assert resolve_overlaps([b, a]) == [a, b]
