from wordwise.models.suggestion import Span
from wordwise.services.offsets import Edit, apply_edit, diff_edit, is_valid, shift, splice


def test_is_valid():
    text = "teh cat sat"
    assert is_valid(text, Span(start=0, end=3), "teh")
    assert not is_valid(text, Span(start=0, end=3), "the")
    assert not is_valid(text, Span(start=3, end=3), "")
    assert not is_valid(text, Span(start=8, end=12), "sat")
    assert not is_valid(text, Span(start=-1, end=2), "te")
    assert not is_valid(text, None, "teh")


def test_shift_before_after_and_overlap():
    span = Span(start=7, end=11)
    # entirely before the span: moves by the length delta
    assert shift(span, 2, 6, 2) == Span(start=5, end=9)
    # entirely after the span: untouched
    assert shift(Span(start=0, end=2), 4, 6, 10) == Span(start=0, end=2)
    # touching at the left edge counts as after
    assert shift(span, 3, 7, 0) == Span(start=3, end=7)
    # overlap and insertion inside the span invalidate it
    assert shift(span, 6, 8, 1) is None
    assert shift(span, 9, 9, 3) is None


def test_shift_rejects_bad_edit():
    span = Span(start=0, end=2)
    assert shift(span, -1, 0, 0) is None
    assert shift(span, 5, 4, 0) is None
    assert shift(span, 4, 5, -1) is None


def test_insertion_at_span_start_moves_it():
    assert apply_edit(Span(start=4, end=7), Edit(4, 4, 2)) == Span(start=6, end=9)


def test_diff_edit_common_prefix_suffix():
    assert diff_edit("same", "same") is None
    edit = diff_edit("I goed home", "I went home")
    assert edit == Edit(2, 6, 4)
    assert edit.delta == 0
    assert diff_edit("abc", "abXc") == Edit(2, 2, 1)
    assert diff_edit("aaa", "aa") == Edit(2, 3, 0)


def test_diff_edit_reproduces_new_text():
    old, new = "The cat sat on teh mat.", "The dog sat on the mat!"
    e = diff_edit(old, new)
    assert old[:e.start] + new[e.start:e.start + e.inserted_length] + old[e.end:] == new


def test_splice():
    assert splice("teh cat", Span(start=0, end=3), "the") == "the cat"
    assert splice("ab", Span(start=1, end=2), "") == "a"
