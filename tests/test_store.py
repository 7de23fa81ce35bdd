import random

from wordwise.models.events import SuggestionAccepted, SuggestionDismissed
from wordwise.services.offsets import is_valid, splice
from wordwise.services.store import SuggestionStore


def _assert_invariants(store: SuggestionStore):
    live = store.suggestions
    for i, a in enumerate(live):
        assert is_valid(store.text, a.span, a.original_text)
        for b in live[i + 1:]:
            assert not (a.start < b.end and b.start < a.end)


def test_accept_round_trip(make_suggestion):
    text = "I goed home"
    s = make_suggestion(text, 2, 6, "went")
    store = SuggestionStore("d", text)
    store.replace_suggestions([s])
    res = store.accept_suggestion(s.id)
    assert res.outcome == "accepted"
    assert res.text == text[:2] + "went" + text[6:]
    assert store.text == "I went home"
    assert store.suggestions == []


def test_accept_shifts_later_suggestion(make_suggestion):
    text = "I gone home"
    gone = make_suggestion(text, 2, 6, "go")
    home = make_suggestion(text, 7, 11, "house")
    store = SuggestionStore("d", text)
    store.replace_suggestions([gone, home])

    assert store.accept_suggestion(gone.id).outcome == "accepted"
    assert store.text == "I go home"
    [moved] = store.suggestions
    assert moved.id == home.id
    assert (moved.start, moved.end) == (5, 9)
    assert store.text[moved.start:moved.end] == "home"


def test_accept_not_found_leaves_state_alone(make_suggestion):
    text = "teh cat"
    s = make_suggestion(text, 0, 3, "the")
    store = SuggestionStore("d", text)
    store.replace_suggestions([s])
    res = store.accept_suggestion("nope")
    assert res.outcome == "not_found"
    assert store.text == text
    assert store.suggestions == [s]


def test_stale_accept_clears_live_set(make_suggestion):
    text = "teh cat sat"
    s = make_suggestion(text, 0, 3, "the")
    other = make_suggestion(text, 8, 11, "stood")
    store = SuggestionStore("d", text)
    store.replace_suggestions([s, other])
    # external edit that bypasses edit_text
    store._text = "THE cat sat"

    res = store.accept_suggestion(s.id)
    assert res.outcome == "stale"
    assert store.text == "THE cat sat"
    assert store.suggestions == []


def test_accept_all_matches_descending_individual_accepts(make_suggestion):
    text = "teh cat goed to teh beach"
    items = [
        make_suggestion(text, 0, 3, "the"),
        make_suggestion(text, 8, 12, "went"),
        make_suggestion(text, 16, 19, "the"),
        make_suggestion(text, 20, 25, "seaside", category="vocabulary", severity="suggestion"),
    ]
    expected = text
    for s in sorted(items, key=lambda s: s.start, reverse=True):
        expected = splice(expected, s.span, s.replacement_text)

    store = SuggestionStore("d", text)
    store.replace_suggestions(items)
    res = store.accept_all()
    assert res.text == expected == "the cat went to the seaside"
    assert sorted(res.applied) == sorted(s.id for s in items)
    assert res.skipped == []
    assert store.suggestions == []


def test_edit_text_reanchors_and_drops(make_suggestion):
    text = "teh cat sat on teh mat"
    first = make_suggestion(text, 0, 3, "the")
    middle = make_suggestion(text, 4, 7, "dog")
    last = make_suggestion(text, 15, 18, "the")
    store = SuggestionStore("d", text)
    store.replace_suggestions([first, middle, last])

    edit = store.edit_text("teh kitten sat on teh mat")
    assert edit is not None
    ids = [s.id for s in store.suggestions]
    assert ids == [first.id, last.id]
    assert store.suggestions[1].start == 18
    _assert_invariants(store)


def test_edit_text_noop_returns_none(make_suggestion):
    store = SuggestionStore("d", "same")
    assert store.edit_text("same") is None


def test_replace_suggestions_filters_invalid_and_overlaps(make_suggestion):
    text = "teh cat sat"
    good = make_suggestion(text, 0, 3, "the")
    loser = make_suggestion(text, 0, 7, "the feline", category="vocabulary", rank=1)
    bad = make_suggestion("xxxxxxxxxxx", 4, 7, "dog")
    store = SuggestionStore("d", text)
    live = store.replace_suggestions([loser, bad, good])
    assert live == [good]


def test_dismiss(make_suggestion):
    text = "teh cat"
    s = make_suggestion(text, 0, 3, "the")
    seen = []
    store = SuggestionStore("d", text, listeners=[seen.append])
    store.replace_suggestions([s])

    res = store.dismiss_suggestion(s.id)
    assert res.outcome == "dismissed"
    assert store.text == text
    assert store.suggestions == []
    assert isinstance(seen[0], SuggestionDismissed)
    assert store.dismiss_suggestion(s.id).outcome == "not_found"


def test_accept_emits_event_and_survives_listener_errors(make_suggestion):
    text = "teh cat"
    s = make_suggestion(text, 0, 3, "the", explanation="Typo | Faute")
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    store = SuggestionStore("d", text, listeners=[broken, seen.append])
    store.replace_suggestions([s])
    assert store.accept_suggestion(s.id).outcome == "accepted"
    [event] = seen
    assert isinstance(event, SuggestionAccepted)
    assert event.original_text == "teh"
    assert event.replacement_text == "the"
    assert event.explanation.secondary == "Faute"


def test_snapshot_state_public_shape(make_suggestion):
    text = "teh cat"
    store = SuggestionStore("doc-1", text)
    store.replace_suggestions([make_suggestion(text, 0, 3, "the", explanation="Typo | Faute")])
    state = store.snapshot_state().public()
    assert state["document_id"] == "doc-1"
    assert state["text"] == text
    assert state["suggestions"][0]["explanation"] == "Typo | Faute"


def test_invariants_hold_over_random_operations(make_suggestion):
    rng = random.Random(7)
    words = ["teh", "cat", "goed", "home", "a", "hour", "very", "good"]
    text = " ".join(rng.choice(words) for _ in range(30))
    store = SuggestionStore("d", text)

    for _ in range(200):
        op = rng.random()
        cur = store.text
        if op < 0.35:
            cands = []
            for _ in range(rng.randint(1, 6)):
                if len(cur) < 2:
                    break
                start = rng.randrange(0, len(cur) - 1)
                end = rng.randint(start + 1, min(len(cur), start + 8))
                cands.append(make_suggestion(cur, start, end, "x" * rng.randint(0, 5), rank=rng.randint(0, 1)))
            store.replace_suggestions(cands)
        elif op < 0.6 and cur:
            pos = rng.randrange(0, len(cur))
            cut = rng.randint(0, 3)
            store.edit_text(cur[:pos] + "zz"[: rng.randint(0, 2)] + cur[pos + cut:])
        elif op < 0.8 and store.suggestions:
            store.accept_suggestion(rng.choice(store.suggestions).id)
        elif store.suggestions:
            store.dismiss_suggestion(rng.choice(store.suggestions).id)
        _assert_invariants(store)
