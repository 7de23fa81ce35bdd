import asyncio

import pytest

from wordwise.models.suggestion import Span
from wordwise.services.goals import EMPTY_ASSESSMENT, goal_feedback
from wordwise.services.originality import check_originality
from wordwise.services.session import AnalysisSession
from wordwise.services.vocabulary import analyze_vocabulary


def test_vocabulary_flags_plain_words_for_intermediate():
    fb = analyze_vocabulary("The food was good and the room was nice.", "intermediate")
    assert [w.word for w in fb.simple_words] == ["good", "nice"]
    assert fb.simple_words[0].span == Span(start=13, end=17)
    assert fb.simple_words[0].complexity == "too-simple"
    assert fb.complex_words == []
    assert fb.overall_score == 56
    assert fb.level_appropriate is False
    assert [s.original for s in fb.suggested_words] == ["good", "nice"]
    assert fb.suggested_words[0].context == "formal writing"
    assert [r.type for r in fb.recommendations] == ["enhance", "context"]


def test_vocabulary_leaves_plain_words_alone_for_beginners():
    fb = analyze_vocabulary("The food was good and the room was nice.", "beginner")
    assert fb.simple_words == []
    assert fb.overall_score == 100
    assert [r.type for r in fb.recommendations] == ["learn", "context"]


def test_vocabulary_complex_words_depend_on_level():
    text = "Responsibility matters to everyone in our small family."
    beginner = analyze_vocabulary(text, "beginner")
    assert [w.word for w in beginner.complex_words] == ["Responsibility"]
    assert beginner.recommendations[0].type == "simplify"
    assert beginner.recommendations[0].examples == ["responsibility"]

    advanced = analyze_vocabulary(text, "advanced")
    assert advanced.complex_words == []
    assert [w.word for w in advanced.simple_words] == ["small"]


def test_vocabulary_empty_and_unknown_level():
    fb = analyze_vocabulary("", "expert")
    assert fb.level == "intermediate"
    assert fb.overall_score == 100
    assert fb.level_appropriate is False


def test_goal_feedback_empty_text():
    fb = goal_feedback("   ", "email")
    assert fb.writing_type == "email"
    assert fb.overall_assessment == EMPTY_ASSESSMENT
    assert fb.specific_goals == []


def test_goal_feedback_short_casual_email():
    fb = goal_feedback("Hey, I can't come tomorrow. Let's talk later, ok?", "email")
    scores = {g.goal: g.score for g in fb.specific_goals}
    assert scores == {"Length": 20, "Professional tone": 80, "Paragraph structure": 50}
    assert fb.overall_assessment == "Your email needs more work, starting with length"
    assert fb.next_steps == [
        "Develop each main point with an example or an explanation",
        "Give the opening and the closing their own paragraphs",
    ]
    assert fb.strengths_identified == []


def test_goal_feedback_conversation_meets_goals():
    fb = goal_feedback("Hey! Are you free tonight? We could watch a movie.", "conversation")
    assert [g.goal for g in fb.specific_goals] == ["Length", "Natural tone"]
    assert fb.overall_assessment.startswith("Your conversation meets the main goals")
    assert len(fb.strengths_identified) == 2
    assert fb.next_steps == ["Keep practicing conversation writing to build on these results"]


def test_goal_feedback_counts_transitions_and_defaults_to_essay():
    text = "Cities are growing. However, parks are shrinking. Furthermore, traffic is worse."
    fb = goal_feedback(text, "poem")
    assert fb.writing_type == "essay"
    transitions = next(g for g in fb.specific_goals if g.goal == "Transitions")
    assert transitions.score == 80
    assert "however" in transitions.assessment


def test_originality_needs_enough_text():
    report = check_originality("Too short to judge.")
    assert report.overall_similarity == 0
    assert report.unique_content == 100
    assert report.matches == []
    assert report.recommendations == ["Add more content to perform a meaningful originality check."]


def test_originality_flags_stock_phrasing():
    first = "According to recent studies, most students write better essays after daily practice"
    text = first + ". I enjoy writing short stories about my grandmother and her village."
    report = check_originality(text)
    [match] = report.matches
    assert match.span == Span(start=0, end=len(first))
    assert (match.phrase, match.risk) == ("According to", 0.5)
    assert report.word_count == 23
    assert report.overall_similarity == 26
    assert report.unique_content == 74
    assert report.recommendations[0] == "Add original analysis and personal insights"


def test_originality_uses_highest_risk_phrase_once_per_sentence():
    text = "Therefore, according to the survey, the majority of people prefer tea over coffee today."
    [match] = check_originality(text).matches
    assert match.phrase == "according to"
    assert match.risk == 0.5


@pytest.mark.parametrize("level,writing_type", [("beginner", "essay"), ("advanced", "email")])
def test_report_carries_level_and_goal_feedback(level, writing_type):
    session = AnalysisSession("d", "The food was good.", level=level, writing_type=writing_type)
    report = asyncio.run(session.analyze())
    assert report.vocabulary.level == level
    assert report.goals.writing_type == writing_type
    assert report.originality.word_count == 4
