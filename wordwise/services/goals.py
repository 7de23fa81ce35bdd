from __future__ import annotations
from typing import Dict, List, Optional
import logging
import re
from wordwise.models.feedback import GoalAssessment, GoalFeedback, WritingGoal, WritingType
from wordwise.services.metrics import sentences_of, words_of

log = logging.getLogger("goals")

WRITING_GOALS: Dict[str, WritingGoal] = {
    "essay": WritingGoal(
        type="essay",
        description="Academic essay writing with clear thesis, supporting arguments, and formal structure",
        key_focus_areas=["thesis clarity", "argument structure", "evidence support", "formal language",
                         "academic vocabulary", "paragraph unity", "transitions"],
        target_audience="academic readers, professors, peers",
        formality="formal", min_words=300, max_words=1500,
    ),
    "email": WritingGoal(
        type="email",
        description="Professional email communication with clear purpose and appropriate tone",
        key_focus_areas=["subject line clarity", "professional greeting", "clear purpose", "concise language",
                         "polite tone", "appropriate closing", "call to action"],
        target_audience="colleagues, clients, supervisors",
        formality="semi-formal", min_words=50, max_words=300,
    ),
    "letter": WritingGoal(
        type="letter",
        description="Formal letter writing with proper structure and conventions",
        key_focus_areas=["proper format", "formal salutation", "clear purpose", "respectful tone",
                         "proper closing", "contact information", "date and address"],
        target_audience="institutions, employers, officials",
        formality="formal", min_words=200, max_words=500,
    ),
    "report": WritingGoal(
        type="report",
        description="Business or academic report with objective analysis and clear findings",
        key_focus_areas=["executive summary", "clear headings", "objective tone", "data presentation",
                         "logical flow", "evidence-based conclusions", "recommendations"],
        target_audience="management, stakeholders, academic reviewers",
        formality="formal", min_words=500, max_words=2000,
    ),
    "creative": WritingGoal(
        type="creative",
        description="Creative writing with engaging narrative, character development, and literary techniques",
        key_focus_areas=["narrative voice", "character development", "plot structure", "descriptive language",
                         "dialogue", "literary devices", "emotional impact"],
        target_audience="readers, creative writing community",
        formality="informal", min_words=300, max_words=1000,
    ),
    "conversation": WritingGoal(
        type="conversation",
        description="Casual text communication with natural tone and clear expression",
        key_focus_areas=["clarity", "natural tone", "appropriate informality", "message length",
                         "context awareness"],
        target_audience="friends, family, casual contacts",
        formality="informal", min_words=10, max_words=200,
    ),
}

# paragraphs a well-formed piece of this type usually has; absent means not assessed
EXPECTED_PARAGRAPHS = {"essay": 3, "report": 3, "letter": 3, "email": 2}
TRANSITION_TYPES = {"essay", "report"}

_CONTRACTION = re.compile(r"\b\w+'(t|s|re|ve|ll|d|m)\b", re.IGNORECASE)
INFORMAL_WORDS = {"gonna", "wanna", "kinda", "gotta", "yeah", "ok", "okay", "cool", "lol", "btw", "hey", "stuff"}
TRANSITIONS = [
    "however", "therefore", "furthermore", "moreover", "consequently", "in addition",
    "for example", "for instance", "in conclusion", "finally", "firstly", "secondly", "on the other hand",
]

EMPTY_ASSESSMENT = "Start writing to receive goal-based feedback..."


def writing_goal(writing_type: str) -> WritingGoal:
    goal = WRITING_GOALS.get(writing_type)
    if goal is None:
        log.warning("Unknown writing type %r; using essay", writing_type)
        goal = WRITING_GOALS["essay"]
    return goal


def _length(goal: WritingGoal, words: int) -> GoalAssessment:
    lo, hi = goal.min_words, goal.max_words
    if words < lo:
        return GoalAssessment(
            goal="Length",
            assessment=f"At {words} words this is short for {goal.type} writing ({lo}-{hi} words expected)",
            suggestions=["Develop each main point with an example or an explanation"],
            score=max(20, int(round(100 * words / lo))),
        )
    if words > hi:
        return GoalAssessment(
            goal="Length",
            assessment=f"At {words} words this is long for {goal.type} writing ({lo}-{hi} words expected)",
            suggestions=["Cut repeated ideas and keep only the strongest supporting details"],
            score=max(40, int(round(100 * hi / words))),
        )
    return GoalAssessment(goal="Length", assessment=f"{words} words fits the expected range", score=100)


def _tone(goal: WritingGoal, text: str, words: List[str]) -> GoalAssessment:
    informal = len(_CONTRACTION.findall(text)) + len(
        [w for w in words if w.lower().strip(".,!?;:") in INFORMAL_WORDS])
    if goal.formality == "informal":
        sentences = sentences_of(text)
        heavy = sentences and len(words) / len(sentences) > 25
        if heavy:
            return GoalAssessment(
                goal="Natural tone",
                assessment="Long sentences make the writing feel stiff for a casual reader",
                suggestions=["Break long sentences into shorter, conversational ones"],
                score=70,
            )
        return GoalAssessment(goal="Natural tone", assessment="Your style is natural and easy to follow", score=90)

    per_hit = 10 if goal.formality == "formal" else 5
    score = max(20, 100 - per_hit * informal)
    name = "Formal language" if goal.formality == "formal" else "Professional tone"
    if informal == 0:
        return GoalAssessment(goal=name, assessment="The tone suits the audience", score=score)
    return GoalAssessment(
        goal=name,
        assessment=f"Found {informal} informal expression(s) or contraction(s) for {goal.target_audience}",
        suggestions=["Avoid contractions (use 'I would' instead of 'I'd')",
                     "Replace informal expressions with more formal alternatives"],
        score=score,
    )


def _structure(goal: WritingGoal, text: str) -> Optional[GoalAssessment]:
    expected = EXPECTED_PARAGRAPHS.get(goal.type)
    if expected is None:
        return None
    paragraphs = len([p for p in re.split(r"\n\s*\n", text) if p.strip()])
    if paragraphs >= expected:
        return GoalAssessment(goal="Paragraph structure", assessment=f"{paragraphs} paragraphs give the piece a clear shape", score=100)
    return GoalAssessment(
        goal="Paragraph structure",
        assessment=f"Only {paragraphs} paragraph(s); {goal.type} writing usually has at least {expected}",
        suggestions=["Give the opening and the closing their own paragraphs"],
        score=min(100, int(round(100 * paragraphs / expected))),
    )


def _transitions(goal: WritingGoal, text: str) -> Optional[GoalAssessment]:
    if goal.type not in TRANSITION_TYPES:
        return None
    lower = text.lower()
    found = [t for t in TRANSITIONS if re.search(rf"\b{t}\b", lower)]
    score = min(100, 50 + 15 * len(found))
    if len(found) >= 2:
        return GoalAssessment(goal="Transitions", assessment=f"Good use of linking words ({', '.join(found[:3])})", score=score)
    return GoalAssessment(
        goal="Transitions",
        assessment="Ideas are not clearly linked from one to the next",
        suggestions=["Use transition words like 'furthermore', 'however', 'consequently'"],
        score=score,
    )


def goal_feedback(text: str, writing_type: WritingType = "essay") -> GoalFeedback:
    """Score the text against the goals of its writing type (length, tone, structure, linking)."""
    goal = writing_goal(writing_type)
    if not text.strip():
        return GoalFeedback(writing_type=goal.type, overall_assessment=EMPTY_ASSESSMENT)

    words = words_of(text)
    goals = [_length(goal, len(words)), _tone(goal, text, words)]
    goals.extend(g for g in (_structure(goal, text), _transitions(goal, text)) if g is not None)

    average = sum(g.score for g in goals) / len(goals)
    weakest = min(goals, key=lambda g: g.score)
    if average >= 85:
        overall = f"Your {goal.type} meets the main goals for {goal.target_audience}"
    elif average >= 65:
        overall = f"Your {goal.type} is on track; work on {weakest.goal.lower()} next"
    else:
        overall = f"Your {goal.type} needs more work, starting with {weakest.goal.lower()}"

    next_steps = [g.suggestions[0] for g in sorted(goals, key=lambda g: g.score) if g.score < 80 and g.suggestions]
    strengths = [f"{g.goal}: {g.assessment}" for g in goals if g.score >= 85]
    return GoalFeedback(
        writing_type=goal.type,
        overall_assessment=overall,
        specific_goals=goals,
        next_steps=next_steps[:3] or [f"Keep practicing {goal.type} writing to build on these results"],
        strengths_identified=strengths,
    )
