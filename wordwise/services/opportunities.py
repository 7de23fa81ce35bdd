from __future__ import annotations
from typing import Dict, Iterator, List, Tuple
import spacy
from wordwise.services.metrics import sentences_of
from wordwise.services.patterns import TIME_WORDS

# load spaCy once
_nlp = None
def nlp():
    global _nlp
    if _nlp is None:
        _nlp = spacy.load("en_core_web_sm", disable=["ner"])
    return _nlp

PLACE_WORDS = {
    "home", "school", "work", "office", "house", "room", "kitchen", "street", "road",
    "city", "country", "park", "store", "shop", "restaurant", "hospital", "library",
    "church", "station", "airport", "hotel", "beach", "mountain", "forest", "garden",
    "table", "desk", "bed", "floor", "wall", "door", "window", "car", "bus", "train", "plane",
}
PLURAL_CUES = {
    "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten", "many",
    "several", "few", "some", "all", "most", "both", "these", "those", "multiple", "various",
}
CLAUSE_MARKERS = {"and", "but", "because", "although", "while", "which"}

Counts = Dict[Tuple[str, str], int]

def _chunks(text: str, size: int) -> Iterator[str]:
    # cut on whitespace so no word straddles two chunks
    start = 0
    while start < len(text):
        end = min(len(text), start + size)
        if end < len(text):
            cut = max(text.rfind(" ", start, end), text.rfind("\n", start, end))
            if cut > start:
                end = cut + 1
        yield text[start:end]
        start = end

def estimate_opportunities(text: str) -> Counts:
    """
    How many chances the writer had to get each pattern right. Feeds the
    denominator of pattern accuracy so clean text still counts as practice.
    Text longer than the pipeline's max_length is parsed in chunks.
    """
    if not text.strip():
        return {}
    model = nlp()
    words: List[str] = []
    nouns = verbs = complex_sents = 0
    sentences: List[str] = []
    for doc in model.pipe(_chunks(text, model.max_length)):
        words.extend(t.lower_ for t in doc if t.is_alpha)
        nouns += len([t for t in doc if t.pos_ == "NOUN"])
        verbs += len([t for t in doc if t.pos_ in ("VERB", "AUX")])
        if doc.has_annotation("SENT_START"):
            sents = [s for s in doc.sents if len(s.text.strip()) > 5]
            complex_sents += len([s for s in sents if "," in s.text or any(t.lower_ in CLAUSE_MARKERS for t in s)])
            sentences.extend(s.text for s in sents)
        else:
            sents = [s for s in sentences_of(doc.text) if len(s.strip()) > 5]
            complex_sents += len([s for s in sents if "," in s or set(s.lower().split()) & CLAUSE_MARKERS])
            sentences.extend(sents)
    time_ctx = len([w for w in words if w in TIME_WORDS])
    place_ctx = len([w for w in words if w in PLACE_WORDS])
    plural_ctx = len([w for w in words if w in PLURAL_CUES])

    counts: Counts = {
        ("Articles", "Missing Article"): max(1, int(nouns * 0.7)),
        ("Articles", "Wrong Article"): max(1, int(nouns * 0.3)),
        ("Verb Tenses", "Past Tense"): max(1, int(verbs * 0.3)),
        ("Verb Tenses", "Present Tense"): max(1, int(verbs * 0.4)),
        ("Verb Tenses", "Future Tense"): max(1, int(verbs * 0.2)),
        ("Prepositions", "Time Prepositions"): max(1, time_ctx),
        ("Prepositions", "Place Prepositions"): max(1, place_ctx),
        ("Prepositions", "Other Prepositions"): max(1, len(words) // 15),
        ("Subject-Verb Agreement", "Singular/Plural Mismatch"): max(1, len(sentences) * 2),
        ("Plurals", "Regular Plurals"): max(1, plural_ctx),
        ("Plurals", "Irregular Plurals"): max(1, int(plural_ctx * 0.3)),
        ("Punctuation", "Periods"): max(1, len(sentences)),
        ("Punctuation", "Commas"): max(1, len(words) // 10),
        ("Spelling", "Common Misspellings"): max(1, len(words)),
        ("Word Order", "Question Formation"): max(1, complex_sents),
    }
    questions = text.count("?")
    if questions:
        counts[("Punctuation", "Question Marks")] = questions
    return counts
