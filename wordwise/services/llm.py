# wordwise/services/llm.py
import json
import os
import time
import re
import logging
from typing import List, Dict, Any

from openai import OpenAI

log = logging.getLogger("llm")

MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

SYSTEM = (
    "You are a meticulous English teacher checking text written by ESL students.\n"
    "Find spelling, grammar, article, preposition, tense and word-order errors,\n"
    "and suggest more precise vocabulary where it clearly helps.\n"
    "Quote originalText EXACTLY as it appears in the text, character for character.\n"
    "Return ONLY valid JSON with this exact shape:\n"
    '{"suggestions":[{"category":"grammar|spelling|vocabulary|style|clarity|structure",'
    '"severity":"error|warning|suggestion","originalText":str,"replacementText":str,'
    '"explanation":str,"startIndex":int,"endIndex":int}]}\n'
    "No prose, no markdown, no extra keys."
)

# grab the last {...} block to be resilient to any prefacing text
_JSON_FENCE = re.compile(r"\{.*\}\s*$", re.DOTALL)

_client = None


class LLMError(RuntimeError):
    ...


def client() -> OpenAI:
    global _client
    if _client is None:
        # longer timeout & built-in retries for transient failures
        _client = OpenAI(timeout=60.0, max_retries=3)
    return _client


def enabled() -> bool:
    return bool(os.getenv("OPENAI_API_KEY"))


def _extract_json(text: str) -> dict:
    try:
        return json.loads(text)
    except ValueError:
        pass
    m = _JSON_FENCE.search(text)
    if m:
        return json.loads(m.group(0))
    raise ValueError("Model output was not valid JSON")


def _chat(messages: list) -> str:
    """Single call to OpenAI Chat Completions."""
    log.info("LLM chat call model=%s, messages=%d", MODEL, len(messages))
    resp = client().chat.completions.create(model=MODEL, messages=messages, temperature=0.2)
    return resp.choices[0].message.content or ""


def suggest_corrections(
    text: str,
    level: str = "intermediate",
    max_retries: int = 2,
) -> List[Dict[str, Any]]:
    """
    returns: [{category, severity, originalText, replacementText, explanation,
               startIndex, endIndex}, ...]  (offsets are the model's guess)
    """
    payload = {"level": level, "text": text}

    last_err: Exception | None = None
    for attempt in range(max_retries + 1):
        try:
            messages = [
                {"role": "system", "content": SYSTEM},
                {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
            ]
            out = _chat(messages)
            data = _extract_json(out)
            items = data.get("suggestions", [])
            return [
                it for it in items
                if isinstance(it, dict) and it.get("originalText")
            ]
        except Exception as e:
            last_err = e
            # exponential-ish backoff
            time.sleep(1.0 + 0.75 * attempt)
    raise LLMError(f"LLM analysis failed: {last_err}")
