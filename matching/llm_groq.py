import json
import logging
import math
from typing import List, Optional

import requests
from pydantic import ValidationError

import config
from matching.prompts import (
    MATCH_SYSTEM_PROMPT,
    MATCH_USER_TEMPLATE,
    RESUME_SYSTEM_PROMPT,
    RESUME_USER_TEMPLATE,
)
from schemas import ExtractedCandidate, MatchResult

logger = logging.getLogger(__name__)

# Keeps long resumes inside the model context window
MAX_RESUME_CHARS = 12000


class LLMError(Exception):
    """The LLM call failed or returned output that cannot be used."""


class GroqClient:
    """
    Thin client for Groq's OpenAI-compatible chat completions API.

    Constructed explicitly and handed to whatever needs it; nothing in the
    heuristic parsers or the scorer depends on it.
    """

    def __init__(self, api_key: str, model: str = config.MODEL_NAME,
                 url: str = config.GROQ_API_URL, timeout: float = config.LLM_TIMEOUT,
                 http=None):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.timeout = timeout
        # anything with a requests-style post(); a Session in production
        self.http = http or requests

    @classmethod
    def from_config(cls) -> Optional["GroqClient"]:
        if not config.GROQ_API_KEY:
            logger.warning("GROQ_API_KEY not set; using heuristic extraction and scoring only")
            return None
        return cls(config.GROQ_API_KEY)

    def _chat(self, system_prompt: str, user_prompt: str, temperature: float = 0.0) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }

        try:
            response = self.http.post(self.url, headers=headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            raw = data["choices"][0]["message"]["content"]
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMError(f"Groq request failed: {e}") from e

        # Handle rare cases of stringified JSON
        if isinstance(raw, str):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError as e:
                raise LLMError(f"Groq returned malformed JSON: {e}") from e
        else:
            parsed = raw

        if not isinstance(parsed, dict):
            raise LLMError(f"Groq returned {type(parsed).__name__}, expected a JSON object")
        return parsed

    def extract_candidate(self, resume_text: str) -> ExtractedCandidate:
        parsed = self._chat(
            RESUME_SYSTEM_PROMPT,
            RESUME_USER_TEMPLATE.format(resume=resume_text[:MAX_RESUME_CHARS]),
        )
        try:
            return ExtractedCandidate.model_validate(parsed)
        except ValidationError as e:
            raise LLMError(f"Groq resume payload failed validation: {e}") from e

    def score_match(self, candidate_skills: List[str], job_title: str, job_skills: List[str]) -> MatchResult:
        parsed = self._chat(
            MATCH_SYSTEM_PROMPT,
            MATCH_USER_TEMPLATE.format(
                title=job_title,
                job_skills=", ".join(job_skills),
                candidate_skills=", ".join(candidate_skills),
            ),
            temperature=0.2,
        )

        try:
            score = float(parsed["score"])
        except (KeyError, TypeError, ValueError) as e:
            raise LLMError(f"Groq match payload has no usable score: {e}") from e
        if not math.isfinite(score):
            raise LLMError(f"Groq match score is not a number: {parsed['score']}")
        score = max(0.0, min(100.0, score))  # clamp 0–100

        explanation = parsed.get("explanation")
        if not isinstance(explanation, str) or not explanation.strip():
            raise LLMError("Groq match payload has no explanation")
        return MatchResult(score=round(score), explanation=explanation.strip())
