import logging
from typing import Optional

from matching.llm_groq import GroqClient, LLMError
from parsers.basic_extract import extract_candidate
from parsers.documents import extract_text
from schemas import ParsedResume

logger = logging.getLogger(__name__)


class ResumeParser:
    """Resume parser: LLM extraction first, rule-based extraction as fallback."""

    def __init__(self, client: Optional[GroqClient] = None):
        """
        Args:
            client: LLM client, or None to run the rule-based parser only
        """
        self.client = client

    def _fallback(self, text: str, origin: str, reason: str) -> ParsedResume:
        return ParsedResume(
            source="heuristic",
            candidate=extract_candidate(text, origin=origin),
            fallback_reason=reason,
        )

    def parse_text(self, text: str, origin: str = "document") -> ParsedResume:
        """
        Parse plain resume text.

        Args:
            text: resume text
            origin: "document" (read from an upload) or "body" (posted text)

        Returns:
            ParsedResume tagged with the source of its data. An LLM result
            missing name, email or skills keeps the "llm" tag and has those
            fields filled by the rule-based parser (listed in filled_fields).
        """
        if not isinstance(text, str) or not text.strip():
            return self._fallback("", origin, "empty text")
        if self.client is None:
            return self._fallback(text, origin, "llm disabled")

        try:
            candidate = self.client.extract_candidate(text)
        except LLMError as e:
            logger.warning(f"LLM resume parse failed, falling back to heuristics: {e}")
            return self._fallback(text, origin, str(e))

        missing = candidate.missing_fields()
        if not missing:
            return ParsedResume(source="llm", candidate=candidate)

        heuristic = extract_candidate(text, origin=origin)
        updates = {field: getattr(heuristic, field) for field in missing if getattr(heuristic, field)}
        if updates:
            logger.info(f"LLM result incomplete, filled {sorted(updates)} from heuristics")
        return ParsedResume(
            source="llm",
            candidate=candidate.model_copy(update=updates),
            filled_fields=sorted(updates),
        )

    def parse(self, file_path: str) -> ParsedResume:
        """
        Main parsing method

        Args:
            file_path: Path to resume file

        Returns:
            ParsedResume for the document text
        """
        logger.info(f"Starting parse of: {file_path}")
        text = extract_text(file_path)
        return self.parse_text(text, origin="document")


def parse_resume(text: str, client: Optional[GroqClient] = None, origin: str = "document") -> ParsedResume:
    return ResumeParser(client).parse_text(text, origin=origin)
