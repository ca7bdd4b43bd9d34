"""Review prompt generation and response parsing."""
import json
import re
from typing import Any

from review_relay.constants import FALLBACK_POSITIVES, FALLBACK_SCORE, FALLBACK_SUMMARY_LENGTH
from review_relay.errors import ReviewParseError
from review_relay.logging_config import get_logger
from review_relay.models import ReviewResult

logger = get_logger(__name__)

_WRAPPING_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)
_OPENING_FENCE_LINE = re.compile(r"^```[\w]*\n?", re.MULTILINE)
_CLOSING_FENCE_LINE = re.compile(r"```$", re.MULTILINE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def build_review_prompt(source_code: str, language: str) -> str:
    """Build the review prompt.

    Args:
        source_code: Code submitted by the user
        language: Language identifier, e.g. "python"

    Returns:
        Prompt asking for a JSON-only review
    """
    return f"""You are an expert code reviewer. Analyze the following {language} code and provide a comprehensive review.

CODE:
```{language}
{source_code}
```

IMPORTANT: Respond with ONLY valid JSON. No markdown code blocks, no extra text. The improvedCode field should contain the raw code as a string (escape newlines as \\n, escape quotes as \\").

{{
  "summary": "Brief overall assessment (2-3 sentences)",
  "score": <number 1-10>,
  "bugs": [{{"line": "N/A or number", "severity": "critical|high|medium|low", "description": "...", "fix": "..."}}],
  "optimizations": [{{"type": "performance|readability|maintainability|best-practice", "description": "...", "suggestion": "..."}}],
  "security": [{{"severity": "critical|high|medium|low", "vulnerability": "...", "description": "...", "fix": "..."}}],
  "improvedCode": "improved code as escaped string with \\n for newlines",
  "positives": ["good thing 1", "good thing 2"]
}}
"""


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole text."""
    text = text.strip()
    match = _WRAPPING_FENCE.match(text)
    if match:
        return match.group(1).strip()
    return text


def sanitize_improved_code(code: str) -> str:
    """Strip fence lines the model left inside the improvedCode string."""
    code = _OPENING_FENCE_LINE.sub("", code)
    code = _CLOSING_FENCE_LINE.sub("", code)
    return code.strip()


def _to_review(data: Any) -> ReviewResult:
    if not isinstance(data, dict):
        raise ReviewParseError(f"Expected a JSON object, got {type(data).__name__}")
    review = ReviewResult.model_validate(data)
    if review.improved_code:
        review.improved_code = sanitize_improved_code(review.improved_code)
    return review


def parse_strict(text: str) -> ReviewResult:
    """Parse cleaned text as a JSON review object.

    Raises:
        ReviewParseError: If text is not a valid review object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReviewParseError(f"Invalid JSON: {e}") from e
    return _to_review(data)


def parse_extracted(text: str) -> ReviewResult:
    """Parse the outermost {...} span found in text.

    Raises:
        ReviewParseError: If no span is found or it is not a valid review object
    """
    match = _JSON_OBJECT.search(text)
    if not match:
        raise ReviewParseError("No JSON object found in response")
    return parse_strict(match.group(0))


def fallback_review(text: str, source_code: str) -> ReviewResult:
    """Build a degraded review from unparseable response text."""
    return ReviewResult(
        summary=text[:FALLBACK_SUMMARY_LENGTH],
        score=FALLBACK_SCORE,
        bugs=[],
        optimizations=[],
        security=[],
        improved_code=source_code,
        positives=list(FALLBACK_POSITIVES),
    )


def parse_review(response: str, source_code: str) -> ReviewResult:
    """Parse provider response text into a review.

    Tries a strict parse, then extraction of an embedded JSON object, then
    falls back to a degraded review. Never raises for malformed text.

    Args:
        response: Raw response text from the provider
        source_code: Submitted code, used as improvedCode in the fallback

    Returns:
        Parsed or degraded review
    """
    text = strip_code_fences(response)

    try:
        return parse_strict(text)
    except ReviewParseError as e:
        logger.info(f"Strict parse failed, trying to extract JSON: {e}")

    try:
        return parse_extracted(text)
    except ReviewParseError as e:
        logger.warning(f"Could not extract JSON from response, using fallback review: {e}")

    return fallback_review(text, source_code)
