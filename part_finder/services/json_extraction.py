"""
JSON Extraction - Pull the SearchResult object out of raw model text
"""
import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from part_finder.config import EXTRACTION_BALANCED, get_extraction_strategy
from part_finder.errors import ExtractionError
from part_finder.schemas import SearchResult

logger = logging.getLogger(__name__)

# First "{" through the last "}" - greedy on purpose, not a balanced scan
_BRACE_SPAN = re.compile(r'\{[\s\S]*\}')


def extract_json_span(text: str) -> Optional[str]:
    """
    Return the substring from the first '{' to the last '}' in text.

    Stray braces in surrounding prose will widen the span and break the
    parse; use extract_balanced_json_span when that matters.
    """
    if not text:
        return None
    match = _BRACE_SPAN.search(text)
    return match.group(0) if match else None


def extract_balanced_json_span(text: str) -> Optional[str]:
    """
    Return the first balanced {...} block that parses as JSON.

    Braces inside JSON string literals are skipped. Candidates that are
    balanced but not valid JSON (prose like "{see below}") are passed over.
    """
    if not text:
        return None

    start_idx = text.find('{')
    while start_idx != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start_idx, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == '\\':
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == '{':
                depth += 1
            elif ch == '}':
                depth -= 1
                if depth == 0:
                    candidate = text[start_idx:i + 1]
                    try:
                        json.loads(candidate)
                        return candidate
                    except json.JSONDecodeError:
                        break
        start_idx = text.find('{', start_idx + 1)

    return None


def parse_search_result(text: str, strategy: str = None) -> SearchResult:
    """
    Extract, parse and decode a SearchResult from the model's message content.

    Args:
        text: Raw message content from the first completion choice
        strategy: "greedy" (default) or "balanced"

    Raises:
        ExtractionError: no brace span, invalid JSON, or a payload that does
            not decode into a SearchResult
    """
    strategy = strategy or get_extraction_strategy()
    if strategy == EXTRACTION_BALANCED:
        json_str = extract_balanced_json_span(text)
    else:
        json_str = extract_json_span(text)

    if json_str is None:
        logger.warning("No JSON object found in response: %.200s", text or "")
        raise ExtractionError("No JSON found in response")

    try:
        payload = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.warning("Response JSON did not parse: %s", e)
        raise ExtractionError(f"Invalid JSON in response: {e}") from e

    if not isinstance(payload, dict):
        raise ExtractionError("Response JSON is not an object")

    try:
        return SearchResult.model_validate(payload)
    except ValidationError as e:
        logger.warning("Response JSON did not match the part schema: %s", e)
        raise ExtractionError("Response JSON does not match the part schema") from e
