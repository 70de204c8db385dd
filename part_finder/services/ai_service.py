"""
AI Service - Handles OpenAI chat-completion calls for part identification
"""
import logging
from typing import List, Dict

from openai import OpenAI

from part_finder.config import (
    SYSTEM_PROMPT, OPENAI_MODEL, OPENAI_TEMPERATURE, get_api_key, get_base_url,
)
from part_finder.errors import ConfigurationError, RemoteServiceError
from part_finder.schemas import SearchResult
from part_finder.services.json_extraction import parse_search_result

logger = logging.getLogger(__name__)


def build_messages(query: str) -> List[Dict[str, str]]:
    """System instruction then the user's query, verbatim"""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": query},
    ]


class AIService:
    def __init__(self, client=None):
        """
        Args:
            client: Optional pre-built OpenAI-compatible client. When omitted a
                client is built on first use from OPENAI_API_KEY. The key is
                required either way.
        """
        self._client = client
        self.model = OPENAI_MODEL
        self.temperature = OPENAI_TEMPERATURE

    def ensure_configured(self):
        """Raise ConfigurationError when no credential is available"""
        if not get_api_key():
            raise ConfigurationError("OPENAI_API_KEY is not set")

    def _get_client(self):
        if self._client is None:
            # One POST per search: the SDK's own retries are switched off
            self._client = OpenAI(
                api_key=get_api_key(),
                base_url=get_base_url(),
                max_retries=0,
            )
        return self._client

    def complete(self, query: str) -> str:
        """
        Send the query to the chat-completion endpoint

        Args:
            query: Free-text part description from the user

        Returns:
            Message content of the first completion choice

        Raises:
            ConfigurationError: credential missing, no call attempted
            RemoteServiceError: the call failed or the envelope was unusable
        """
        self.ensure_configured()
        client = self._get_client()

        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=build_messages(query),
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error("Chat completion request failed: %s", e)
            raise RemoteServiceError(str(e)) from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.error("Unexpected completion envelope: %r", resp)
            raise RemoteServiceError("Unexpected completion envelope") from e

        if content is None:
            raise RemoteServiceError("Completion has no message content")

        logger.debug("Model response preview: %.200s", content)
        return content

    def search(self, query: str) -> SearchResult:
        """Dispatch the query and decode the result; see parse_search_result"""
        content = self.complete(query)
        result = parse_search_result(content)
        logger.info(
            "Identified %s (%s) with %d alternatives",
            result.part_number, result.brand, len(result.alternatives),
        )
        return result
