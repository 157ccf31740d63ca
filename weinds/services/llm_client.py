"""
LLM API Client

The hosted model speaks the OpenAI chat-completions API (DeepSeek by
default), so we use the openai library and only change base_url/model.

The client knows nothing about flows: it sends one system + user message,
returns raw text, and can pull a JSON object out of a reply that was
wrapped in a markdown code block.
"""
import json
import logging
import time

from openai import OpenAI, OpenAIError

from weinds.core.config import get_settings
from weinds.core.errors import AIFlowError

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Thin wrapper over the chat-completions endpoint.
    """

    def __init__(self):
        settings = get_settings()
        self.client = OpenAI(
            api_key=settings.llm_api_key or "not-configured",
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds
        )
        self.model = settings.llm_model
        self.temperature = settings.llm_temperature

    def call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000, flow: str = "chat") -> str:
        """
        Call the model and return the raw text response.
        """
        started = time.monotonic()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                max_tokens=max_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"}
            )
        except OpenAIError as e:
            raise AIFlowError(flow, f"model call failed: {e}") from e

        logger.info("LLM call for %s took %.2fs", flow, time.monotonic() - started)
        content = response.choices[0].message.content
        if not content:
            raise AIFlowError(flow, "model returned an empty response")
        return content

    @staticmethod
    def extract_json(text: str) -> dict:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        # Remove markdown code blocks if present
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def test_connection(self) -> bool:
        """Test if the model endpoint is reachable"""
        try:
            response = self.call_api(
                "You are a test assistant. Answer in JSON.",
                'Reply with exactly: {"status": "OK"}',
                max_tokens=20,
                flow="ping"
            )
            return "OK" in response.upper()
        except AIFlowError as e:
            logger.warning("LLM connection failed: %s", e)
            return False


# Singleton instance
_llm_client: LLMClient = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
