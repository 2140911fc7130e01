"""External text generation provider."""
import asyncio
import logging
from typing import Optional

from openai import AsyncOpenAI

from portal.config import settings
from portal.errors import ProviderError

logger = logging.getLogger(__name__)


class ContentProvider:
    """Contract consumed by generation and grading.

    ``generate`` returns raw text that may or may not be valid JSON. Every
    failure, including a timeout, surfaces as ``ProviderError``.
    """

    async def generate(self, prompt: str, expect_json: bool = False) -> str:
        raise NotImplementedError


class OpenAIProvider(ContentProvider):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.timeout = timeout or settings.provider_timeout_seconds
        self.client = None
        if self.api_key:
            self.client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    async def generate(self, prompt: str, expect_json: bool = False) -> str:
        if self.client is None:
            raise ProviderError("OPENAI_API_KEY is not configured")
        
        kwargs = {}
        if expect_json:
            kwargs["response_format"] = {"type": "json_object"}
        
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.2,
                    **kwargs
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Provider call timed out after {self.timeout}s") from e
        except Exception as e:
            raise ProviderError(f"Provider call failed: {e}") from e
        
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderError("Provider returned an empty response")
        return content

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.close()
