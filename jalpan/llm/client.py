"""
LLM Client Wrapper

Single interface to the OpenAI chat models
"""
from typing import Optional
import openai

from jalpan.core.config import settings


class LLMClient:
    """OpenAI LLM client"""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ):
        """
        Initialize

        Args:
            model: model name (defaults to LLM_MODEL)
            api_key: OpenAI API key (None falls back to OPENAI_API_KEY)
            temperature: sampling temperature
            max_tokens: completion token limit
        """
        self.model = model or settings.LLM_MODEL
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self._client: Optional[openai.OpenAI] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def client(self) -> openai.OpenAI:
        # created lazily: openai.OpenAI refuses an empty key
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Synchronous completion (text response)

        Args:
            system_prompt: system prompt
            user_prompt: user prompt
            temperature: sampling temperature (None uses the default)
            max_tokens: token limit (None uses the default)

        Returns:
            generated text ("" when the model returned nothing)
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.max_tokens
        )

        return response.choices[0].message.content or ""


def get_llm(
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None
) -> LLMClient:
    """
    LLM client factory

    Args:
        model: model name
        api_key: OpenAI API key
        temperature: sampling temperature
        max_tokens: token limit

    Returns:
        LLMClient instance
    """
    return LLMClient(
        model=model,
        api_key=api_key,
        temperature=temperature,
        max_tokens=max_tokens
    )
