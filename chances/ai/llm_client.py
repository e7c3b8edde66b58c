import os
import logging
from typing import Optional, Type, TypeVar

import openai
from dotenv import load_dotenv
from pydantic import BaseModel

# Load env vars (if not already loaded)
load_dotenv()

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_FAST_MODEL = "gpt-4o-mini"
DEFAULT_DEEP_MODEL = "gpt-4o"
DEFAULT_TIMEOUT_SECONDS = 60.0


class LLMClient:
    """
    Thin async wrapper around the OpenAI chat API with fast/deep model routing.

    "fast" is the cheap model used for free-text refinement, "deep" the
    expensive one used for holistic structured assessments. Construct one per
    configuration and pass it in; nothing here is a module-level singleton.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        fast_model: str = DEFAULT_FAST_MODEL,
        deep_model: str = DEFAULT_DEEP_MODEL,
        temperature: float = 0.3,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[openai.AsyncOpenAI] = None,
    ):
        if client is None:
            if not api_key:
                raise RuntimeError("OPENAI_API_KEY env var not set")
            # No retry policy: a failed call is surfaced to the caller
            client = openai.AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.models = {"fast": fast_model, "deep": deep_model}
        self.temperature = temperature
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "LLMClient":
        return cls(
            api_key=os.getenv("OPENAI_API_KEY"),
            fast_model=os.getenv("OPENAI_FAST_MODEL", DEFAULT_FAST_MODEL),
            deep_model=os.getenv("OPENAI_DEEP_MODEL", DEFAULT_DEEP_MODEL),
            timeout=float(os.getenv("CHANCES_LLM_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
        )

    async def aclose(self) -> None:
        await self.client.close()

    def model_for(self, route: str) -> str:
        if route not in self.models:
            raise ValueError(f"Unknown model route: {route}")
        return self.models[route]

    async def complete_text(
        self,
        system: str,
        prompt: str,
        model: str = "fast",
        max_tokens: int = 1200,
    ) -> str:
        """Free-text completion. Returns the raw message content."""
        response = await self.client.chat.completions.create(
            model=self.model_for(model),
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=max_tokens,
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("LLM returned an empty response")
        return content

    async def generate_object(
        self,
        prompt: str,
        schema: Type[M],
        model: str = "deep",
        system: Optional[str] = None,
        max_tokens: int = 2500,
    ) -> M:
        """
        Schema-constrained generation.

        The pydantic schema is sent as the response format and the reply is
        validated against it; pydantic.ValidationError propagates on mismatch.
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        response = await self.client.chat.completions.create(
            model=self.model_for(model),
            messages=messages,
            temperature=self.temperature,
            max_tokens=max_tokens,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": schema.__name__,
                    "schema": schema.model_json_schema(),
                    "strict": False,
                },
            },
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("LLM returned an empty response")

        return schema.model_validate_json(content)
