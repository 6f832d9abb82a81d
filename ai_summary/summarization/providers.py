"""LLM provider clients for summary generation.

Each provider makes exactly one synchronous POST per call. Transport
failures, timeouts, non-200 responses and missing fields all surface as
``GenerationFailed``; there is no retry.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import httpx

from ai_summary.config import AppSettings
from ai_summary.errors import ConfigurationError, GenerationFailed

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_TIMEOUT = 30.0


class SummaryProvider(ABC):
    """Abstract base class for summary LLM providers."""

    # Providers returning the ``{summary, key_points, faq}`` JSON set this
    structured: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification."""
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """Model the provider sends requests to."""
        pass

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Generate a response for the given prompt.

        Args:
            prompt: Input prompt

        Returns:
            Generated text, trimmed

        Raises:
            GenerationFailed: the call did not produce text
        """
        pass


class HTTPProvider(SummaryProvider):
    """Shared request handling for JSON-over-HTTP providers."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 150,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize HTTP provider.

        Args:
            api_key: Provider API key
            model: Model name
            temperature: Sampling temperature
            max_tokens: Output token limit
            timeout: Request timeout in seconds
            client: Optional shared httpx client (not closed by the provider)
        """
        self.api_key = api_key
        self._model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    def _post(self, url: str, *, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            if self._client is not None:
                response = self._client.post(url, headers=headers, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"{self.name} request timed out: {e}", extra={"provider": self.name})
            raise GenerationFailed(f"{self.name} request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{self.name} request failed: {e}", extra={"provider": self.name})
            raise GenerationFailed(f"{self.name} request failed") from e

        if response.status_code != 200:
            logger.error(
                f"{self.name} returned HTTP {response.status_code}",
                extra={"provider": self.name, "error": response.text[:500]},
            )
            raise GenerationFailed(
                f"{self.name} returned HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{self.name} returned invalid JSON", extra={"provider": self.name})
            raise GenerationFailed(f"{self.name} returned invalid JSON") from e

    def _extract(self, body: Dict[str, Any], path: Callable[[Dict[str, Any]], Any]) -> str:
        try:
            text = path(body)
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"{self.name} response missing content", extra={"provider": self.name})
            raise GenerationFailed(f"Invalid response format from {self.name}") from e
        if not isinstance(text, str) or not text.strip():
            raise GenerationFailed(f"Empty response from {self.name}")
        return text.strip()


class OpenRouterProvider(HTTPProvider):
    """OpenRouter chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "meta-llama/llama-3.1-8b-instruct:free",
        *,
        site_url: str = "",
        site_name: str = "",
        **kwargs: Any,
    ):
        super().__init__(api_key, model, **kwargs)
        self.site_url = site_url
        self.site_name = site_name

    @property
    def name(self) -> str:
        return "openrouter"

    def generate(self, prompt: str) -> str:
        """Generate using the chat-completions endpoint."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.site_url,
            "X-Title": self.site_name,
        }
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        body = self._post(OPENROUTER_URL, headers=headers, payload=payload)
        return self._extract(body, lambda b: b["choices"][0]["message"]["content"])


class GeminiProvider(HTTPProvider):
    """Google Gemini generateContent API."""

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", **kwargs: Any):
        super().__init__(api_key, model, **kwargs)

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def url(self) -> str:
        return f"{GEMINI_URL.format(model=self.model)}?key={self.api_key}"

    def generate(self, prompt: str) -> str:
        """Generate using the generateContent endpoint."""
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self.max_tokens,
                "temperature": self.temperature,
            },
        }
        body = self._post(self.url, headers={"Content-Type": "application/json"}, payload=payload)
        return self._extract(body, lambda b: b["candidates"][0]["content"]["parts"][0]["text"])


class ProviderFactory:
    """Static table of provider implementations, built from settings."""

    PROVIDERS: Dict[str, type[HTTPProvider]] = {
        "openrouter": OpenRouterProvider,
        "gemini": GeminiProvider,
    }

    def __init__(self, settings: AppSettings, client: Optional[httpx.Client] = None):
        """Initialize factory.

        Args:
            settings: Application settings carrying key, models and sampling options
            client: Optional httpx client handed to every provider
        """
        self.settings = settings
        self.client = client

    @classmethod
    def names(cls) -> list[str]:
        return list(cls.PROVIDERS)

    def create_provider(self, name: Optional[str] = None) -> SummaryProvider:
        """Create the named provider, defaulting to the configured one.

        Raises:
            ConfigurationError: unknown provider or missing API key
        """
        name = name or self.settings.provider
        provider_cls = self.PROVIDERS.get(name)
        if provider_cls is None:
            raise ConfigurationError(f"Unknown provider: {name}", details={"provider": name})

        if not self.settings.api_key:
            raise ConfigurationError("API key not configured", details={"provider": name})

        common: Dict[str, Any] = {
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
            "timeout": self.settings.request_timeout,
            "client": self.client,
        }
        if provider_cls is OpenRouterProvider:
            return OpenRouterProvider(
                self.settings.api_key,
                self.settings.openrouter_model,
                site_url=self.settings.site.url,
                site_name=self.settings.site.name,
                **common,
            )
        return provider_cls(self.settings.api_key, self.settings.gemini_model, **common)
