import logging
from abc import ABC, abstractmethod
from enum import Enum

import requests
from anthropic import Anthropic
from openai import OpenAI

from .utils.config import Config, ConfigError

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    OPENAI = 'openai'
    ANTHROPIC = 'anthropic'
    OLLAMA = 'ollama'


class CompletionBackend(ABC):
    @abstractmethod
    def generate_completion(self, system_prompt: str, user_prompt: str) -> str:
        """Returns the model's reply as plain text."""
        raise NotImplementedError


class OpenAIBackend(CompletionBackend):
    TEMPERATURE = 0.7

    def __init__(self, config: Config):
        self.model = config.openai_model
        self.client = OpenAI(api_key=config.openai_api_key)

    def generate_completion(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.TEMPERATURE,
        )
        return response.choices[0].message.content


class AnthropicBackend(CompletionBackend):
    MAX_TOKENS = 4096

    def __init__(self, config: Config):
        self.model = config.anthropic_model
        self.client = Anthropic(api_key=config.anthropic_api_key)

    def generate_completion(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return response.content[0].text


class OllamaBackend(CompletionBackend):
    """Local models served by Ollama."""

    def __init__(self, config: Config, session: requests.Session = None):
        self.base_url = config.ollama_base_url
        self.model = config.ollama_model
        self.session = session or requests.Session()

    def generate_completion(self, system_prompt: str, user_prompt: str) -> str:
        response = self.session.post(
            f"{self.base_url}/api/generate",
            json={
                "model": self.model,
                "prompt": f"{system_prompt}\n\n{user_prompt}",
                "stream": False,
            },
        )
        response.raise_for_status()
        return response.json()["response"]


BACKENDS = {
    ProviderName.OPENAI: OpenAIBackend,
    ProviderName.ANTHROPIC: AnthropicBackend,
    ProviderName.OLLAMA: OllamaBackend,
}


def create_backend(config: Config) -> CompletionBackend:
    """
    Builds the completion backend named by config.ai_provider.

    Raises:
        ConfigError: If the provider name is not recognised
    """
    try:
        name = ProviderName((config.ai_provider or '').strip().lower())
    except ValueError:
        raise ConfigError(f"Unknown AI provider: {config.ai_provider}")
    logger.debug(f"Using {name.value} completion backend")
    return BACKENDS[name](config)


class AIProvider:
    """Chooses a completion backend once and forwards every call to it."""

    def __init__(self, config: Config, backend: CompletionBackend = None):
        self.backend = backend or create_backend(config)

    def generate_completion(self, system_prompt: str, user_prompt: str) -> str:
        return self.backend.generate_completion(system_prompt, user_prompt)
