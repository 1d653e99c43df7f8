import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

import pytz
from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable configuration."""


def _strip_api_version(url: Optional[str]) -> Optional[str]:
    # canvasapi rejects base URLs that already carry the API version
    if not url:
        return url
    url = url.strip().rstrip('/')
    if url.endswith('/api/v1'):
        url = url[:-len('/api/v1')]
    return url


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Config:
    """
    Settings for every collaborator, built once at process start.

    Canvas, Notion and completion-backend clients receive this object in
    their constructors instead of reading the environment themselves.
    """

    canvas_url: Optional[str] = None
    canvas_token: Optional[str] = None
    notion_token: Optional[str] = None
    notion_database_id: Optional[str] = None
    notion_task_database_id: Optional[str] = None

    ai_provider: str = 'openai'
    openai_api_key: Optional[str] = None
    openai_model: str = 'gpt-4o-mini'
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = 'claude-sonnet-4-20250514'
    ollama_base_url: str = 'http://localhost:11434'
    ollama_model: str = 'llama2'

    cache_file: str = '.assignment-cache.json'
    request_delay: float = 0.3
    upcoming_days: int = 14
    timezone: str = 'US/Eastern'
    log_level: str = 'INFO'

    weekly_review_day: str = 'sunday'
    weekly_review_time: str = '18:00'
    daily_update_time: str = '07:00'
    task_sync_time: str = '07:30'

    @property
    def task_database_id(self) -> Optional[str]:
        """Task rows live in their own database when one is configured."""
        return self.notion_task_database_id or self.notion_database_id

    @property
    def tz(self):
        return pytz.timezone(self.timezone)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> 'Config':
        """
        Builds the configuration from environment variables.

        Args:
            env: Mapping to read instead of os.environ (used by tests)
            dotenv: Load a .env file from the working directory first

        Returns:
            Config populated from the environment with defaults applied
        """
        if env is None:
            if dotenv:
                load_dotenv(override=True)
            env = os.environ

        config = cls(
            canvas_url=_strip_api_version(env.get('CANVAS_API_URL')),
            canvas_token=env.get('CANVAS_API_TOKEN'),
            notion_token=env.get('NOTION_API_KEY'),
            notion_database_id=env.get('NOTION_DATABASE_ID'),
            notion_task_database_id=env.get('NOTION_TASK_DATABASE_ID') or None,
            ai_provider=env.get('AI_PROVIDER') or 'openai',
            openai_api_key=env.get('OPENAI_API_KEY'),
            openai_model=env.get('OPENAI_MODEL') or 'gpt-4o-mini',
            anthropic_api_key=env.get('ANTHROPIC_API_KEY'),
            anthropic_model=env.get('ANTHROPIC_MODEL') or 'claude-sonnet-4-20250514',
            ollama_base_url=(env.get('OLLAMA_BASE_URL') or 'http://localhost:11434').rstrip('/'),
            ollama_model=env.get('OLLAMA_MODEL') or 'llama2',
            cache_file=env.get('ASSIGNMENT_CACHE_FILE') or '.assignment-cache.json',
            request_delay=_get_float(env, 'SYNC_REQUEST_DELAY', 0.3),
            upcoming_days=_get_int(env, 'UPCOMING_DAYS', 14),
            timezone=env.get('TIMEZONE') or 'US/Eastern',
            log_level=(env.get('LOG_LEVEL') or 'INFO').upper(),
            weekly_review_day=(env.get('WEEKLY_REVIEW_DAY') or 'sunday').lower(),
            weekly_review_time=env.get('WEEKLY_REVIEW_TIME') or '18:00',
            daily_update_time=env.get('DAILY_UPDATE_TIME') or '07:00',
            task_sync_time=env.get('TASK_SYNC_TIME') or '07:30',
        )

        if config.request_delay < 0:
            raise ConfigError("SYNC_REQUEST_DELAY must not be negative")
        if config.upcoming_days <= 0:
            raise ConfigError("UPCOMING_DAYS must be positive")
        try:
            pytz.timezone(config.timezone)
        except pytz.UnknownTimeZoneError:
            raise ConfigError(f"Unknown timezone: {config.timezone}")

        return config

    def missing_credentials(self) -> List[str]:
        required = {
            'CANVAS_API_URL': self.canvas_url,
            'CANVAS_API_TOKEN': self.canvas_token,
            'NOTION_API_KEY': self.notion_token,
            'NOTION_DATABASE_ID': self.notion_database_id,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> 'Config':
        missing = self.missing_credentials()
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")
        return self
