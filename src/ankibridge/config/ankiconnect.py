"""AnkiConnect configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_float, env_int, env_optional_str, env_str
from .http_resilience import ResilienceConfig, RetryPolicy

DEFAULT_ANKICONNECT_URL: Final[str] = "http://127.0.0.1:8765"
DEFAULT_ANKICONNECT_ORIGIN: Final[str] = "ankibridge"
DEFAULT_ANKICONNECT_TIMEOUT_SECONDS: Final[float] = 10.0
DEFAULT_DECK_NAME: Final[str] = "Default"
ANKICONNECT_API_VERSION: Final[int] = 6


@dataclass(frozen=True, slots=True)
class AnkiConnectConfig:
    """Holds AnkiConnect endpoint configuration values."""

    url: str
    origin: str
    default_deck: str
    resilience: ResilienceConfig
    api_key: str | None = None
    api_version: int = ANKICONNECT_API_VERSION


def get_ankiconnect_config(*, resilience: ResilienceConfig | None = None) -> AnkiConnectConfig:
    url = env_str("ANKICONNECT_URL", DEFAULT_ANKICONNECT_URL)
    origin = env_str("ANKICONNECT_ORIGIN", DEFAULT_ANKICONNECT_ORIGIN)
    timeout = env_float(
        "ANKICONNECT_TIMEOUT_SECONDS",
        DEFAULT_ANKICONNECT_TIMEOUT_SECONDS,
        minimum=0.0,
    )
    retries = env_int("ANKICONNECT_RETRIES", 0, minimum=0)

    return AnkiConnectConfig(
        url=url,
        origin=origin,
        default_deck=env_str("ANKI_DEFAULT_DECK", DEFAULT_DECK_NAME),
        api_key=env_optional_str("ANKICONNECT_API_KEY"),
        resilience=resilience
        or ResilienceConfig(
            name="ankiconnect",
            base_url=url,
            timeout_seconds=timeout,
            retry=RetryPolicy(total=retries),
            default_headers={"Origin": origin},
        ),
    )
