"""
Configuration module for Fanbot.

All secrets are read from environment variables (or a local .env file).
"""
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FIXTURE_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "info"
    log_format: Literal["pretty", "json"] = "pretty"
    debug: bool = False

    # Dialog engine (Watson Assistant v1)
    assistant_url: str = "https://gateway.watsonplatform.net/assistant/api"
    assistant_api_key: str = ""
    assistant_version: str = "2018-02-16"
    conversation_workspace_id: str = ""

    # Sports data provider
    mlb_fantasy_sports_key: str = ""
    mlb_api_base: str = "https://api.fantasydata.net/mlb/v2/JSON"
    mlb_season: Optional[int] = None
    request_timeout_seconds: float = 30.0

    # Frozen fixture (all saved data is from Sept 28, 2017)
    in_off_season: bool = False
    fixture_dir: Path = DEFAULT_FIXTURE_DIR
    off_season_date: date = date(2017, 9, 28)

    # SMS (Twilio)
    twilio_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    twilio_text_phone_number: str = ""

    # Speech
    text_to_speech_url: str = "https://stream.watsonplatform.net/text-to-speech/api"
    text_to_speech_api_key: str = ""
    tjbot_voice: str = "en-US_MichaelVoice"
    audio_player_command: str = "aplay"
    playback_guard_seconds: float = Field(default=0.2, ge=0.0)

    # Sentiment
    tone_analyzer_url: str = "https://gateway.watsonplatform.net/tone-analyzer/api"
    tone_analyzer_api_key: str = ""
    tone_analyzer_version: str = "2017-09-21"
    tone_threshold: float = 0.01

    # Headlines (Watson Discovery news)
    discovery_url: str = "https://gateway.watsonplatform.net/discovery/api"
    discovery_api_key: str = ""
    discovery_version: str = "2018-03-05"
    discovery_environment_id: str = ""
    discovery_collection_id: str = ""
    headline_count: int = 2
    headline_query_count: int = 5

    def reference_date(self) -> date:
        """Date treated as "now" for schedule windows."""
        if self.in_off_season:
            return self.off_season_date
        return date.today()

    def season(self) -> int:
        """Season used in provider standings/schedule paths."""
        return self.mlb_season or self.reference_date().year


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
