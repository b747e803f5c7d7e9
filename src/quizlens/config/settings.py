"""Configuration management for quizlens.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (API keys). Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/quizlens.yaml")


class VisionConfig(BaseModel):
    model: str = Field(default="gemini-2.0-flash")
    base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=512, gt=0)
    timeout: float = Field(default=30.0, gt=0)
    max_image_dimension: int = Field(default=1568, gt=0)


class CaptureConfig(BaseModel):
    settle_delay: float = Field(default=0.5, ge=0, description="Seconds to wait before grabbing the screen")
    screenshot_dir: Path = Field(default=Path("screenshots"))
    monitor_index: int = Field(default=1, ge=0, description="mss monitor index, 0 = all monitors")
    hide_main_window: bool = Field(default=True)


class OverlayConfig(BaseModel):
    display_mode: Literal["token", "preview"] = Field(default="token")
    dismiss_after: float = Field(default=3.0, gt=0)
    margin_x: int = Field(default=20, ge=0)
    margin_bottom: int = Field(default=70, ge=0)
    min_width: int = Field(default=100, gt=0)
    height: int = Field(default=50, gt=0)
    char_width: int = Field(default=12, gt=0)
    padding: int = Field(default=40, ge=0)
    preview_length: int = Field(default=24, gt=0)


class WindowsConfig(BaseModel):
    main_window_origins: list[str] = Field(default_factory=lambda: ["localhost", "file:"])


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)
    reply_log_dir: Path = Field(default=Path("logs"))


class Settings(BaseSettings):
    """Root configuration for quizlens.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "QUIZLENS_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    gemini_api_key: SecretStr = Field(default=SecretStr(""))

    vision: VisionConfig = Field(default_factory=VisionConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    windows: WindowsConfig = Field(default_factory=WindowsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def api_key(self) -> str:
        return self.gemini_api_key.get_secret_value().strip()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Init kwargs carry the YAML file, so they rank below the environment.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: QUIZLENS_ env vars > .env file > GEMINI_API_KEY / GEMINI_MODEL
    > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    # Load .env file manually for non-prefixed vars
    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply environment variable overrides for non-prefixed vars."""
    api_key = os.environ.get("GEMINI_API_KEY", "")
    model = os.environ.get("GEMINI_MODEL", "")

    if api_key and not os.environ.get("QUIZLENS_GEMINI_API_KEY"):
        yaml_data["gemini_api_key"] = api_key

    if model:
        vision = yaml_data.get("vision") or {}
        vision["model"] = model
        yaml_data["vision"] = vision
