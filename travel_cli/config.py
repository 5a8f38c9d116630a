from __future__ import annotations

import json
import logging
import shlex
from functools import lru_cache
from typing import Annotated, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

load_dotenv()

DEFAULT_MCP_ARGS = ("-y", "@nicholasareed/google-flights-mcp@latest")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    mcp_command: str = Field("npx", alias="TRAVEL_CLI_MCP_COMMAND")
    mcp_args: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MCP_ARGS), alias="TRAVEL_CLI_MCP_ARGS"
    )
    timeout_s: float = Field(120.0, alias="TRAVEL_CLI_TIMEOUT_S")
    default_limit: int = Field(10, alias="TRAVEL_CLI_DEFAULT_LIMIT")
    quick_limit: int = Field(5, alias="TRAVEL_CLI_QUICK_LIMIT")
    currency_symbol: str = Field("₹", alias="TRAVEL_CLI_CURRENCY_SYMBOL")
    log_level: str = Field("WARNING", alias="TRAVEL_CLI_LOG_LEVEL")
    log_file: Optional[str] = Field(None, alias="TRAVEL_CLI_LOG_FILE")

    @field_validator("mcp_command")
    @classmethod
    def _command_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("TRAVEL_CLI_MCP_COMMAND must be a non-empty string")
        return v.strip()

    @field_validator("mcp_args", mode="before")
    @classmethod
    def _split_mcp_args(cls, v):
        """Accept a JSON list, a comma separated or a whitespace separated string."""
        if not isinstance(v, str):
            return v
        text = v.strip()
        if text.startswith("["):
            try:
                return json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError(f"TRAVEL_CLI_MCP_ARGS is not a JSON list: {exc}") from exc
        if "," in text:
            return [a.strip() for a in text.split(",") if a.strip()]
        return shlex.split(text)

    @field_validator("timeout_s")
    @classmethod
    def _timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("TRAVEL_CLI_TIMEOUT_S must be greater than 0")
        return v

    @field_validator("default_limit", "quick_limit")
    @classmethod
    def _limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("result limits must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v!r}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings", "DEFAULT_MCP_ARGS"]
