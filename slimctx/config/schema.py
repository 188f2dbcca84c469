"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompactionConfig(BaseModel):
    """Context compaction configuration."""
    strategy: Literal["trim", "summarize"] = "summarize"
    max_model_tokens: int = 8192
    threshold_percent: float = 0.7  # 0-1
    min_recent_messages: int | None = None  # None: strategy default (trim 2, summarize 4)
    prompt: str | None = None  # Custom summarization prompt
    estimator: Literal["heuristic", "tiktoken"] = "heuristic"
    encoding: str = "cl100k_base"  # tiktoken encoding


class ProviderConfig(BaseModel):
    """LLM provider used for summarization."""
    model: str = "openai/gpt-4o-mini"
    api_key: str = ""
    api_base: str | None = None
    max_tokens: int = 1024
    temperature: float = 0.2


class Config(BaseSettings):
    """Root configuration for slimctx."""
    compaction: CompactionConfig = Field(default_factory=CompactionConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)

    model_config = SettingsConfigDict(
        env_prefix="SLIMCTX_",
        env_nested_delimiter="__",
    )
