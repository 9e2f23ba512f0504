from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from search_chatbot.conversation_store import DEFAULT_TTL_SECONDS
from search_chatbot.turn_engine import DEFAULT_MAX_RETRIES


@dataclass
class RuntimeEnv:
    provider_api_key: str
    provider_env_var: str
    tavily_api_key: str | None


@dataclass
class AppConfig:
    provider_name: str
    base_url: str | None
    model: str
    temperature: float
    max_retries: int
    conversation_ttl_seconds: float
    search_max_results: int
    completion_retry_attempts: int
    host: str
    port: int
    log_level: str
    log_consumers: list | None


def load_json_config(path: Path | None = None) -> dict:
    config_path = path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def parse_app_config(config: dict) -> AppConfig:
    return AppConfig(
        provider_name=str(config.get("Provider", "groq")).strip().lower(),
        base_url=str(config.get("BaseUrl", "")).strip() or None,
        model=config.get("Model", "llama-3.3-70b-versatile"),
        temperature=float(config.get("Temperature", 0.5)),
        max_retries=int(config.get("MaxRetries", DEFAULT_MAX_RETRIES)),
        conversation_ttl_seconds=float(config.get("ConversationTtlSeconds", DEFAULT_TTL_SECONDS)),
        search_max_results=int(config.get("SearchMaxResults", 5)),
        completion_retry_attempts=int(config.get("CompletionRetryAttempts", 1)),
        host=config.get("Host", "127.0.0.1"),
        port=int(config.get("Port", 3001)),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env(provider_name: str) -> RuntimeEnv:
    if provider_name == "openai":
        provider_env_var = "OPENAI_API_KEY"
    else:
        provider_env_var = "GROQ_API_KEY"

    return RuntimeEnv(
        provider_api_key=os.environ.get(provider_env_var, ""),
        provider_env_var=provider_env_var,
        tavily_api_key=os.environ.get("TAVILY_API_KEY"),
    )
