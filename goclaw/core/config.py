"""Configuration management.

A single immutable snapshot is built at startup from defaults, an
optional YAML file and environment variables, then passed explicitly
to every component that needs it.
"""
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "GOCLAW_"
DEFAULT_CONFIG_NAME = ".goclaw.yaml"

# Unprefixed aliases accepted for the provider settings
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "zhipu.api_key": ("ZHIPU_API_KEY",),
    "zhipu.model": ("ZHIPU_MODEL",),
    "zhipu.temperature": ("ZHIPU_TEMPERATURE",),
    "zhipu.max_tokens": ("ZHIPU_MAX_TOKENS",),
}


def expand_path(path: str) -> str:
    """Expand a leading tilde to the user's home directory."""
    if not path:
        return path
    return os.path.expanduser(path)


@dataclass(frozen=True)
class ZhipuConfig:
    """Completion endpoint configuration."""
    api_key: str = ""
    base_url: str = "https://open.bigmodel.cn/api/paas/v4"
    model: str = "glm-4-flash"
    temperature: float = 0.7
    max_tokens: int = 4096


@dataclass(frozen=True)
class AgentConfig:
    """Agent loop configuration.

    Attributes:
        max_history: Number of most recent persisted messages replayed per turn
        max_tool_rounds: Tool-call rounds allowed in one turn
        session_id: Fixed session identifier for the life of the process
    """
    max_history: int = 50
    max_tool_rounds: int = 16
    session_id: str = "default"


@dataclass(frozen=True)
class MemoryConfig:
    """Conversation database and workspace locations."""
    file_path: str = "./goclaw.db"
    workspace: str = "~/.goclaw/workspace"

    @property
    def workspace_dir(self) -> Path:
        return Path(expand_path(self.workspace))

    @property
    def database_url(self) -> str:
        return f"sqlite:///{expand_path(self.file_path)}"


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    zhipu: ZhipuConfig = field(default_factory=ZhipuConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    source: str | None = None

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        require_api_key: bool = True,
    ) -> "AppConfig":
        """Load configuration from file and environment variables.

        Args:
            config_path: Explicit YAML file. If None, looks for .goclaw.yaml
                         in the working directory, then in the home directory.
            require_api_key: Fail when no API key is configured

        Returns:
            Frozen AppConfig snapshot

        Raises:
            ConfigError: If the file is unreadable, a value has the wrong
                         type, or the API key is missing.
        """
        load_dotenv()

        values = {
            "zhipu": asdict(ZhipuConfig()),
            "agent": asdict(AgentConfig()),
            "memory": asdict(MemoryConfig()),
        }

        source = _resolve_config_file(config_path)
        if source is not None:
            _merge_file(values, source)
            logger.debug(f"Loaded config file: {source}")

        _apply_env_overrides(values)

        try:
            config = cls(
                zhipu=ZhipuConfig(
                    api_key=str(values["zhipu"]["api_key"] or ""),
                    base_url=str(values["zhipu"]["base_url"]).rstrip("/"),
                    model=str(values["zhipu"]["model"]),
                    temperature=_coerce(values, "zhipu", "temperature", float),
                    max_tokens=_coerce(values, "zhipu", "max_tokens", int),
                ),
                agent=AgentConfig(
                    max_history=_coerce(values, "agent", "max_history", int),
                    max_tool_rounds=_coerce(values, "agent", "max_tool_rounds", int),
                    session_id=str(values["agent"]["session_id"]),
                ),
                memory=MemoryConfig(
                    file_path=expand_path(str(values["memory"]["file_path"])),
                    workspace=expand_path(str(values["memory"]["workspace"])),
                ),
                source=str(source) if source else None,
            )
        except KeyError as e:
            raise ConfigError(f"missing configuration key: {e}") from e

        if require_api_key and not config.zhipu.api_key:
            raise ConfigError(
                "zhipu api_key is required (set ZHIPU_API_KEY environment variable)",
                config_key="zhipu.api_key",
            )
        return config

    def masked_api_key(self) -> str:
        """Return the API key with everything but the edges hidden."""
        key = self.zhipu.api_key
        if len(key) <= 8:
            return "***"
        return f"{key[:4]}...{key[-4:]}"


def _resolve_config_file(config_path: str | Path | None) -> Path | None:
    if config_path:
        path = Path(expand_path(str(config_path)))
        if not path.is_file():
            raise ConfigError(f"config file not found: {path}", config_key="config")
        return path

    for candidate in (Path.cwd() / DEFAULT_CONFIG_NAME, Path.home() / DEFAULT_CONFIG_NAME):
        if candidate.is_file():
            return candidate
    return None


def _merge_file(values: dict[str, dict[str, Any]], path: Path) -> None:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    for section, section_values in values.items():
        file_section = data.get(section) or {}
        if not isinstance(file_section, dict):
            raise ConfigError(f"section '{section}' must be a mapping", config_key=section)
        for key in section_values:
            if key in file_section:
                section_values[key] = file_section[key]


def _apply_env_overrides(values: dict[str, dict[str, Any]]) -> None:
    for section, section_values in values.items():
        for key in section_values:
            dotted = f"{section}.{key}"
            names = (f"{ENV_PREFIX}{section.upper()}_{key.upper()}", *ENV_ALIASES.get(dotted, ()))
            for name in names:
                value = os.environ.get(name)
                if value:
                    section_values[key] = value
                    break


def _coerce(values: dict[str, dict[str, Any]], section: str, key: str, kind: type) -> Any:
    raw = values[section][key]
    try:
        return kind(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            f"{section}.{key} must be {kind.__name__}, got {raw!r}",
            config_key=f"{section}.{key}",
        ) from e
