"""Configuration management for curriculum-lint."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE_NAME = ".curriculum.yaml"
INDEX_CANDIDATES = ("README.md", "index.md", "SUMMARY.md")


class CurriculumConfig(BaseSettings):
    """Configuration for checking a curriculum directory."""

    root: Path = Field(
        default_factory=Path.cwd,
        description="Curriculum root directory",
    )
    index: Optional[str] = Field(
        default=None,
        description="Index lesson, relative to root. Defaults to the first of README.md, index.md, SUMMARY.md",
    )
    ignore: List[str] = Field(
        default_factory=list,
        description="Extra gitignore-style patterns to skip while scanning",
    )
    leaves: List[str] = Field(
        default_factory=list,
        description="Glob patterns for lessons allowed to be unreachable from the index",
    )
    external: bool = Field(default=False, description="Check external URLs over the network")
    timeout: float = Field(default=10.0, description="Timeout in seconds for external URL checks")
    concurrency: int = Field(default=20, description="Concurrent external URL checks")
    require_language: bool = Field(
        default=False, description="Report fenced code blocks without a declared language"
    )
    strict: bool = Field(default=False, description="Treat warnings as failures")
    disabled_rules: List[str] = Field(default_factory=list, description="Rules to skip")

    model_config = SettingsConfigDict(
        env_prefix="CURRICULUM_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("root")
    @classmethod
    def ensure_root_exists(cls, v: Path) -> Path:
        """Ensure curriculum root exists."""
        if not v.is_dir():
            raise ValueError(f"Curriculum root is not a directory: {v}")
        return v.resolve()

    @field_validator("concurrency")
    @classmethod
    def ensure_positive_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("concurrency must be at least 1")
        return v

    def index_path(self) -> Optional[str]:
        """Return the index lesson path relative to root, or None if there is none."""
        if self.index:
            return self.index if (self.root / self.index).is_file() else None
        for candidate in INDEX_CANDIDATES:
            if (self.root / candidate).is_file():
                return candidate
        return None


def load_file_settings(root: Path) -> Dict[str, Any]:
    """Load settings from the curriculum's .curriculum.yaml, if present."""
    config_file = root / CONFIG_FILE_NAME
    if not config_file.exists():
        return {}

    try:
        with config_file.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a mapping")

    logger.debug(f"Loaded settings from {config_file}")
    # The file lives in root; it may not relocate it
    data.pop("root", None)
    return data


def load_config(root: Optional[Path] = None, **overrides: Any) -> CurriculumConfig:
    """Build the configuration for a curriculum.

    Precedence, lowest first: defaults, .curriculum.yaml, environment, overrides.
    None values in overrides are ignored so unset CLI options do not mask other sources.
    """
    base = CurriculumConfig() if root is None else CurriculumConfig(root=root)
    file_settings = load_file_settings(base.root)
    env_settings = base.model_dump(exclude_unset=True)

    values: Dict[str, Any] = {**file_settings, **env_settings}
    values.update({k: v for k, v in overrides.items() if v is not None})
    values["root"] = base.root
    return CurriculumConfig(**values)
