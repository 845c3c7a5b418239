from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .core.crack_time import ThroughputConfig
from .core.exceptions import InvalidThroughputConfiguration

CONFIG_ENV_VAR = "PASSFAULT_CONFIG"


class StrategyEnum(str, Enum):
    EXACT = "exact"
    LOWERCASE = "lowercase"
    SUBSTITUTION = "substitution"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LoggingConfig(BaseModel):
    level: LogLevelEnum = Field(LogLevelEnum.WARNING)
    format: str = Field("%(asctime)s | %(name)s | %(levelname)s | %(message)s")
    datefmt: str = Field("%Y-%m-%d %H:%M:%S")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class FinderConfig(BaseModel):
    repeats: bool = Field(True)
    sequences: bool = Field(True)
    keyboard: bool = Field(True)
    dates: bool = Field(True)
    # Bundled/catalogued word list names; empty means every list found
    word_lists: list[str] = Field(default_factory=list)
    wordlist_dirs: list[Path] = Field(default_factory=list)
    include_system_wordlists: bool = Field(False)
    custom_dictionary: Path | None = Field(None)
    custom_only: bool = Field(False)
    in_memory: bool = Field(True)
    strategies: list[StrategyEnum] = Field(
        default_factory=lambda: [StrategyEnum.EXACT, StrategyEnum.LOWERCASE, StrategyEnum.SUBSTITUTION]
    )
    min_word_length: int = Field(3, ge=1, le=32)

    @field_validator("wordlist_dirs")
    @classmethod
    def _expand_dirs(cls, value: list[Path]) -> list[Path]:
        return [p.expanduser() for p in value]

    @field_validator("custom_dictionary")
    @classmethod
    def _expand_custom(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("strategies")
    @classmethod
    def _validate_strategies(cls, value: list[StrategyEnum]) -> list[StrategyEnum]:
        if not value:
            raise ValueError("strategies cannot be empty")
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _custom_only_needs_dictionary(self) -> FinderConfig:
        if self.custom_only and self.custom_dictionary is None:
            raise ValueError("custom_only requires custom_dictionary")
        return self


class AnalysisConfig(BaseModel):
    parallel: bool = Field(True)
    max_workers: int | None = Field(None, ge=1, le=256)
    timeout_seconds: float | None = Field(None, gt=0)
    min_password_length: int = Field(4, ge=1)


class CrackTimeConfig(BaseModel):
    guesses_per_second: float | None = Field(None, gt=0)
    units: int | None = Field(None, ge=1)
    hash_function: str | None = Field(None)

    @model_validator(mode="after")
    def _check_throughput(self) -> CrackTimeConfig:
        if self.is_set:
            try:
                self.to_throughput()
            except InvalidThroughputConfiguration as exc:
                raise ValueError(str(exc)) from exc
        return self

    @property
    def is_set(self) -> bool:
        return any(v is not None for v in (self.guesses_per_second, self.units, self.hash_function))

    def to_throughput(self) -> ThroughputConfig | None:
        """Throughput for the crack-time model, or None when nothing is configured."""
        if not self.is_set:
            return None
        return ThroughputConfig(
            guesses_per_second=self.guesses_per_second,
            units=self.units,
            hash_function=self.hash_function,
        )


class PassfaultConfig(BaseModel):
    finders: FinderConfig = Field(default_factory=FinderConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    crack_time: CrackTimeConfig = Field(default_factory=CrackTimeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Path) -> PassfaultConfig:
    with Path(path).expanduser().open("r", encoding="utf-8") as fp:
        raw = yaml.safe_load(fp) or {}
    try:
        return PassfaultConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


def resolve_config_path(cli_path: Path | None) -> Path:
    """Resolve config path by priority: CLI, env, /etc/passfault, repo configs."""
    candidates: list[Path] = []
    if cli_path:
        p = Path(cli_path).expanduser()
        if p.exists():
            return p.resolve()
        candidates.append(p)
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        p = Path(env).expanduser()
        if p.exists():
            return p.resolve()
        candidates.append(p)
    for p in [Path("/etc/passfault/passfault.yml"), Path("configs/passfault.yml")]:
        if p.exists():
            return p.resolve()
        candidates.append(p)
    return candidates[0] if candidates else Path("configs/passfault.yml").resolve()


def setup_logging(cfg: LoggingConfig, verbose: bool = False) -> None:
    """Configure the root logger; ``verbose`` forces DEBUG."""
    level = logging.DEBUG if verbose else getattr(logging, cfg.level.value)
    logging.basicConfig(level=level, format=cfg.format, datefmt=cfg.datefmt)
