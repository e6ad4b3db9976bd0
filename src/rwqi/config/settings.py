"""
Configuration for the RWQI service

Two layers of configuration, both read once at process start and treated as
immutable afterwards:

- WQConfig: scoring weights, per-parameter thresholds and the freshness bound.
  Defaults come from config/wqi.yaml (or the built-in values below when the file
  is absent) and may be overridden by the WQ_CONFIG_JSON environment variable.
- Settings: runtime knobs (cache TTL, upstream API key, fallback dataset ids,
  file locations, HTTP timeout).

Design Principles:
- Config-driven (no hardcoded thresholds in the calculator)
- Missing fields fall back to documented defaults
- Malformed overrides are rejected at startup with ConfigError
"""

import copy
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "https://data.gov.in/api/datastore/resource/search.json"
DEFAULT_WQ_CONFIG_FILE = Path("config") / "wqi.yaml"
DEFAULT_RIVERS_FILE = Path("data") / "rivers.json"


class ConfigError(Exception):
    """Raised when configuration cannot be parsed or validated"""
    pass


class DOThresholds(BaseModel):
    """Dissolved oxygen breakpoints (mg/L, higher is better)."""
    model_config = ConfigDict(allow_inf_nan=False)

    excellent: float = Field(6.0, gt=0)
    good: float = 5.0
    moderate: float = 4.0
    poor: float = 2.0


class BODThresholds(BaseModel):
    """Biochemical oxygen demand breakpoints (mg/L, lower is better)."""
    model_config = ConfigDict(allow_inf_nan=False)

    excellent: float = 2.0
    good: float = 3.0
    moderate: float = Field(5.0, gt=0)
    poor: float = 6.0


class PHThresholds(BaseModel):
    """Acceptable pH band (inclusive)."""
    model_config = ConfigDict(allow_inf_nan=False)

    min: float = 6.5
    max: float = 8.5

    @model_validator(mode="after")
    def check_band(self) -> "PHThresholds":
        if self.min > self.max:
            raise ValueError(f"pH min ({self.min}) must not exceed max ({self.max})")
        return self


class ColiformThresholds(BaseModel):
    """Total coliform breakpoints (MPN/100mL)."""
    model_config = ConfigDict(allow_inf_nan=False)

    excellent: float = 50.0
    good: float = 500.0
    moderate: float = 5000.0


class Thresholds(BaseModel):
    DO: DOThresholds = Field(default_factory=DOThresholds)
    BOD: BODThresholds = Field(default_factory=BODThresholds)
    pH: PHThresholds = Field(default_factory=PHThresholds)
    Coliforms: ColiformThresholds = Field(default_factory=ColiformThresholds)


def _default_weights() -> Dict[str, float]:
    return {"DO": 0.3, "BOD": 0.25, "pH": 0.15, "Coliforms": 0.2, "Others": 0.1}


class WQConfig(BaseModel):
    """Water quality scoring configuration."""

    weights: Dict[str, float] = Field(default_factory=_default_weights)
    thresholds: Thresholds = Field(default_factory=Thresholds)
    freshness_seconds: int = Field(60 * 60 * 24 * 7, ge=0, description="Advisory staleness bound")

    @field_validator("weights")
    @classmethod
    def check_weights(cls, weights: Dict[str, float]) -> Dict[str, float]:
        invalid = [name for name, w in weights.items() if not math.isfinite(w) or w < 0]
        if invalid:
            raise ValueError(f"Weights must be finite and non-negative, got invalid weights for {invalid}")
        return weights

    def weight(self, parameter: str) -> float:
        """Weight for a parameter; parameters without a weight contribute nothing."""
        return self.weights.get(parameter, 0.0)

    @classmethod
    def from_yaml(cls, config_path: Path, overrides: Optional[Dict[str, Any]] = None) -> "WQConfig":
        """
        Load configuration from a YAML file, then apply overrides.

        Args:
            config_path: Path to wqi.yaml; built-in defaults are used if it doesn't exist
            overrides: Partial config (same schema) deep-merged on top of the file

        Returns:
            Validated WQConfig

        Raises:
            ConfigError: If the file or overrides are malformed
        """
        base: Dict[str, Any] = cls().model_dump()

        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigError(f"{config_path} must contain a mapping")
            base = _deep_merge(base, file_config)
        else:
            logger.info(f"WQ config file not found at {config_path}, using built-in defaults")

        if overrides:
            base = _deep_merge(base, overrides)

        try:
            return cls.model_validate(base)
        except ValidationError as e:
            raise ConfigError(f"Invalid water quality config: {e}") from e


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def parse_json_env(name: str, raw: Optional[str], expected: type) -> Any:
    """
    Parse a JSON-valued environment variable.

    Returns None when the variable is unset or blank.

    Raises:
        ConfigError: If the value isn't valid JSON of the expected type
    """
    if raw is None or not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{name} is not valid JSON: {e}") from e
    if not isinstance(value, expected):
        raise ConfigError(f"{name} must be a JSON {expected.__name__}, got {type(value).__name__}")
    return value


class Settings(BaseModel):
    """Process-wide runtime settings."""

    cache_ttl_seconds: float = Field(600, gt=0)
    datagov_api_key: str = ""
    datagov_dataset_ids: List[str] = Field(default_factory=list)
    datagov_base_url: str = DEFAULT_BASE_URL
    http_timeout_seconds: float = Field(15.0, gt=0)
    rivers_file: Path = DEFAULT_RIVERS_FILE
    log_level: str = "INFO"
    wq_config: WQConfig = Field(default_factory=WQConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables (and a .env file if present).

        Raises:
            ConfigError: If any variable is malformed
        """
        load_dotenv()

        dataset_ids = parse_json_env(
            "DATAGOV_DATASET_IDS", os.getenv("DATAGOV_DATASET_IDS"), list
        ) or []
        overrides = parse_json_env("WQ_CONFIG_JSON", os.getenv("WQ_CONFIG_JSON"), dict)

        wq_config = WQConfig.from_yaml(
            Path(os.getenv("WQ_CONFIG_FILE", str(DEFAULT_WQ_CONFIG_FILE))),
            overrides=overrides,
        )

        try:
            return cls(
                cache_ttl_seconds=os.getenv("CACHE_TTL_SECONDS", "600"),
                datagov_api_key=os.getenv("DATAGOV_API_KEY", ""),
                datagov_dataset_ids=[str(d).strip() for d in dataset_ids if d is not None and str(d).strip()],
                datagov_base_url=os.getenv("DATAGOV_BASE_URL", DEFAULT_BASE_URL),
                http_timeout_seconds=os.getenv("HTTP_TIMEOUT_SECONDS", "15"),
                rivers_file=Path(os.getenv("RIVERS_FILE", str(DEFAULT_RIVERS_FILE))),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                wq_config=wq_config,
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e
