"""Configuration module for RWQI - runtime settings and scoring config."""

from .settings import (
    ConfigError,
    Settings,
    WQConfig,
    Thresholds,
    DOThresholds,
    BODThresholds,
    PHThresholds,
    ColiformThresholds,
)

__all__ = [
    'ConfigError',
    'Settings',
    'WQConfig',
    'Thresholds',
    'DOThresholds',
    'BODThresholds',
    'PHThresholds',
    'ColiformThresholds',
]
