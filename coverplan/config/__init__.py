"""
Configuration management for coverplan.

This module provides dataclass-based configuration with YAML/JSON loading.
"""

from coverplan.config.settings import (
    CoverplanConfig,
    GridResolution,
    MatrixConfig,
    SolverConfig,
    load_config,
)

__all__ = [
    "CoverplanConfig",
    "GridResolution",
    "MatrixConfig",
    "SolverConfig",
    "load_config",
]
