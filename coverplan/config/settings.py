"""
Configuration settings for coverage planning.

This module provides typed configuration classes for grid discretization,
matrix construction and solver defaults, supporting loading from YAML/JSON
files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import json


def _require_yaml():
    """Import PyYAML, which backs the YAML config format."""
    try:
        import yaml
    except ImportError:
        raise ImportError(
            "YAML config files need PyYAML, a coverplan dependency. "
            "Reinstall with: pip install coverplan"
        )
    return yaml


@dataclass
class GridResolution:
    """
    Grid step sizes used to discretize target areas.

    Attributes:
        x: Step along the first in-plane axis
        y: Step along the second in-plane axis
    """
    x: float = 0.2
    y: float = 0.2

    def __post_init__(self):
        if self.x <= 0 or self.y <= 0:
            raise ValueError(f"Grid resolution must be positive, got ({self.x}, {self.y})")


@dataclass
class MatrixConfig:
    """
    Coverage matrix construction settings.

    Attributes:
        cells_per_chunk: Cells per parallel unit of work
        max_workers: Worker process count (None = CPU count)
        local_reduction: Prune dominated cells inside each worker
        parallel: Use worker processes (False = evaluate in-process)
    """
    cells_per_chunk: int = 500
    max_workers: Optional[int] = None
    local_reduction: bool = True
    parallel: bool = True


@dataclass
class SolverConfig:
    """
    Default parameters of the set-cover heuristics.

    Attributes:
        randomness_factor: Top-K fraction for multi-start randomized greedy
        random_greedy_iterations: Restarts of randomized greedy
        local_search_iterations: Pass budget of greedy + local search
        local_search_restarts: Restarts of multi-start greedy + local search
        initial_temperature: Simulated annealing start temperature
        cooling_rate: Simulated annealing temperature multiplier per step
        min_temperature: Simulated annealing stop temperature
        annealing_iterations: Simulated annealing step budget
        population_size: Genetic algorithm population size
        generations: Genetic algorithm generation count
        crossover_rate: Probability of crossover (else clone parent 1)
        mutation_rate: Initial per-gene flip probability
        elitism_count: Chromosomes copied unchanged per generation
        seed: Random seed for reproducibility
    """
    randomness_factor: float = 0.1
    random_greedy_iterations: int = 10
    local_search_iterations: int = 100
    local_search_restarts: int = 5

    initial_temperature: float = 1000.0
    cooling_rate: float = 0.95
    min_temperature: float = 0.1
    annealing_iterations: int = 80000

    population_size: int = 20
    generations: int = 100
    crossover_rate: float = 0.9
    mutation_rate: float = 0.4
    elitism_count: int = 20

    seed: Optional[int] = None

    def method_kwargs(self, method: str) -> dict:
        """Keyword arguments for a solver registered in the runner."""
        if method == "multi_start_randomized_greedy":
            return {
                "iterations": self.random_greedy_iterations,
                "randomness_factor": self.randomness_factor,
            }
        if method == "greedy_local_search":
            return {"max_iterations": self.local_search_iterations}
        if method == "multi_start_greedy_local_search":
            return {"iterations": self.local_search_restarts}
        if method == "simulated_annealing":
            return {
                "initial_temperature": self.initial_temperature,
                "cooling_rate": self.cooling_rate,
                "min_temperature": self.min_temperature,
                "max_iterations": self.annealing_iterations,
            }
        if method == "genetic":
            return {
                "population_size": self.population_size,
                "generations": self.generations,
                "crossover_rate": self.crossover_rate,
                "mutation_rate": self.mutation_rate,
                "elitism_count": self.elitism_count,
            }
        return {}


@dataclass
class CoverplanConfig:
    """
    Main coverage planning configuration.

    Attributes:
        grid_resolution: Target area discretization steps
        matrix: Coverage matrix construction settings
        solver: Set-cover heuristic defaults
    """
    grid_resolution: GridResolution = field(default_factory=GridResolution)
    matrix: MatrixConfig = field(default_factory=MatrixConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        def convert(obj):
            if hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert(v) for v in obj]
            else:
                return obj
        return convert(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CoverplanConfig":
        """
        Create from dictionary.

        Accepts both ``grid_resolution`` and the interchange key
        ``gridResolution``.
        """
        grid = data.get('grid_resolution', data.get('gridResolution', {}))
        return cls(
            grid_resolution=GridResolution(**grid),
            matrix=MatrixConfig(**data.get('matrix', {})),
            solver=SolverConfig(**data.get('solver', {})),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CoverplanConfig":
        """Load configuration from YAML file; an empty file gives defaults."""
        yaml = _require_yaml()
        return cls.from_dict(yaml.safe_load(Path(path).read_text()) or {})

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "CoverplanConfig":
        """Load configuration from JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file, keeping field order."""
        yaml = _require_yaml()
        Path(path).write_text(yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False))

    def to_json(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def fast(cls) -> "CoverplanConfig":
        """Preset with a coarse grid and short solver budgets, for quick checks."""
        return cls(
            grid_resolution=GridResolution(0.5, 0.5),
            matrix=MatrixConfig(parallel=False),
            solver=SolverConfig(
                random_greedy_iterations=3,
                local_search_iterations=25,
                local_search_restarts=2,
                annealing_iterations=1000,
                generations=20,
            ),
        )


_LOADERS = {
    '.yaml': CoverplanConfig.from_yaml,
    '.yml': CoverplanConfig.from_yaml,
    '.json': CoverplanConfig.from_json,
}


def load_config(path: Optional[Union[str, Path]] = None) -> CoverplanConfig:
    """
    Load a planning configuration, or the defaults when no path is given.

    The format is picked from the file suffix: .yaml/.yml or .json.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the suffix is not a supported format.
    """
    if path is None:
        return CoverplanConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No coverplan config at {path}")

    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise ValueError(
            f"Cannot read config {path.name}: expected one of {sorted(_LOADERS)}"
        )
    return loader(path)
