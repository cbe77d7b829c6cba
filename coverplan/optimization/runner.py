"""
Solver runner for camera selection.

This module provides high-level functions for running the set-cover
heuristics on a coverage matrix and comparing them.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union
import time

from coverplan.config.settings import SolverConfig
from coverplan.matrix.coverage import CoverageMatrix
from coverplan.optimization.annealing import simulated_annealing
from coverplan.optimization.genetic import genetic_algorithm
from coverplan.optimization.greedy import (
    greedy,
    multi_start_randomized_greedy,
    randomized_greedy,
)
from coverplan.optimization.local_search import (
    greedy_with_local_search,
    multi_start_greedy_with_local_search,
)
from coverplan.optimization.objectives import SetCoverInstance, Solution


SOLVERS: Dict[str, Callable[..., Solution]] = {
    "greedy": greedy,
    "randomized_greedy": randomized_greedy,
    "multi_start_randomized_greedy": multi_start_randomized_greedy,
    "greedy_local_search": greedy_with_local_search,
    "multi_start_greedy_local_search": multi_start_greedy_with_local_search,
    "simulated_annealing": simulated_annealing,
    "genetic": genetic_algorithm,
}

RANDOMIZED_SOLVERS = frozenset({
    "randomized_greedy",
    "multi_start_randomized_greedy",
    "simulated_annealing",
    "genetic",
})


@dataclass
class SolverResult:
    """
    Result of a solver run.

    Attributes:
        solution: Selected cameras and covered cells
        method: Name of the solver used
        runtime_seconds: Wall-clock time of the run
        is_valid: Whether the solution covers every cell
        success: Whether the solver ran without error
        message: Status message
    """
    solution: Solution = field(default_factory=Solution)
    method: str = "unknown"
    runtime_seconds: float = 0.0
    is_valid: bool = False
    success: bool = True
    message: str = ""

    @property
    def total_cameras(self) -> int:
        return self.solution.total_cameras

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            **self.solution.to_dict(),
            "method": self.method,
            "runtime_seconds": self.runtime_seconds,
            "is_valid": self.is_valid,
            "success": self.success,
            "message": self.message,
        }


def solve(
    matrix: Union[CoverageMatrix, SetCoverInstance],
    method: str = "greedy",
    seed: Optional[int] = None,
    verbose: bool = False,
    **solver_kwargs,
) -> SolverResult:
    """
    Select a small set of cameras covering every cell.

    This is the main entry point for running a set-cover heuristic on a
    (reduced) coverage matrix.

    Args:
        matrix: Coverage matrix or SetCoverInstance.
        method: Solver name. Options:
            - "greedy": Deterministic greedy (default)
            - "randomized_greedy": Random pick among the top-K cameras
            - "multi_start_randomized_greedy": Best of several randomized runs
            - "greedy_local_search": Greedy improved by removals and swaps
            - "multi_start_greedy_local_search": Greedy + local search restarts
            - "simulated_annealing": Simulated annealing from greedy
            - "genetic": Genetic algorithm
        seed: Random seed, used by the randomized solvers.
        verbose: Print progress information.
        **solver_kwargs: Additional arguments for the specific solver.

    Returns:
        SolverResult with the solution and run metadata.

    Raises:
        ValueError: If the method is unknown.

    Example:
        >>> result = solve(report.matrix, method="simulated_annealing", seed=42)
        >>> print(result.solution.selected_cameras)
    """
    if method not in SOLVERS:
        raise ValueError(f"Unknown solver: {method}. Available: {list(SOLVERS.keys())}")

    instance = SetCoverInstance.of(matrix)
    if method in RANDOMIZED_SOLVERS:
        solver_kwargs.setdefault("seed", seed)

    if verbose:
        print("Camera selection")
        print(f"  Cameras: {len(instance.cameras)}")
        print(f"  Cells: {len(instance.cells)}")
        print(f"  Solver: {method}")

    t0 = time.time()

    try:
        solution = SOLVERS[method](instance, **solver_kwargs)
    except Exception as e:
        return SolverResult(
            method=method,
            runtime_seconds=time.time() - t0,
            success=False,
            message=str(e),
        )

    runtime = time.time() - t0
    valid = instance.is_valid(solution.selected_cameras)

    if verbose:
        print(f"  Selected: {solution.total_cameras} cameras (valid={valid})")

    return SolverResult(
        solution=solution,
        method=method,
        runtime_seconds=runtime,
        is_valid=valid,
        success=True,
        message="Solver completed successfully" if valid else "Some cells are not covered",
    )


def run_comparison(
    matrix: Union[CoverageMatrix, SetCoverInstance],
    methods: Optional[List[str]] = None,
    seed: int = 42,
    verbose: bool = True,
    solver_config: Optional[SolverConfig] = None,
) -> Dict[str, SolverResult]:
    """
    Run multiple solvers on the same matrix and compare results.

    Args:
        matrix: Coverage matrix or SetCoverInstance.
        methods: Solver names (default: all registered solvers).
        seed: Random seed.
        verbose: Print progress.
        solver_config: Solver parameters (default: SolverConfig()).

    Returns:
        Dict mapping solver name to SolverResult.
    """
    if methods is None:
        methods = list(SOLVERS.keys())
    if solver_config is None:
        solver_config = SolverConfig()

    instance = SetCoverInstance.of(matrix)
    results = {}

    for name in methods:
        if verbose:
            print(f"\n{'='*50}")
            print(f"Running {name}")
            print(f"{'='*50}")

        result = solve(
            instance,
            method=name,
            seed=seed,
            verbose=verbose,
            **solver_config.method_kwargs(name),
        )
        results[name] = result

        if verbose:
            print(f"  Cameras: {result.total_cameras}")
            print(f"  Runtime: {result.runtime_seconds:.2f}s")

    # Print summary
    if verbose:
        print(f"\n{'='*50}")
        print("COMPARISON SUMMARY")
        print(f"{'='*50}")
        ranked = sorted(
            results.items(),
            key=lambda item: (not item[1].is_valid, item[1].total_cameras),
        )
        for i, (name, res) in enumerate(ranked, 1):
            flag = "" if res.is_valid else "  INVALID"
            print(f"  {i}. {name:32s} {res.total_cameras:4d}  ({res.runtime_seconds:.2f}s){flag}")

    return results
