#!/usr/bin/env python3
"""
Basic usage example for the coverplan camera placement planner.

This script demonstrates the core functionality of the coverplan package:
1. Building a scene (fixed reference room or random room)
2. Building and reducing the coverage matrix
3. Selecting cameras with the set-cover heuristics
4. Writing the interchange documents
"""

import json
from pathlib import Path

from coverplan import CoverplanConfig, plan_coverage, solve
from coverplan.optimization import evaluate_solution, run_comparison
from coverplan.scene import generate_room_scenario, reference_scenario


def example_reference_room():
    """Example: Plan coverage of the reference room."""
    print("=" * 60)
    print("REFERENCE ROOM EXAMPLE")
    print("=" * 60)

    scenario = reference_scenario()

    print("\n1. Building coverage matrix...")
    report = plan_coverage(
        None,
        scenario.obstacles,
        scenario.target_areas,
        scenario.cameras,
        verbose=True,
    )

    print("\n2. Selecting cameras...")
    result = solve(report.matrix, method="greedy")
    metrics = evaluate_solution(report.matrix, result.solution)

    print("\n3. Results:")
    print(f"   Selected cameras: {result.solution.selected_cameras}")
    print(f"   Coverage: {metrics['coverage']:.1%}")
    print(f"   Max cameras per cell: {metrics['max_cameras_per_cell']}")
    if report.infeasible_cells:
        print(f"   Cells no camera can see: {len(report.infeasible_cells)}")

    return report, result


def example_random_room(seed=42):
    """Example: Compare solvers on a random room."""
    print("\n" + "=" * 60)
    print("RANDOM ROOM EXAMPLE")
    print("=" * 60)

    scenario = generate_room_scenario(6, 6, camera_probability=0.05, seed=seed)
    print(f"\n   Obstacles: {len(scenario.obstacles)}")
    print(f"   Target areas: {len(scenario.target_areas)}")
    print(f"   Candidate cameras: {len(scenario.cameras)}")

    config = CoverplanConfig.fast()
    report = plan_coverage(
        config,
        scenario.obstacles,
        scenario.target_areas,
        scenario.cameras,
        verbose=True,
    )

    results = run_comparison(report.matrix, seed=seed, solver_config=config.solver)
    return report, results


def save_documents(report, result, output_dir="output"):
    """Write the coverage document and the solver output as JSON."""
    output_dir = Path(output_dir)
    output_dir.mkdir(exist_ok=True)

    with open(output_dir / "coverage.json", "w") as f:
        json.dump(report.to_dict(), f, indent=2)
    with open(output_dir / "solution.json", "w") as f:
        json.dump(result.to_dict(), f, indent=2)

    print(f"\nSaved documents to {output_dir}/")


def main():
    """Run all examples."""
    print("COVERPLAN CAMERA PLACEMENT EXAMPLES")
    print("=" * 60)

    report, result = example_reference_room()
    save_documents(report, result)

    example_random_room()

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
