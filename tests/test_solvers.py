"""
Tests for coverplan.optimization module.

These tests verify the set-cover heuristics and the solver runner on small
hand-built matrices.
"""

import math

import pytest
import numpy as np


def _matrix():
    """
    Five cameras over cells 1-5; camera 5 covers nothing.

        camera 1: {1, 2, 3}
        camera 2: {3, 4}
        camera 3: {4, 5}
        camera 4: {1, 5}

    The only 2-camera cover is {1, 3}.
    """
    from coverplan.matrix.coverage import CoverageMatrix

    coverage = {1: {1, 2, 3}, 2: {3, 4}, 3: {4, 5}, 4: {1, 5}, 5: set()}
    return CoverageMatrix({
        camera: {cell: cell in cells for cell in range(1, 6)}
        for camera, cells in coverage.items()
    })


def _single_camera_matrix(n_cameras=6, winner=4, n_cells=10):
    """One camera covers every cell, the others cover nothing."""
    from coverplan.matrix.coverage import CoverageMatrix

    return CoverageMatrix({
        camera: {cell: camera == winner for cell in range(1, n_cells + 1)}
        for camera in range(1, n_cameras + 1)
    })


class TestSetCoverInstance:
    """Tests for SetCoverInstance, Solution and metrics."""

    def test_coverage_and_validity(self):
        """Test shared coverage / is_valid primitives."""
        from coverplan.optimization.objectives import SetCoverInstance

        instance = SetCoverInstance(_matrix())

        assert instance.cameras == [1, 2, 3, 4, 5]
        assert instance.universe == frozenset({1, 2, 3, 4, 5})
        assert instance.coverage(2) == frozenset({3, 4})
        assert instance.is_valid([1, 3])
        assert not instance.is_valid([1, 2])

    def test_is_valid_accepts_solution(self):
        """Test module-level is_valid on a Solution."""
        from coverplan.optimization.objectives import Solution, is_valid

        assert is_valid(_matrix(), Solution([1, 3]))
        assert not is_valid(_matrix(), [4])

    def test_solution_to_dict(self):
        """Test the solver output document."""
        from coverplan.optimization.objectives import Solution

        solution = Solution([3, 1], {5, 1, 2, 4, 3})
        data = solution.to_dict()

        assert data == {
            "selectedCameras": [3, 1],
            "coveredCells": [1, 2, 3, 4, 5],
            "totalCameras": 2,
        }
        assert Solution.from_dict(data) == solution

    def test_evaluate_solution(self):
        """Test quality metrics."""
        from coverplan.optimization.objectives import Solution, evaluate_solution

        metrics = evaluate_solution(_matrix(), Solution([1, 2, 3]))

        assert metrics["cameras"] == 3
        assert metrics["coverage"] == 1.0
        assert metrics["uncovered_cells"] == []
        assert metrics["max_cameras_per_cell"] == 2
        assert metrics["avg_cameras_per_cell"] == pytest.approx(1.4)
        assert metrics["is_valid"]

    def test_evaluate_incomplete_solution(self):
        """Test metrics of a non-covering selection."""
        from coverplan.optimization.objectives import Solution, evaluate_solution

        metrics = evaluate_solution(_matrix(), Solution([2]))

        assert metrics["coverage"] == pytest.approx(0.4)
        assert metrics["uncovered_cells"] == [1, 2, 5]
        assert not metrics["is_valid"]


class TestGreedy:
    """Tests for greedy heuristics."""

    def test_greedy(self):
        """Test the deterministic greedy order."""
        from coverplan.optimization.greedy import greedy

        solution = greedy(_matrix())

        assert solution.selected_cameras == [1, 3]
        assert solution.covered_cells == {1, 2, 3, 4, 5}

    def test_greedy_tie_break(self):
        """Test ties go to the lowest camera id."""
        from coverplan.matrix.coverage import CoverageMatrix
        from coverplan.optimization.greedy import greedy

        matrix = CoverageMatrix({2: {1: True}, 1: {1: True}})
        assert greedy(matrix).selected_cameras == [1]

    def test_greedy_single_camera(self):
        """Test one camera covering everything is selected alone."""
        from coverplan.optimization.greedy import greedy

        assert greedy(_single_camera_matrix()).selected_cameras == [4]

    def test_greedy_incomplete(self):
        """Test greedy stops when no camera improves coverage."""
        from coverplan.matrix.coverage import CoverageMatrix
        from coverplan.optimization.greedy import greedy
        from coverplan.optimization.objectives import is_valid

        matrix = CoverageMatrix({1: {1: True, 2: False}, 2: {1: False, 2: False}})
        solution = greedy(matrix)

        assert solution.selected_cameras == [1]
        assert not is_valid(matrix, solution)

    def test_randomized_greedy_k1_is_greedy(self):
        """Test a top-1 candidate list reproduces greedy."""
        from coverplan.optimization.greedy import greedy, randomized_greedy

        solution = randomized_greedy(_matrix(), randomness_factor=0.1, seed=0)
        assert solution.selected_cameras == greedy(_matrix()).selected_cameras

    def test_top_k_candidates(self):
        """Test candidates are ranked by marginal coverage."""
        from coverplan.optimization.greedy import top_k_candidates
        from coverplan.optimization.objectives import SetCoverInstance

        instance = SetCoverInstance(_matrix())
        candidates = top_k_candidates(instance, instance.cameras, {1, 2, 3, 4, 5}, 3)

        assert candidates == [1, 2, 3]

    def test_randomized_greedy_reproducible(self):
        """Test seeded randomized greedy."""
        from coverplan.matrix.coverage import CoverageMatrix
        from coverplan.optimization.greedy import randomized_greedy

        rng = np.random.default_rng(11)
        matrix = CoverageMatrix.from_array(rng.random((30, 60)) < 0.15)

        a = randomized_greedy(matrix, randomness_factor=0.5, seed=4)
        b = randomized_greedy(matrix, randomness_factor=0.5, seed=4)
        assert a == b

    def test_multi_start_not_worse_than_single(self):
        """Test the multi-start wrapper keeps the smallest solution."""
        from coverplan.optimization.greedy import multi_start_randomized_greedy, randomized_greedy
        from coverplan.optimization.objectives import is_valid

        # The first restart draws from the same stream as a single seeded run
        single = randomized_greedy(_matrix(), randomness_factor=0.6, seed=2)
        solution = multi_start_randomized_greedy(_matrix(), iterations=10, randomness_factor=0.6, seed=2)

        assert is_valid(_matrix(), solution)
        assert solution.total_cameras <= single.total_cameras


class TestLocalSearch:
    """Tests for local search."""

    def test_removals(self):
        """Test redundant cameras are dropped."""
        from coverplan.optimization.local_search import local_search
        from coverplan.optimization.objectives import Solution

        solution = local_search(_matrix(), Solution([1, 2, 3, 4]))

        assert solution.selected_cameras == [1, 3]
        assert solution.covered_cells == {1, 2, 3, 4, 5}

    def test_two_for_one_swap(self):
        """Test two cameras are replaced by one covering both."""
        from coverplan.matrix.coverage import CoverageMatrix
        from coverplan.optimization.local_search import local_search
        from coverplan.optimization.objectives import Solution

        matrix = CoverageMatrix({
            1: {1: True, 2: True, 3: False, 4: False},
            2: {1: False, 2: False, 3: True, 4: True},
            3: {1: True, 2: True, 3: True, 4: True},
        })
        solution = local_search(matrix, Solution([1, 2]))

        assert solution.selected_cameras == [3]

    def test_zero_iterations(self):
        """Test a zero pass budget returns the input selection."""
        from coverplan.optimization.local_search import local_search
        from coverplan.optimization.objectives import Solution

        solution = local_search(_matrix(), Solution([1, 2, 3, 4]), max_iterations=0)
        assert solution.selected_cameras == [1, 2, 3, 4]

    def test_multi_start_single_camera(self):
        """Test greedy + local search restarts on a single-camera cover."""
        from coverplan.optimization.local_search import multi_start_greedy_with_local_search

        solution = multi_start_greedy_with_local_search(_single_camera_matrix())
        assert solution.selected_cameras == [4]


class TestSimulatedAnnealing:
    """Tests for simulated annealing."""

    def test_acceptance_probability(self):
        """Test the Metropolis criterion."""
        from coverplan.optimization.annealing import acceptance_probability

        assert acceptance_probability(5, 4, 10.0) == 1.0
        assert acceptance_probability(5, 5, 10.0) == 1.0
        assert acceptance_probability(4, 5, 1.0) == pytest.approx(math.exp(-1))

    def test_best_is_always_valid(self):
        """Test the best-known solution covers every cell at every step."""
        from coverplan.optimization.annealing import simulated_annealing
        from coverplan.optimization.objectives import SetCoverInstance

        instance = SetCoverInstance(_matrix())
        steps = []

        def check(step, current, best):
            steps.append(step)
            assert instance.is_valid(best.selected_cameras)

        solution = simulated_annealing(instance, seed=0, callback=check)

        assert len(steps) > 0
        assert instance.is_valid(solution.selected_cameras)
        assert solution.total_cameras == 2

    def test_max_iterations(self):
        """Test the step budget."""
        from coverplan.optimization.annealing import simulated_annealing

        steps = []
        simulated_annealing(_matrix(), max_iterations=7, seed=1,
                            callback=lambda step, current, best: steps.append(step))
        assert steps == list(range(1, 8))

    def test_single_camera(self):
        """Test annealing keeps a single-camera cover."""
        from coverplan.optimization.annealing import simulated_annealing

        solution = simulated_annealing(_single_camera_matrix(), seed=3)
        assert solution.selected_cameras == [4]

    def test_reproducible(self):
        """Test seeded runs are identical."""
        from coverplan.optimization.annealing import simulated_annealing

        a = simulated_annealing(_matrix(), seed=5)
        b = simulated_annealing(_matrix(), seed=5)
        assert a == b


class TestGeneticAlgorithm:
    """Tests for the genetic algorithm."""

    def test_fitness(self):
        """Test fitness of valid and invalid chromosomes."""
        from coverplan.optimization.genetic import calculate_fitness

        genes = np.array([True, False, True])
        assert calculate_fitness(genes, True) == 4
        assert calculate_fitness(genes, False) == 0

    def test_crossover(self):
        """Test single-point crossover keeps a prefix of parent 1."""
        from coverplan.optimization.genetic import Chromosome, crossover

        rng = np.random.default_rng(0)
        parent1 = Chromosome(np.ones(10, dtype=bool))
        parent2 = Chromosome(np.zeros(10, dtype=bool))

        for _ in range(20):
            child = crossover(parent1, parent2, rng)
            genes = child.genes
            assert len(genes) == 10
            cut = int(genes.sum())
            assert genes[:cut].all() and not genes[cut:].any()

    def test_mutation_extremes(self):
        """Test mutation rates 0 and 1."""
        from coverplan.optimization.genetic import Chromosome, mutate

        rng = np.random.default_rng(0)
        genes = np.array([True, False, True, False])
        chromosome = Chromosome(genes)

        assert (mutate(chromosome, 0.0, rng).genes == genes).all()
        assert (mutate(chromosome, 1.0, rng).genes == ~genes).all()

    def test_tournament_prefers_fitter(self):
        """Test tournament selection on a population with one fit member."""
        from coverplan.optimization.genetic import Chromosome, tournament_selection

        rng = np.random.default_rng(0)
        population = [Chromosome(np.zeros(3, dtype=bool), fitness=0.0) for _ in range(2)]
        population.append(Chromosome(np.ones(3, dtype=bool), fitness=5.0))

        picks = [tournament_selection(population, rng).fitness for _ in range(50)]
        assert max(picks) == 5.0
        assert np.mean(picks) > 5.0 / 3

    def test_best_fitness_monotonic_with_full_elitism(self):
        """Test best-ever fitness never decreases."""
        from coverplan.optimization.genetic import genetic_algorithm

        history = []
        genetic_algorithm(
            _matrix(),
            population_size=10,
            generations=40,
            elitism_count=10,
            seed=7,
            callback=lambda generation, best: history.append(best.fitness),
        )

        assert len(history) == 40
        assert all(b >= a for a, b in zip(history, history[1:]))

    def test_finds_valid_cover(self):
        """Test a breeding population finds a cover."""
        from coverplan.optimization.genetic import genetic_algorithm
        from coverplan.optimization.objectives import is_valid

        solution = genetic_algorithm(
            _matrix(), population_size=20, generations=50, elitism_count=2, seed=1,
        )
        assert is_valid(_matrix(), solution)

    def test_reproducible(self):
        """Test seeded runs are identical."""
        from coverplan.optimization.genetic import genetic_algorithm

        a = genetic_algorithm(_matrix(), elitism_count=4, seed=9)
        b = genetic_algorithm(_matrix(), elitism_count=4, seed=9)
        assert a == b


class TestEmptyMatrix:
    """Tests for solvers on an empty matrix."""

    @pytest.mark.parametrize("method", [
        "greedy",
        "randomized_greedy",
        "multi_start_randomized_greedy",
        "greedy_local_search",
        "multi_start_greedy_local_search",
        "simulated_annealing",
        "genetic",
    ])
    def test_empty(self, method):
        """Test every solver returns an empty, valid solution."""
        from coverplan.matrix.coverage import CoverageMatrix
        from coverplan.optimization.runner import solve

        result = solve(CoverageMatrix(), method=method, seed=0)

        assert result.success
        assert result.total_cameras == 0
        assert result.is_valid


class TestRunner:
    """Tests for solve and run_comparison."""

    def test_unknown_method(self):
        """Test that an unknown solver is rejected."""
        from coverplan.optimization.runner import solve

        with pytest.raises(ValueError):
            solve(_matrix(), method="branch_and_bound")

    def test_solve_result(self):
        """Test result metadata."""
        from coverplan.optimization.runner import solve

        result = solve(_matrix(), method="greedy")
        data = result.to_dict()

        assert result.success
        assert result.is_valid
        assert data["selectedCameras"] == [1, 3]
        assert data["method"] == "greedy"
        assert data["runtime_seconds"] >= 0

    def test_solver_kwargs(self):
        """Test extra keyword arguments reach the solver."""
        from coverplan.optimization.runner import solve

        result = solve(_matrix(), method="simulated_annealing", seed=0, max_iterations=3)
        assert result.is_valid

    def test_valid_solutions_cover_universe(self):
        """Test every valid solution covers every cell of the matrix."""
        from coverplan.optimization.runner import SOLVERS, run_comparison

        results = run_comparison(_matrix(), seed=0, verbose=False)

        assert list(results) == list(SOLVERS)
        for result in results.values():
            assert result.success
            if result.is_valid:
                assert result.solution.covered_cells == {1, 2, 3, 4, 5}

    def test_comparison_prints_summary(self, capsys):
        """Test verbose comparison output."""
        from coverplan.optimization.runner import run_comparison

        run_comparison(_matrix(), methods=["greedy", "greedy_local_search"], verbose=True)
        out = capsys.readouterr().out

        assert "COMPARISON SUMMARY" in out
        assert "greedy_local_search" in out
