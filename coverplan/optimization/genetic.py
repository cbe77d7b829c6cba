"""
Genetic algorithm for minimum set cover.

A chromosome holds one boolean gene per camera, in ascending camera-id
order. Invalid chromosomes (selections that leave a cell uncovered) have
fitness 0; valid ones score ``2 * cameras - selected``, so smaller covers
are fitter and every valid cover beats every invalid one.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import numpy as np

from coverplan.matrix.coverage import CoverageMatrix
from coverplan.optimization.objectives import SetCoverInstance, Solution

Problem = Union[CoverageMatrix, SetCoverInstance]
Seed = Optional[Union[int, np.random.Generator]]

TOURNAMENT_SIZE = 3
GENE_ON_PROBABILITY = 0.3


@dataclass
class Chromosome:
    """
    Candidate solution of the genetic algorithm.

    Attributes:
        genes: Boolean array, one entry per camera (ascending id order)
        fitness: Cached fitness
        is_valid: Cached validity flag
    """
    genes: np.ndarray
    fitness: float = 0.0
    is_valid: bool = False

    def copy(self) -> "Chromosome":
        return Chromosome(self.genes.copy(), self.fitness, self.is_valid)

    @property
    def selected_count(self) -> int:
        return int(self.genes.sum())


def selected_cameras(instance: SetCoverInstance, genes: np.ndarray) -> List[int]:
    """Camera ids switched on by a gene vector."""
    return [camera for camera, gene in zip(instance.cameras, genes) if gene]


def calculate_fitness(genes: np.ndarray, is_valid: bool) -> float:
    """0 for invalid chromosomes, else ``2 * len(genes) - selected``."""
    if not is_valid:
        return 0.0
    total = len(genes)
    return float(2 * total - int(np.count_nonzero(genes)))


def evaluate(instance: SetCoverInstance, chromosome: Chromosome) -> Chromosome:
    """Refresh the cached validity and fitness of a chromosome in place."""
    chromosome.is_valid = instance.is_valid(selected_cameras(instance, chromosome.genes))
    chromosome.fitness = calculate_fitness(chromosome.genes, chromosome.is_valid)
    return chromosome


def random_chromosome(length: int, rng: np.random.Generator) -> np.ndarray:
    """Genes independently on with probability 0.3."""
    return rng.random(length) > 1 - GENE_ON_PROBABILITY


def initialize_population(
    instance: SetCoverInstance,
    population_size: int,
    rng: np.random.Generator,
) -> List[Chromosome]:
    return [
        evaluate(instance, Chromosome(random_chromosome(len(instance.cameras), rng)))
        for _ in range(population_size)
    ]


def tournament_selection(population: List[Chromosome], rng: np.random.Generator) -> Chromosome:
    """Best of three random individuals (first drawn wins ties)."""
    best = population[int(rng.integers(len(population)))]
    for _ in range(1, TOURNAMENT_SIZE):
        candidate = population[int(rng.integers(len(population)))]
        if candidate.fitness > best.fitness:
            best = candidate
    return best


def crossover(parent1: Chromosome, parent2: Chromosome, rng: np.random.Generator) -> Chromosome:
    """Single-point crossover: parent1 genes before the cut, parent2 genes after."""
    point = int(rng.integers(len(parent1.genes)))
    genes = np.concatenate([parent1.genes[:point], parent2.genes[point:]])
    return Chromosome(genes)


def mutate(chromosome: Chromosome, mutation_rate: float, rng: np.random.Generator) -> Chromosome:
    """Flip every gene independently with probability ``mutation_rate``."""
    flips = rng.random(len(chromosome.genes)) < mutation_rate
    return Chromosome(chromosome.genes ^ flips)


def chromosome_to_solution(instance: SetCoverInstance, chromosome: Chromosome) -> Solution:
    return instance.make_solution(selected_cameras(instance, chromosome.genes))


def genetic_algorithm(
    problem: Problem,
    population_size: int = 20,
    generations: int = 100,
    crossover_rate: float = 0.9,
    mutation_rate: float = 0.4,
    elitism_count: int = 20,
    seed: Seed = None,
    callback: Optional[Callable[[int, Chromosome], None]] = None,
) -> Solution:
    """
    Minimize the number of selected cameras with a genetic algorithm.

    Every generation the population is evaluated and sorted by fitness, the
    top ``elitism_count`` chromosomes are copied unchanged, and the rest of
    the next generation is bred by tournament selection, single-point
    crossover (with probability ``crossover_rate``, else a clone of the
    first parent) and per-gene mutation. The mutation rate decays by 5%
    every 50 generations, down to 0.01.

    With the default population of 20 and elitism of 20 the population is
    fully elitist.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        population_size: Number of chromosomes.
        generations: Number of generations.
        crossover_rate: Probability of crossover.
        mutation_rate: Initial per-gene flip probability.
        elitism_count: Chromosomes copied unchanged per generation.
        seed: Random seed or numpy Generator.
        callback: Optional ``callback(generation, best_chromosome)`` called
            after every generation.

    Returns:
        Solution of the best valid chromosome seen, or of the first initial
        chromosome if no valid one was ever found.
    """
    rng = np.random.default_rng(seed)
    instance = SetCoverInstance.of(problem)
    if not instance.cameras or population_size <= 0:
        return Solution()

    population = initialize_population(instance, population_size, rng)
    best = population[0].copy()
    elites = min(elitism_count, population_size)

    for generation in range(generations):
        for chromosome in population:
            evaluate(instance, chromosome)
        population.sort(key=lambda c: -c.fitness)

        if population[0].is_valid and population[0].fitness > best.fitness:
            best = population[0].copy()

        next_population = [chromosome.copy() for chromosome in population[:elites]]
        while len(next_population) < population_size:
            parent1 = tournament_selection(population, rng)
            parent2 = tournament_selection(population, rng)

            if rng.random() < crossover_rate:
                child = crossover(parent1, parent2, rng)
            else:
                child = parent1.copy()

            next_population.append(mutate(child, mutation_rate, rng))

        population = next_population

        if generation % 50 == 0 and generation > 0:
            mutation_rate = max(0.01, mutation_rate * 0.95)

        if callback is not None:
            callback(generation, best)

    for chromosome in population:
        evaluate(instance, chromosome)
    population.sort(key=lambda c: -c.fitness)

    for chromosome in population:
        if chromosome.is_valid and chromosome.fitness > best.fitness:
            best = chromosome

    return chromosome_to_solution(instance, best)
