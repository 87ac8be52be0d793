from __future__ import annotations

import random
from collections.abc import Sequence

from chronoplan.services.scheduling.chromosome import Chromosome, clone, random_gene


def tournament_select(
    population: Sequence[Chromosome],
    fitness: Sequence[float],
    rng: random.Random,
    *,
    tournament_size: int = 3,
) -> Chromosome:
    # Contenders are drawn with replacement; the first of equally fit contenders wins.
    contenders = [rng.randrange(len(population)) for _ in range(tournament_size)]
    best_index = max(contenders, key=lambda idx: fitness[idx])
    return population[best_index]


def two_point_crossover(
    parent_a: Chromosome,
    parent_b: Chromosome,
    rate: float,
    rng: random.Random,
) -> tuple[Chromosome, Chromosome, tuple[int, int] | None]:
    if rng.random() >= rate:
        return parent_a, parent_b, None

    length = len(parent_a)
    point_a = rng.randrange(length) if length else 0
    point_b = point_a + (rng.randrange(length - point_a) if length > point_a else 0)

    child_a = parent_a[:point_a] + parent_b[point_a:point_b] + parent_a[point_b:]
    child_b = parent_b[:point_a] + parent_a[point_a:point_b] + parent_b[point_b:]
    return child_a, child_b, (point_a, point_b)


def mutate(
    chromosome: Chromosome,
    rate: float,
    *,
    timeslot_count: int,
    classroom_count: int,
    rng: random.Random,
) -> Chromosome:
    mutated = clone(chromosome)
    for index in range(len(mutated)):
        if rng.random() < rate:
            mutated[index] = random_gene(timeslot_count, classroom_count, rng)
    return mutated
