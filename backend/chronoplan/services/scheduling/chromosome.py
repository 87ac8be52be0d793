from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class Gene:
    timeslot_index: int
    classroom_index: int


# Genes are immutable, so a fresh list is a full value copy.
Chromosome = list[Gene]


def clone(chromosome: Chromosome) -> Chromosome:
    return list(chromosome)


def random_gene(timeslot_count: int, classroom_count: int, rng: random.Random) -> Gene:
    return Gene(
        timeslot_index=rng.randrange(timeslot_count),
        classroom_index=rng.randrange(classroom_count),
    )


def random_chromosome(
    session_count: int,
    timeslot_count: int,
    classroom_count: int,
    rng: random.Random,
) -> Chromosome:
    return [random_gene(timeslot_count, classroom_count, rng) for _ in range(session_count)]


def initialize_population(
    population_size: int,
    *,
    session_count: int,
    timeslot_count: int,
    classroom_count: int,
    rng: random.Random,
) -> list[Chromosome]:
    return [
        random_chromosome(session_count, timeslot_count, classroom_count, rng)
        for _ in range(population_size)
    ]


def genes_in_bounds(chromosome: Chromosome, *, timeslot_count: int, classroom_count: int) -> bool:
    return all(
        0 <= gene.timeslot_index < timeslot_count and 0 <= gene.classroom_index < classroom_count
        for gene in chromosome
    )
