import random

from chronoplan.services.scheduling.chromosome import (
    Gene,
    clone,
    genes_in_bounds,
    initialize_population,
)
from chronoplan.services.scheduling.operators import mutate, tournament_select, two_point_crossover


class ScriptedRandom:
    def __init__(self, picks):
        self.picks = list(picks)

    def randrange(self, stop):
        return self.picks.pop(0)


def _chromosome(offset: int, length: int = 8):
    return [Gene(timeslot_index=offset, classroom_index=index) for index in range(length)]


def test_population_genes_stay_in_bounds():
    population = initialize_population(
        20,
        session_count=12,
        timeslot_count=5,
        classroom_count=3,
        rng=random.Random(3),
    )

    assert len(population) == 20
    assert all(len(chromosome) == 12 for chromosome in population)
    assert all(genes_in_bounds(chromosome, timeslot_count=5, classroom_count=3) for chromosome in population)


def test_clone_shares_no_list_storage():
    original = _chromosome(1)
    copy = clone(original)
    copy[0] = Gene(timeslot_index=9, classroom_index=9)

    assert original[0] == Gene(timeslot_index=1, classroom_index=0)


def test_crossover_rate_zero_returns_parents():
    parent_a, parent_b = _chromosome(0), _chromosome(1)

    child_a, child_b, cut_points = two_point_crossover(parent_a, parent_b, 0.0, random.Random(1))

    assert child_a is parent_a
    assert child_b is parent_b
    assert cut_points is None


def test_crossover_rate_one_swaps_middle_segment():
    parent_a, parent_b = _chromosome(0), _chromosome(1)

    for seed in range(25):
        child_a, child_b, cut_points = two_point_crossover(parent_a, parent_b, 1.0, random.Random(seed))
        point_a, point_b = cut_points

        assert 0 <= point_a <= point_b <= len(parent_a)
        assert len(child_a) == len(child_b) == len(parent_a)
        for index in range(len(parent_a)):
            swapped = point_a <= index < point_b
            assert child_a[index] == (parent_b[index] if swapped else parent_a[index])
            assert child_b[index] == (parent_a[index] if swapped else parent_b[index])


def test_mutation_rate_zero_copies_and_rate_one_stays_in_bounds():
    original = _chromosome(0)

    unchanged = mutate(original, 0.0, timeslot_count=4, classroom_count=8, rng=random.Random(5))
    assert unchanged == original
    assert unchanged is not original

    mutated = mutate(original, 1.0, timeslot_count=4, classroom_count=2, rng=random.Random(5))
    assert len(mutated) == len(original)
    assert genes_in_bounds(mutated, timeslot_count=4, classroom_count=2)


def test_tournament_picks_fittest_contender():
    population = [_chromosome(0), _chromosome(1), _chromosome(2)]
    fitness = [0.1, 0.9, 0.5]

    winner = tournament_select(population, fitness, ScriptedRandom([0, 2, 2]), tournament_size=3)

    assert winner is population[2]


def test_tournament_tie_keeps_first_contender():
    population = [_chromosome(0), _chromosome(1), _chromosome(2)]
    fitness = [0.4, 0.7, 0.7]

    winner = tournament_select(population, fitness, ScriptedRandom([2, 1, 0]), tournament_size=3)

    assert winner is population[2]
