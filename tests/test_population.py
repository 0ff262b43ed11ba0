"""Tests for the generational GA driver."""

from __future__ import annotations

import random

import pytest

from polygon_evolution import EvolutionConfig, FitnessEvaluator, PolygonChromosome, Population


def test_population_is_seeded_with_configured_shape(small_config, rng) -> None:
    pop = Population(small_config, rng)

    assert len(pop.chromosomes) == small_config.population_size
    assert all(len(c) == small_config.polygon_count for c in pop.chromosomes)
    assert all(p.vertex_count == small_config.vertex_count for c in pop.chromosomes for p in c)


def test_seeded_populations_are_identical(small_config) -> None:
    first = Population(small_config, random.Random(3))
    second = Population(small_config, random.Random(3))

    assert first.chromosomes == second.chromosomes


def test_invalid_configuration_fails_at_setup(rng) -> None:
    with pytest.raises(ValueError):
        Population(EvolutionConfig(vertex_count=2), rng)


def test_evaluate_tracks_best_ever(small_config, rng, target) -> None:
    pop = Population(small_config, rng)
    evaluator = FitnessEvaluator(target, supersample=1)

    scores = pop.evaluate(evaluator)

    assert len(scores) == small_config.population_size
    assert pop.best_fitness == max(scores)
    assert pop.best in pop.chromosomes


def test_selection_requires_evaluation(small_config, rng) -> None:
    pop = Population(small_config, rng)

    with pytest.raises(RuntimeError):
        pop.evolve_generation()


def test_evolve_keeps_size_and_elites(small_config, rng, target) -> None:
    pop = Population(small_config, rng)
    evaluator = FitnessEvaluator(target, supersample=1)
    pop.evaluate(evaluator)
    elites = pop.get_best(pop.elite_count())

    pop.evolve_generation()

    assert pop.generation == 1
    assert len(pop.chromosomes) == small_config.population_size
    assert pop.chromosomes[:len(elites)] == elites
    assert pop.fitnesses == []


def test_best_ever_never_decreases(small_config, rng, target) -> None:
    pop = Population(small_config, rng)
    evaluator = FitnessEvaluator(target, supersample=1)

    history = []
    for _ in range(5):
        pop.evaluate(evaluator)
        history.append(pop.best_fitness)
        pop.evolve_generation()

    assert history == sorted(history)


def test_threaded_evaluation_matches_sequential(small_config, target) -> None:
    evaluator = FitnessEvaluator(target, supersample=2)
    sequential = Population(small_config, random.Random(11)).evaluate(evaluator)

    threaded = Population(small_config, random.Random(11)).evaluate(evaluator, workers=3)

    assert threaded == sequential


def test_uniform_crossover_swaps_whole_polygons(small_config, rng) -> None:
    pop = Population(small_config, rng)
    parent1, parent2 = pop.chromosomes[0], pop.chromosomes[1]

    child1, child2 = pop.crossover(parent1, parent2)

    for a, b, c1, c2 in zip(parent1, parent2, child1, child2):
        assert {id(c1), id(c2)} == {id(a), id(b)}


def test_crossover_rejects_different_lengths(small_config, rng) -> None:
    pop = Population(small_config, rng)
    shorter = PolygonChromosome(pop.chromosomes[1].polygons[:-1])

    with pytest.raises(ValueError):
        pop.crossover(pop.chromosomes[0], shorter)


@pytest.mark.parametrize("size, rate, expected", [
    (40, 0.1, 4),
    (10, 0.15, 2),
    (30, 0.1, 3),
    (10, 0.0, 0),
])
def test_elite_count_is_ceiling_of_rate_times_size(rng, size, rate, expected) -> None:
    config = EvolutionConfig(population_size=size, elitism_rate=rate, polygon_count=1,
                             vertex_count=3, tournament_size=2)

    assert Population(config, rng).elite_count() == expected


class ZeroRandom:
    """Always draws the first remaining candidate."""

    def random(self) -> float:
        return 0.0


def test_tournament_entrants_are_distinct(small_config, rng) -> None:
    pop = Population(small_config, rng)
    pop.fitnesses = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6]
    pop.rng = ZeroRandom()

    # with replacement both draws would be individual 0
    assert pop.tournament_selection() is pop.chromosomes[1]


def test_full_tournament_always_picks_the_best(small_config, rng) -> None:
    config = EvolutionConfig(**{**small_config.to_dict(), 'tournament_size': small_config.population_size})
    pop = Population(config, rng)
    pop.fitnesses = [0.3, 0.9, 0.1, 0.5, 0.2, 0.4]

    for _ in range(10):
        assert pop.tournament_selection() is pop.chromosomes[1]


def test_stats_and_diversity(small_config, rng, target) -> None:
    pop = Population(small_config, rng)
    pop.evaluate(FitnessEvaluator(target, supersample=1))

    stats = pop.get_stats()
    diversity = pop.diversity_stats()

    assert stats['population_size'] == small_config.population_size
    assert stats['fitness']['min'] <= stats['fitness']['mean'] <= stats['fitness']['max']
    assert stats['best_ever'] == stats['fitness']['max']
    assert diversity['unique_genomes'] == small_config.population_size
    assert diversity['genome_diversity'] == 1.0
