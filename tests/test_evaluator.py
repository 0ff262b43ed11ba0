"""Tests for rendering-based fitness evaluation."""

from __future__ import annotations

import numpy as np
import pytest

from polygon_evolution import (
    Canvas,
    FitnessEvaluator,
    PolygonChromosome,
    ReferenceImage,
    absolute_color_difference,
)
from tests.helpers import solid_reference, square


@pytest.mark.parametrize("supersample", [1, 2, 3])
def test_empty_chromosome_on_white_reference_scores_one(supersample: int) -> None:
    evaluator = FitnessEvaluator(solid_reference(10, 6), supersample=supersample)

    assert PolygonChromosome([]).fitness(evaluator) == 1.0


def test_covering_opaque_white_polygon_scores_one() -> None:
    evaluator = FitnessEvaluator(solid_reference(12, 12))
    chromosome = PolygonChromosome([square((1.0, 1.0, 1.0, 1.0))])

    assert chromosome.fitness(evaluator) == 1.0


def test_covering_opaque_polygon_reproduces_colored_reference() -> None:
    evaluator = FitnessEvaluator(solid_reference(6, 6, (255, 0, 0, 255)), supersample=1)
    chromosome = PolygonChromosome([square((1.0, 0.0, 0.0, 1.0), -0.5, -0.5, 1.5, 1.5)])

    assert chromosome.fitness(evaluator) == 1.0


def test_fitness_is_deterministic(rng) -> None:
    pixels = np.random.default_rng(0).integers(0, 256, size=(9, 7, 4), dtype=np.uint8)
    evaluator = FitnessEvaluator(ReferenceImage.from_array(pixels))
    chromosome = PolygonChromosome.random_chromosome(5, 8, rng)

    first = evaluator.evaluate(chromosome)
    second = evaluator.evaluate(chromosome)
    forked = evaluator.fork().evaluate(chromosome)

    assert first == second == forked
    assert 0.0 < first < 1.0


def test_fitness_decreases_with_flipped_color_components() -> None:
    width, height = 4, 4
    pixels = np.full((height, width, 4), 255, dtype=np.uint8)
    flat = pixels.reshape(-1)
    color_positions = [p for p in range(flat.size) if p % 4 != 3]
    empty = PolygonChromosome([])

    scores = []
    flipped = 0
    for k in (0, 1, 2, 5, 10, len(color_positions)):
        for p in color_positions[flipped:k]:
            flat[p] = 0
        flipped = k
        score = FitnessEvaluator(ReferenceImage.from_array(pixels), supersample=1).evaluate(empty)
        assert score == pytest.approx(1.0 - 255 * k / (width * height * 3 * 256.0))
        scores.append(score)

    assert all(a > b for a, b in zip(scores, scores[1:]))


def test_alpha_channel_is_ignored() -> None:
    evaluator = FitnessEvaluator(solid_reference(5, 5, (255, 255, 255, 0)))

    assert PolygonChromosome([]).fitness(evaluator) == 1.0


def test_worst_case_score_stays_positive() -> None:
    evaluator = FitnessEvaluator(solid_reference(5, 5, (0, 0, 0, 255)))

    score = PolygonChromosome([]).fitness(evaluator)

    assert score == pytest.approx(1.0 / 256.0)
    assert score > 0.0


def test_mismatched_canvas_is_rejected() -> None:
    with pytest.raises(ValueError):
        FitnessEvaluator(solid_reference(8, 8), canvas=Canvas(8, 9))


def test_fork_uses_its_own_canvas() -> None:
    evaluator = FitnessEvaluator(solid_reference(8, 8))

    forked = evaluator.fork()

    assert forked.canvas is not evaluator.canvas
    assert forked.reference is evaluator.reference
    assert forked.canvas.supersample == evaluator.canvas.supersample


def test_difference_kernel_skips_every_fourth_component() -> None:
    test = np.array([10, 20, 30, 40, 0, 0, 0, 255], dtype=np.uint8)
    ref = np.array([0, 30, 30, 0, 5, 5, 5, 0], dtype=np.uint8)

    assert absolute_color_difference(test, ref) == 10 + 10 + 0 + 5 + 5 + 5


def test_render_image_uses_requested_size(tmp_path) -> None:
    evaluator = FitnessEvaluator(solid_reference(8, 8))
    chromosome = PolygonChromosome([square((0.0, 0.5, 0.0, 0.7), 0.1, 0.1, 0.9, 0.9)])
    path = tmp_path / "render.png"

    img = evaluator.render_image(chromosome, size=(32, 16), filename=str(path))

    assert img.mode == 'RGB'
    assert img.size == (32, 16)
    assert path.exists()
    assert evaluator.render_image(chromosome).size == (8, 8)
