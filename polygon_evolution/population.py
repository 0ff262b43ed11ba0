"""
polygon_evolution/population.py - Population management and genetic operators
"""
import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple, Optional, Dict, Any
import numpy as np
from .chromosome import PolygonChromosome
from .config import EvolutionConfig
from .evaluator import FitnessEvaluator

logger = logging.getLogger(__name__)

class Population:
    """Elitist generational GA over fixed-length polygon chromosomes.

    All random draws go through ``rng`` on the calling thread; worker threads
    only render and score.
    """

    def __init__(self, config: EvolutionConfig, rng,
                 chromosomes: Optional[List[PolygonChromosome]] = None):
        self.config = config.validate()
        self.rng = rng
        self.size = config.population_size
        self.generation = 0
        self.best: Optional[PolygonChromosome] = None
        self.best_fitness = float('-inf')
        self.fitnesses: List[float] = []

        if chromosomes is None:
            self.chromosomes = [
                PolygonChromosome.random_chromosome(config.vertex_count, config.polygon_count, rng)
                for _ in range(self.size)
            ]
        else:
            if len(chromosomes) != self.size:
                raise ValueError(f"Expected {self.size} chromosomes, got {len(chromosomes)}")
            self.chromosomes = list(chromosomes)

    def evaluate(self, evaluator: FitnessEvaluator, workers: int = 1) -> List[float]:
        """Score every chromosome and update the best ever observed"""
        if workers <= 1:
            scores = [c.fitness(evaluator) for c in self.chromosomes]
        else:
            local = threading.local()

            def score(chromosome: PolygonChromosome) -> float:
                worker_evaluator = getattr(local, 'evaluator', None)
                if worker_evaluator is None:
                    worker_evaluator = local.evaluator = evaluator.fork()
                return chromosome.fitness(worker_evaluator)

            with ThreadPoolExecutor(max_workers=workers) as pool:
                scores = list(pool.map(score, self.chromosomes))

        self.fitnesses = scores
        top = int(np.argmax(scores))
        if scores[top] > self.best_fitness:
            self.best_fitness = scores[top]
            self.best = self.chromosomes[top]
            logger.debug("Generation %d: new best fitness %.6f", self.generation, self.best_fitness)
        return scores

    def _require_fitness(self) -> None:
        if len(self.fitnesses) != len(self.chromosomes):
            raise RuntimeError("Population must be evaluated before selection")

    def _randint(self, n: int) -> int:
        return min(int(self.rng.random() * n), n - 1)

    def tournament_selection(self) -> PolygonChromosome:
        """Best of ``tournament_size`` distinct individuals, drawn without replacement"""
        self._require_fitness()
        candidates = list(range(len(self.chromosomes)))
        entrants = []
        for _ in range(min(self.config.tournament_size, len(candidates))):
            entrants.append(candidates.pop(self._randint(len(candidates))))
        winner = max(entrants, key=lambda i: self.fitnesses[i])
        return self.chromosomes[winner]

    def crossover(self, parent1: PolygonChromosome,
                  parent2: PolygonChromosome) -> Tuple[PolygonChromosome, PolygonChromosome]:
        """Uniform crossover: each polygon position comes from either parent with equal odds"""
        if len(parent1) != len(parent2):
            raise ValueError(f"Parents differ in length: {len(parent1)} != {len(parent2)}")
        genes1, genes2 = [], []
        for a, b in zip(parent1.polygons, parent2.polygons):
            if self.rng.random() < 0.5:
                genes1.append(a)
                genes2.append(b)
            else:
                genes1.append(b)
                genes2.append(a)
        return PolygonChromosome(genes1), PolygonChromosome(genes2)

    def elite_count(self) -> int:
        # rounded first so 0.1 * 30 gives 3 rather than ceil(3.0000000000000004)
        return int(math.ceil(round(self.config.elitism_rate * self.size, 9)))

    def evolve_generation(self) -> None:
        """Replace the population with elites plus mutated offspring"""
        self._require_fitness()
        cfg = self.config
        ranked = sorted(range(len(self.chromosomes)), key=lambda i: self.fitnesses[i], reverse=True)

        new_chromosomes = [self.chromosomes[i] for i in ranked[:self.elite_count()]]

        while len(new_chromosomes) < self.size:
            parent1 = self.tournament_selection()
            parent2 = self.tournament_selection()
            if self.rng.random() < cfg.crossover_rate:
                child1, child2 = self.crossover(parent1, parent2)
            else:
                child1, child2 = parent1, parent2

            new_chromosomes.append(child1.mutate(cfg.mutation_rate, cfg.mutation_amount, self.rng))
            if len(new_chromosomes) < self.size:
                new_chromosomes.append(child2.mutate(cfg.mutation_rate, cfg.mutation_amount, self.rng))

        self.chromosomes = new_chromosomes
        self.fitnesses = []
        self.generation += 1

    def get_best(self, n: int = 1) -> List[PolygonChromosome]:
        """Best n chromosomes of the current (evaluated) generation"""
        self._require_fitness()
        ranked = sorted(range(len(self.chromosomes)), key=lambda i: self.fitnesses[i], reverse=True)
        return [self.chromosomes[i] for i in ranked[:n]]

    def get_stats(self) -> Dict[str, Any]:
        """Get population statistics"""
        if not self.fitnesses:
            return {'generation': self.generation, 'population_size': len(self.chromosomes)}

        return {
            'generation': self.generation,
            'population_size': len(self.chromosomes),
            'fitness': {
                'min': float(np.min(self.fitnesses)),
                'max': float(np.max(self.fitnesses)),
                'mean': float(np.mean(self.fitnesses)),
                'std': float(np.std(self.fitnesses))
            },
            'best_ever': self.best_fitness
        }

    def diversity_stats(self) -> Dict[str, float]:
        """Calculate population diversity metrics"""
        if len(self.chromosomes) < 2:
            return {'genome_diversity': 0.0, 'fitness_diversity': 0.0, 'unique_genomes': len(self.chromosomes)}

        unique_genomes = len(set(self.chromosomes))

        fitness_diversity = 0.0
        if self.fitnesses:
            fitness_diversity = float(np.std(self.fitnesses) / (abs(np.mean(self.fitnesses)) + 1e-10))

        return {
            'genome_diversity': unique_genomes / len(self.chromosomes),
            'fitness_diversity': fitness_diversity,
            'unique_genomes': unique_genomes
        }
