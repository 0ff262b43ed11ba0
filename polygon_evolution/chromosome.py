"""
polygon_evolution/chromosome.py - Candidate image as an ordered list of polygons
"""
import json
from typing import Dict, Any, Iterable, Optional, Tuple
from .polygon import Polygon
from .canvas import Canvas

class PolygonChromosome:
    """An ordered, immutable sequence of polygons forming one candidate image.

    Paint order is part of the genome: later polygons are drawn on top of
    earlier ones. The fitness score is computed lazily and cached for the
    reference image and supersampling factor it was scored with.
    """

    def __init__(self, polygons: Iterable[Polygon]):
        self.polygons: Tuple[Polygon, ...] = tuple(polygons)
        self._fitness: Optional[float] = None
        self._scored_against = None

    @classmethod
    def random_chromosome(cls, vertex_count: int, polygon_count: int, rng) -> 'PolygonChromosome':
        """Create ``polygon_count`` independent random polygons in draw order"""
        if polygon_count < 1:
            raise ValueError(f"polygon_count must be >= 1, got {polygon_count}")
        return cls(Polygon.random_polygon(vertex_count, rng) for _ in range(polygon_count))

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self):
        return iter(self.polygons)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PolygonChromosome):
            return NotImplemented
        return self.polygons == other.polygons

    def __hash__(self) -> int:
        return hash(self.polygons)

    @property
    def vertex_count(self) -> int:
        return self.polygons[0].vertex_count if self.polygons else 0

    def mutate(self, mutation_rate: float, mutation_amount: float, rng) -> 'PolygonChromosome':
        """Return a sibling holding a mutated copy of every polygon"""
        return PolygonChromosome(p.mutate(mutation_rate, mutation_amount, rng)
                                 for p in self.polygons)

    def draw(self, canvas: Canvas) -> None:
        """Render onto ``canvas``, fully overwriting its contents"""
        draw = canvas.begin()
        width, height = canvas.scratch_size
        for polygon in self.polygons:
            polygon.draw(draw, width, height)
        canvas.commit()

    def fitness(self, evaluator) -> float:
        """Similarity to the evaluator's reference image; higher is better"""
        reference, supersample = evaluator.reference, evaluator.canvas.supersample
        if (self._fitness is None or self._scored_against is None
                or self._scored_against[0] is not reference
                or self._scored_against[1] != supersample):
            self._fitness = evaluator.evaluate(self)
            self._scored_against = (reference, supersample)
        return self._fitness

    @property
    def cached_fitness(self) -> Optional[float]:
        return self._fitness

    def to_dict(self) -> Dict[str, Any]:
        return {
            'polygon_count': len(self.polygons),
            'vertex_count': self.vertex_count,
            'fitness': self._fitness,
            'polygons': [p.to_dict() for p in self.polygons]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PolygonChromosome':
        try:
            polygons = [Polygon.from_dict(p) for p in data['polygons']]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed chromosome: {e}") from e
        chromosome = cls(polygons)
        # Recorded score is informational only; any evaluator rescores it
        chromosome._fitness = data.get('fitness')
        return chromosome

    def to_json(self, filename: str = None) -> str:
        """Serialize to JSON string or file"""
        json_str = json.dumps(self.to_dict(), indent=2)
        if filename:
            with open(filename, 'w') as f:
                f.write(json_str)
        return json_str

    @classmethod
    def from_json(cls, json_data: str = None, filename: str = None) -> 'PolygonChromosome':
        """Deserialize from JSON string or file"""
        if filename:
            with open(filename, 'r') as f:
                json_data = f.read()
        try:
            data = json.loads(json_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid chromosome JSON: {e}") from e
        return cls.from_dict(data)

    def __str__(self) -> str:
        return f"(f={self._fitness})"

    def __repr__(self) -> str:
        return (f"PolygonChromosome(polygons={len(self.polygons)}, "
                f"vertices={self.vertex_count}, fitness={self._fitness})")
