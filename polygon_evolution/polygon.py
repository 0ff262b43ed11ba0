"""
polygon_evolution/polygon.py - Polygon genome in packed vector representation
"""
import numpy as np
from typing import Dict, Any, List, Tuple
from PIL import ImageDraw

# Packed layout:
#   index | data
#     0   | red component
#     1   | green component
#     2   | blue component
#     3   | alpha channel
#   4+2k  | x of vertex k
#   5+2k  | y of vertex k
COLOR_SIZE = 4
MIN_VERTICES = 3
MIN_ALPHA = 0.2

class Polygon:
    """A semi-transparent colored polygon stored as a flat, read-only vector.

    Color components lie in [0, 1]. Vertex coordinates are relative to the
    canvas size and may lie outside the unit square.
    """

    __slots__ = ('data',)

    def __init__(self, data):
        data = np.array(data, dtype=np.float32)
        if data.ndim != 1 or (data.size - COLOR_SIZE) % 2 != 0:
            raise ValueError(f"Invalid packed polygon of shape {data.shape}")
        if (data.size - COLOR_SIZE) // 2 < MIN_VERTICES:
            raise ValueError(f"A polygon needs at least {MIN_VERTICES} vertices")
        data.setflags(write=False)
        self.data = data

    @classmethod
    def random_polygon(cls, vertex_count: int, rng) -> 'Polygon':
        """Create a random polygon around a random centroid.

        ``rng`` is any uniform source with a ``random()`` method returning
        floats in [0, 1), e.g. ``random.Random`` or ``numpy.random.Generator``.
        Alpha is the product of two draws (skewed low) floored at 0.2. Each
        vertex is the centroid plus uniform jitter in [-0.5, 0.5], so vertices
        may fall outside the unit square.
        """
        if vertex_count < MIN_VERTICES:
            raise ValueError(f"vertex_count must be >= {MIN_VERTICES}, got {vertex_count}")

        data = np.empty(COLOR_SIZE + 2 * vertex_count, dtype=np.float32)
        data[0] = rng.random()  # r
        data[1] = rng.random()  # g
        data[2] = rng.random()  # b
        data[3] = max(MIN_ALPHA, rng.random() * rng.random())  # a

        cx = rng.random()
        cy = rng.random()
        for k in range(vertex_count):
            data[COLOR_SIZE + 2 * k] = cx + (rng.random() - 0.5)
            data[COLOR_SIZE + 2 * k + 1] = cy + (rng.random() - 0.5)
        return cls(data)

    @property
    def vertex_count(self) -> int:
        return (self.data.size - COLOR_SIZE) // 2

    @property
    def color(self) -> Tuple[float, float, float, float]:
        r, g, b, a = (float(c) for c in self.data[:COLOR_SIZE])
        return r, g, b, a

    @property
    def vertices(self) -> List[Tuple[float, float]]:
        coords = self.data[COLOR_SIZE:]
        return [(float(coords[i]), float(coords[i + 1])) for i in range(0, coords.size, 2)]

    def mutate(self, mutation_rate: float, mutation_amount: float, rng) -> 'Polygon':
        """Return a perturbed copy; this polygon is left untouched.

        Each field is selected independently with probability
        ``mutation_rate``; a selected field receives uniform noise in
        [-mutation_amount, mutation_amount] and is then clamped to [0, 1].
        Vertex coordinates are clamped as well, so mutation can only pull an
        out-of-range vertex back towards the unit square. Arguments are not
        validated: a rate outside [0, 1] or a negative amount gives
        meaningless but well-formed results.
        """
        mutated = self.data.copy()
        for i in range(mutated.size):
            if rng.random() < mutation_rate:
                val = float(mutated[i]) + rng.random() * mutation_amount * 2 - mutation_amount
                if val < 0.0:
                    val = 0.0
                elif val > 1.0:
                    val = 1.0
                mutated[i] = val
        return Polygon(mutated)

    def fill_color(self) -> Tuple[int, int, int, int]:
        """8-bit RGBA ink for this polygon"""
        return tuple(int(c * 255 + 0.5) for c in self.data[:COLOR_SIZE])

    def draw(self, draw: ImageDraw.ImageDraw, width: int, height: int) -> None:
        """Fill the closed polygon path, scaled to width x height"""
        points = [(x * width, y * height) for x, y in self.vertices]
        draw.polygon(points, fill=self.fill_color())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'color': list(self.color),
            'vertices': [list(v) for v in self.vertices]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Polygon':
        try:
            color = [float(c) for c in data['color']]
            vertices = [(float(x), float(y)) for x, y in data['vertices']]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed polygon: {e}") from e
        if len(color) != COLOR_SIZE:
            raise ValueError(f"Polygon color needs {COLOR_SIZE} components, got {len(color)}")
        packed = color + [c for vertex in vertices for c in vertex]
        return cls(packed)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return np.array_equal(self.data, other.data)

    def __hash__(self) -> int:
        return hash(self.data.tobytes())

    def __repr__(self) -> str:
        r, g, b, a = self.color
        return f"Polygon(color=({r:.3f}, {g:.3f}, {b:.3f}, {a:.3f}), vertices={self.vertex_count})"
