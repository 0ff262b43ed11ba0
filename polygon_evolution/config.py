"""
polygon_evolution/config.py - Run configuration and validation
"""
import json
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, List, Optional

INTEGER_FIELDS = ('vertex_count', 'polygon_count', 'population_size', 'generations',
                  'tournament_size', 'supersample')
RATE_FIELDS = ('mutation_rate', 'mutation_amount', 'elitism_rate', 'crossover_rate')

class ConfigurationError(ValueError):
    """Raised when a run is set up with invalid parameters"""

@dataclass(frozen=True)
class EvolutionConfig:
    """Parameters fixed for the duration of one evolutionary run.

    Defaults follow the classic polygon image-evolution setup: 100 hexagons,
    2% per-field mutation with noise of +/-0.1, population of 40 with 10%
    elitism and tournaments of 5.
    """

    vertex_count: int = 6
    polygon_count: int = 100
    mutation_rate: float = 0.02
    mutation_amount: float = 0.1
    population_size: int = 40
    generations: int = 100
    elitism_rate: float = 0.1
    tournament_size: int = 5
    crossover_rate: float = 1.0
    supersample: int = 2
    seed: Optional[int] = None

    def validate(self) -> 'EvolutionConfig':
        """Return self, or raise ConfigurationError naming every bad field"""
        errors: List[str] = []
        for name in INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer (got {value!r})")
        for name in RATE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{name} must be a number (got {value!r})")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            errors.append(f"seed must be an integer or null (got {self.seed!r})")
        if errors:
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))

        if self.vertex_count < 3:
            errors.append(f"vertex_count must be >= 3 (got {self.vertex_count})")
        if self.polygon_count < 1:
            errors.append(f"polygon_count must be >= 1 (got {self.polygon_count})")
        if not 0.0 <= self.mutation_rate <= 1.0:
            errors.append(f"mutation_rate must be in [0, 1] (got {self.mutation_rate})")
        if self.mutation_amount < 0.0:
            errors.append(f"mutation_amount must be >= 0 (got {self.mutation_amount})")
        if self.population_size < 2:
            errors.append(f"population_size must be >= 2 (got {self.population_size})")
        if self.generations < 1:
            errors.append(f"generations must be >= 1 (got {self.generations})")
        if not 0.0 <= self.elitism_rate < 1.0:
            errors.append(f"elitism_rate must be in [0, 1) (got {self.elitism_rate})")
        if self.tournament_size < 1:
            errors.append(f"tournament_size must be >= 1 (got {self.tournament_size})")
        if not 0.0 <= self.crossover_rate <= 1.0:
            errors.append(f"crossover_rate must be in [0, 1] (got {self.crossover_rate})")
        if self.supersample < 1:
            errors.append(f"supersample must be >= 1 (got {self.supersample})")
        if errors:
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EvolutionConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        try:
            return cls(**data).validate()
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, filename: str) -> 'EvolutionConfig':
        """Load a JSON configuration file"""
        with open(filename, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Could not parse {filename}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{filename} must contain a JSON object")
        return cls.from_dict(data)
