"""
polygon_evolution - Evolutionary image approximation with translucent polygons

A genetic algorithm where each candidate image is an ordered list of
semi-transparent colored polygons, scored by per-pixel color difference
against a reference image.
"""

__version__ = "0.1.0"
__author__ = "Polygon Evolution Project"

from .polygon import Polygon
from .chromosome import PolygonChromosome
from .canvas import Canvas, ReferenceImage
from .evaluator import FitnessEvaluator, absolute_color_difference
from .config import EvolutionConfig, ConfigurationError
from .population import Population
from .archive import EvolutionArchive

__all__ = [
    'Polygon',
    'PolygonChromosome',
    'Canvas', 'ReferenceImage',
    'FitnessEvaluator', 'absolute_color_difference',
    'EvolutionConfig', 'ConfigurationError',
    'Population',
    'EvolutionArchive'
]
