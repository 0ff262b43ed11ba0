# ==========================================
# polygon_evolution/evaluator.py
# ==========================================
import logging
import numpy as np
from typing import Tuple
from PIL import Image
from numba import jit
from .canvas import Canvas, ReferenceImage
from .chromosome import PolygonChromosome

logger = logging.getLogger(__name__)

# Normalisation uses 256 rather than 255, so the worst possible score stays
# slightly above zero.
CHANNEL_RANGE = 256.0
COLOR_CHANNELS = 3

class FitnessEvaluator:
    """Scores chromosomes against a reference image using a private canvas"""

    def __init__(self, reference: ReferenceImage, canvas: Canvas = None, supersample: int = 2):
        if canvas is None:
            canvas = Canvas(reference.width, reference.height, supersample)
        if canvas.size != reference.size:
            raise ValueError(f"Canvas size {canvas.size[0]}x{canvas.size[1]} does not match "
                             f"reference size {reference.width}x{reference.height}")
        self.reference = reference
        self.canvas = canvas
        logger.debug("Evaluator ready for %dx%d reference (supersample=%d)",
                     reference.width, reference.height, canvas.supersample)

    def fork(self) -> 'FitnessEvaluator':
        """Evaluator sharing the reference with a fresh canvas, for another worker"""
        return FitnessEvaluator(self.reference,
                                Canvas(self.canvas.width, self.canvas.height, self.canvas.supersample))

    def evaluate(self, chromosome: PolygonChromosome) -> float:
        """Render and score; prefer ``chromosome.fitness(evaluator)`` which caches"""
        chromosome.draw(self.canvas)
        diff = absolute_color_difference(self.canvas.pixels(), self.reference.pixels)
        return 1.0 - diff / (self.reference.width * self.reference.height * COLOR_CHANNELS * CHANNEL_RANGE)

    def render_image(self, chromosome: PolygonChromosome, size: Tuple[int, int] = None,
                     filename: str = None) -> Image.Image:
        """Render chromosome as an RGB image, at reference size unless given"""
        if size is None or tuple(size) == self.canvas.size:
            canvas = self.canvas
        else:
            canvas = Canvas(size[0], size[1], self.canvas.supersample)
        chromosome.draw(canvas)
        img = canvas.image.convert('RGB')
        if filename:
            img.save(filename)
        return img

@jit(nopython=True, nogil=True)
def absolute_color_difference(test_pixels, ref_pixels):
    """Sum of |test - ref| over R, G, B of flat RGBA buffers, alpha skipped"""
    diff = 0
    for p in range(test_pixels.size):
        if p % 4 != 3:
            dp = np.int64(test_pixels[p]) - np.int64(ref_pixels[p])
            diff += abs(dp)
    return diff
