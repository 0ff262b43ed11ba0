"""
polygon_evolution/canvas.py - Reference image and reusable working canvas
"""
import numpy as np
from typing import Tuple
from PIL import Image, ImageDraw

WHITE = (255, 255, 255)

class ReferenceImage:
    """Read-only RGBA pixel buffer of the target image"""

    def __init__(self, image: Image.Image):
        rgba = image.convert('RGBA')
        self.width, self.height = rgba.size
        pixels = np.ascontiguousarray(np.asarray(rgba, dtype=np.uint8)).reshape(-1)
        pixels.setflags(write=False)
        self.pixels = pixels

    @classmethod
    def open(cls, filename: str) -> 'ReferenceImage':
        with Image.open(filename) as img:
            return cls(img)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> 'ReferenceImage':
        """Build from a (height, width, 4) uint8 RGBA array"""
        pixels = np.asarray(pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected a (height, width, 4) array, got shape {pixels.shape}")
        return cls(Image.fromarray(pixels, 'RGBA'))

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

class Canvas:
    """Mutable RGBA scratch buffer reused across renders.

    Polygons are rasterised onto an RGB image ``supersample`` times larger
    than the canvas with source-over blending, then box-filtered down into
    the RGBA canvas image. A factor of 1 renders without smoothing.
    Not safe to share between threads.
    """

    def __init__(self, width: int, height: int, supersample: int = 2):
        if width < 1 or height < 1:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if supersample < 1:
            raise ValueError(f"supersample must be >= 1, got {supersample}")
        self.width = width
        self.height = height
        self.supersample = supersample
        self.image = Image.new('RGBA', (width, height), WHITE + (255,))
        self._scratch = Image.new('RGB', self.scratch_size, WHITE)
        # RGBA ink on an RGB image blends instead of replacing pixels
        self._draw = ImageDraw.Draw(self._scratch, 'RGBA')

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def scratch_size(self) -> Tuple[int, int]:
        return self.width * self.supersample, self.height * self.supersample

    def begin(self) -> ImageDraw.ImageDraw:
        """Clear to opaque white and return the drawing context"""
        sw, sh = self.scratch_size
        self._draw.rectangle([0, 0, sw - 1, sh - 1], fill=WHITE)
        return self._draw

    def commit(self) -> None:
        """Downsample the scratch render into the canvas image"""
        if self.supersample == 1:
            frame = self._scratch
        else:
            frame = self._scratch.resize(self.size, Image.Resampling.BOX)
        self.image.paste(frame)

    def pixels(self) -> np.ndarray:
        """Flat RGBA-interleaved uint8 buffer of the last render"""
        return np.asarray(self.image, dtype=np.uint8).reshape(-1)

    def save(self, filename: str) -> None:
        self.image.save(filename)
