"""
Dense matrix type and inversion routines.
"""

from .matrix import Matrix
from .inversion import invert, determinant

__all__ = ["Matrix", "invert", "determinant"]
