"""CII XML emission."""

from ._tree import CiiWriter, prune_empty_elements
from .builder import DocumentBuilder, serialize

__all__ = ["CiiWriter", "DocumentBuilder", "prune_empty_elements", "serialize"]
