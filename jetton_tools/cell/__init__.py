"""Cell tree primitives: builder, cell, slice and the content dictionary."""

from .cell import Cell
from .builder import Builder, begin_cell
from .slice import Slice
from .dictionary import ContentDictionary, key_for

__all__ = ["Cell", "Builder", "begin_cell", "Slice", "ContentDictionary", "key_for"]
