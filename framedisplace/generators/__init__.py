"""framedisplace generators: whole-sequence rendering."""

from .sequence_generator import SequenceGenerator

__all__ = ["SequenceGenerator"]
