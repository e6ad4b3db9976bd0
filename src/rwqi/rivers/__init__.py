"""River directory module for RWQI - registry loading and name resolution."""

from .directory import River, RiverDirectory, load_rivers, find_river

__all__ = [
    'River',
    'RiverDirectory',
    'load_rivers',
    'find_river',
]
