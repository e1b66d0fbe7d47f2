"""
Data management submodule: atomic file I/O and the project record store.
"""

from .store import ProjectStore
from .io import atomic_write, load_model

# Define what gets imported with `from data import *`
__all__ = [
    'ProjectStore',
    'atomic_write',
    'load_model',
]
