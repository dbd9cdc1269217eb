"""
Utility functions for the Liftcoach project.
"""

from .io_utils import load_config, load_json, save_json

__all__ = [
    'load_config',
    'load_json',
    'save_json',
]
