"""
License identity layer.

Maps raw license names onto canonical License values.
"""
from .registry import License, find_by_name, known_licenses


__all__ = [
    'License',
    'find_by_name',
    'known_licenses',
]
