"""
Glob notation algebra used for permission attributes and data filtering.
"""

from .glob import (
    Glob,
    sort_globs,
    normalize,
    union,
    filter_data,
    filter_all,
)

__all__ = [
    'Glob',
    'sort_globs',
    'normalize',
    'union',
    'filter_data',
    'filter_all',
]
