"""
EnderScript Python API

Provides the Python interface for compiling EnderScript and writing datapacks.
"""

from .context import Context, Build
from .project import ProjectConfig

__all__ = [
    'Context',
    'Build',
    'ProjectConfig',
]
