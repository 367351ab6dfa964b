"""
Core Domain Components.

Structure:
    models/: Pure data structures (no business logic)
    logic/: Business rules separated from models
"""

# Make subpackages available first (no circular dependencies)
from . import models
from . import logic

__all__ = [
    'models',
    'logic'
]
