"""
Data models for product crawling.

This module contains pure data classes with no business logic.
"""

from .product import UNKNOWN, NutrientProfile, ProductRecord, ProductRef

__all__ = ['UNKNOWN', 'NutrientProfile', 'ProductRef', 'ProductRecord']
