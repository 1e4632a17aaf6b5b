"""
Jalpan Services daily food-quality inspection service.
"""

__version__ = "2.0.0"
