"""
National Weather Service source module.

Provides active severe-weather alerts for a point in the United States.
"""

__all__ = ["client"]
