"""
Config module - Default settings for the Costlocker report extractor.
"""

from .settings import DEFAULT_SETTINGS, REQUIRED_SETTINGS

__all__ = [
    'DEFAULT_SETTINGS',
    'REQUIRED_SETTINGS',
]
