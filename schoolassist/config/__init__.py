"""
Configuration package for the school assistant scheduling core.

Contains environment settings and logging configuration.
"""

from schoolassist.config.settings import Settings, get_settings
from schoolassist.config.logging import configure_logging

__all__ = ['Settings', 'get_settings', 'configure_logging']
