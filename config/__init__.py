"""Configuration package for the monthly budget dashboard."""

from .settings import load_config

__all__ = ['load_config']
