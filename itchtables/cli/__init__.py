"""Command-line interface for itchtables."""

from .main import app, main

__all__ = ['app', 'main']
