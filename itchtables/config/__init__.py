"""Configuration management for itchtables."""

from .schema import (
    ItchConfig,
    DecodeConfig,
    OutputConfig,
    OUTPUT_FORMATS,
    load_config,
    generate_default_config,
)

__all__ = [
    'ItchConfig',
    'DecodeConfig',
    'OutputConfig',
    'OUTPUT_FORMATS',
    'load_config',
    'generate_default_config',
]
