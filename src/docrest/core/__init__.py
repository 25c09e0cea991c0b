"""Core utilities: configuration, errors and logging."""

from docrest.core.config import DocRestConfig
from docrest.core.errors import (
    BadRequestError,
    ConfigError,
    ConflictError,
    DocRestError,
    NotFoundError,
)
from docrest.core.logging import color_palette, log

__all__ = [
    "DocRestConfig",
    "DocRestError",
    "BadRequestError",
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "log",
    "color_palette",
]
