"""Runtime configuration for docrest."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from docrest.core.errors import ConfigError

DEFAULT_ROOT = "/opt/docrest"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787


class DocRestConfig(BaseModel):
    """Settings for a docrest application and the server that runs it."""

    project_name: str = "docrest"
    version: str = "0.1.0"
    description: str = "Generic REST resources over document store collections"
    root: Path = Path(DEFAULT_ROOT)
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    debug_mode: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "DocRestConfig":
        """
        Build a config from ``DOCREST_*`` environment variables.

        Keyword overrides that are not ``None`` win over the environment,
        which is how the CLI layers its flags on top.

        Raises:
            ConfigError: If a value does not validate.
        """
        values = {
            "root": os.getenv("DOCREST_ROOT", DEFAULT_ROOT),
            "host": os.getenv("DOCREST_HOST", DEFAULT_HOST),
            "port": os.getenv("DOCREST_PORT", str(DEFAULT_PORT)),
            "debug_mode": _parse_flag(os.getenv("DOCREST_DEBUG")),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            config = cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        return config.model_copy(update={"root": config.root.expanduser().resolve()})


def _parse_flag(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "on"}
