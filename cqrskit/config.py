"""cqrskit configuration management.

Loads configuration from a TOML file with environment variable overrides
(``CQRSKIT_`` prefix).  Uses :mod:`tomllib` on Python 3.11+.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from cqrskit.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Default paths
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_DIR = ".cqrskit"
DEFAULT_CONFIG_FILE = "config.toml"
ENV_PREFIX = "CQRSKIT_"

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class CqrsConfig(BaseModel):
    """Runtime configuration with sensible defaults.

    All fields can be overridden via environment variables with the
    ``CQRSKIT_`` prefix.  For example ``CQRSKIT_PUBLISH_STRATEGY=sequential``.
    """

    log_level: str = "INFO"
    log_file: Optional[Path] = None
    publish_strategy: Literal["parallel", "sequential"] = "parallel"
    slow_request_threshold_ms: Optional[float] = Field(default=None, gt=0)

    model_config = {"extra": "ignore"}


# ---------------------------------------------------------------------------
# Loader helpers
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: dict) -> dict:
    """Apply CQRSKIT_ environment variable overrides to *data*."""
    field_names = set(CqrsConfig.model_fields.keys())
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            field = key[len(ENV_PREFIX):].lower()
            if field in field_names:
                data[field] = value
    return data


def load_config(config_path: Path | None = None, project_dir: Path | None = None) -> CqrsConfig:
    """Load configuration from a TOML file with env-var overrides.

    Parameters
    ----------
    config_path:
        Explicit path to a TOML file.  When *None*, looks for
        ``<project_dir>/.cqrskit/config.toml``.
    project_dir:
        Project root directory.  Defaults to :func:`Path.cwd`.

    Returns
    -------
    CqrsConfig
        Parsed and validated configuration.

    Raises
    ------
    ConfigurationError
        If the file is not valid TOML or a value fails validation.
    """
    project = project_dir or Path.cwd()
    path = config_path or (project / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE)

    data: dict = {}
    if path.exists():
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(str(exc), path=str(path)) from exc

    # Flatten nested TOML sections if present
    flat: dict = {}
    for k, v in data.items():
        if isinstance(v, dict):
            flat.update(v)
        else:
            flat[k] = v

    flat = _apply_env_overrides(flat)
    try:
        return CqrsConfig(**flat)
    except PydanticValidationError as exc:
        raise ConfigurationError(str(exc), path=str(path) if path.exists() else "") from exc


def default_config_toml() -> str:
    """Return default configuration as a TOML string."""
    return """\
# cqrskit configuration

[logging]
log_level = "INFO"

[pipeline]
publish_strategy = "parallel"
"""
