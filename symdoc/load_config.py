"""Logic for loading and merging configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from symdoc.deep_merge import deep_merge
from symdoc.errors import BuildConfigurationError

DEFAULT_CONFIG: dict[str, Any] = {
    "module": "",
    "output": "out/doc/",
    "format": "markdown",
    "sources": [],
    "samples": [],
    "includes": [],
    "classpath": [],
    "source_links": [],
    "options": {
        "include_non_public": False,
        "skip_deprecated": False,
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults.

    A config path that does not exist or does not hold a mapping is a fatal
    configuration error.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if not p.exists():
            msg = f"Config file not found: {p}"
            raise BuildConfigurationError(msg)
        user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(user_config, dict):
            msg = f"Config file {p} must contain a mapping"
            raise BuildConfigurationError(msg)
        config = deep_merge(config, user_config)
    return config
