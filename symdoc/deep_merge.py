"""Logic for deep merging configuration dictionaries."""

from typing import Any

# Path lists that accumulate across config layers instead of being replaced.
ADDITIVE_KEYS = frozenset(
    {"sources", "samples", "includes", "classpath", "source_links"}
)


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    - Objects are merged recursively.
    - Lists in ``update`` replace ``base`` lists, except for path lists
      (:data:`ADDITIVE_KEYS`), which are appended in order without repeats.
    """
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif (
            key in ADDITIVE_KEYS
            and isinstance(value, list)
            and isinstance(result.get(key), list)
        ):
            merged = list(result[key])
            merged.extend(v for v in value if v not in merged)
            result[key] = merged
        else:
            result[key] = value
    return result
