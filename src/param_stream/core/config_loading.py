"""Read and write decode-plan files.

A plan file holds one JSON or YAML object. The format is picked from the
file suffix, and the same suffix table is used for reading and writing so a
saved plan always loads back with the parser that wrote it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import json
from pathlib import Path
from typing import IO, Any

import yaml

_PARSERS: dict[str, Callable[[IO[str]], Any]] = {
    ".json": json.load,
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
}
_PARSE_ERRORS: tuple[type[Exception], ...] = (json.JSONDecodeError, yaml.YAMLError)
SUPPORTED_CONFIG_SUFFIXES: tuple[str, ...] = tuple(_PARSERS)


def _config_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in _PARSERS:
        supported = ", ".join(SUPPORTED_CONFIG_SUFFIXES)
        raise ValueError(f"{path.name}: unsupported plan file suffix {suffix!r}; expected one of {supported}")
    return suffix


def load_config_mapping(path: str | Path) -> dict[str, Any]:
    """Parse a plan file into its root mapping.

    Parameters
    ----------
    path : str | pathlib.Path
        File ending in ``.json``, ``.yaml`` or ``.yml``.

    Returns
    -------
    dict[str, Any]
        Root object of the document.

    Raises
    ------
    ValueError
        If the suffix is unsupported, the document does not parse, the
        document is empty, or its root is not an object.
    """

    config_path = Path(path)
    parser = _PARSERS[_config_suffix(config_path)]

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = parser(handle)
        except _PARSE_ERRORS as exc:
            raise ValueError(f"{config_path.name}: malformed plan file: {exc}") from exc

    if raw is None:
        raise ValueError(f"{config_path.name}: plan file is empty")
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: plan root must be an object; got {type(raw).__name__}")
    return raw


def dump_config_mapping(config: Mapping[str, Any], path: str | Path) -> Path:
    """Write ``config`` as JSON or YAML, chosen by the suffix of ``path``.

    YAML output keeps key order, so a plan's parameters stay in decode
    order.
    """

    config_path = Path(path)
    suffix = _config_suffix(config_path)
    with config_path.open("w", encoding="utf-8") as handle:
        if suffix == ".json":
            json.dump(dict(config), handle, indent=2)
            handle.write("\n")
        else:
            yaml.safe_dump(dict(config), handle, sort_keys=False)
    return config_path


__all__ = ["SUPPORTED_CONFIG_SUFFIXES", "dump_config_mapping", "load_config_mapping"]
