import json
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path

from errors import ConfigParseError, ConfigReadError, PathExpansionError

# ---------------------------------------------------------------------------
# Config constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_PATH = ".config/bambam/config.json"   # relative to $HOME

# $NAME or ${NAME}; a bare "$" that starts neither is left untouched
_VAR_PATTERN = re.compile(r"\$(?:\{(?P<braced>[^}]*)\}|(?P<name>[A-Za-z_][A-Za-z0-9_]*))")


@dataclass(frozen=True)
class BamBamConfig:
    access_key: str
    ppn_file: str
    rhn_file: str
    lock_door: str
    kitchen_light_yellow: str
    kitchen_light_purple: str


def default_config_path() -> Path:
    """Return $HOME/.config/bambam/config.json."""
    home = os.environ.get("HOME")
    if not home:
        raise ConfigReadError("HOME environment variable not set")
    return Path(home) / DEFAULT_CONFIG_PATH


def read_config(path) -> BamBamConfig:
    """
    Load the JSON config at `path`.

    Every field of BamBamConfig is required and must be a string; unknown
    keys are ignored.

    Raises:
        ConfigReadError: the file could not be opened or read.
        ConfigParseError: the contents are not a JSON object of that shape.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigReadError(f"could not open {path}: {e}") from e

    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigParseError(f"could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(f"could not parse {path}: expected a JSON object")

    values = {}
    for field in fields(BamBamConfig):
        if field.name not in data:
            raise ConfigParseError(f"could not parse {path}: missing field '{field.name}'")
        value = data[field.name]
        if not isinstance(value, str):
            raise ConfigParseError(
                f"could not parse {path}: field '{field.name}' must be a string, "
                f"got {type(value).__name__}"
            )
        values[field.name] = value

    return BamBamConfig(**values)


def expand_config_path(value: str) -> Path:
    """
    Expand a leading "~" and every $NAME / ${NAME} reference in `value`.

    Raises PathExpansionError when a referenced variable is not set.
    """
    def substitute(match):
        name = match.group("braced")
        if name is None:
            name = match.group("name")
        if not name or name not in os.environ:
            raise PathExpansionError(f"Error expanding path {value!r}: ${name or '{}'} is not set")
        return os.environ[name]

    expanded = os.path.expanduser(value)
    expanded = _VAR_PATTERN.sub(substitute, expanded)
    return Path(expanded)
