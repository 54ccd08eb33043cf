"""Reading ``NAME = value`` configuration files into a table of parameters."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, TextIO, Union

from motodevice import loclog

log = logging.getLogger(__name__)

LOC_MAX_PARAM_NAME = 48
LOC_MAX_PARAM_STRING = 80
LOC_MAX_PARAM_LINE = 80

_SPACE = " \t\n\v\f\r"

_INT_MIN = -(1 << 31)
_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1

_DEC_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]+)")
_HEX_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")
_FLOAT = re.compile(
    r"[ \t\n\v\f\r]*("
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class ParamType(str, enum.Enum):
    """Kind of value a configuration parameter holds."""

    NUMBER = "n"
    STRING = "s"
    FLOAT = "f"


@dataclass
class ConfigParam:
    """One entry of a configuration table.

    ``value`` receives the configured value; ``is_set`` tells whether the
    last file read set it.
    """

    name: str
    type: ParamType
    value: Any = None
    is_set: bool = False

    def __post_init__(self) -> None:
        try:
            self.type = ParamType(self.type)
        except ValueError:
            raise ValueError(
                f"parameter {self.name} type must be n, f, or s"
            ) from None


@dataclass(frozen=True)
class ConfigValue:
    """A name and its value as read from one line, in all three forms."""

    name: str
    str_value: str
    int_value: int = 0
    double_value: float = 0.0


def _to_c_int(value: int) -> int:
    value = max(_LONG_MIN, min(_LONG_MAX, value))
    return (value - _INT_MIN) % (1 << 32) + _INT_MIN


def _strtol(text: str, base: int) -> int:
    match = (_HEX_INT if base == 16 else _DEC_INT).match(text)
    if match is None:
        return 0
    sign, digits = match.groups()
    number = int(digits, base)
    return -number if sign == "-" else number


def _atof(text: str) -> float:
    match = _FLOAT.match(text)
    if match is None:
        return 0.0
    return float(match.group(1))


def trim_space(text: str) -> str:
    """Remove leading and trailing white space.

    A string made of white space only is returned unchanged.
    """
    stripped = text.strip(_SPACE)
    return stripped if stripped else text


def parse_config_line(line: str) -> Optional[ConfigValue]:
    """Split ``NAME = value`` into a :class:`ConfigValue`.

    Returns None for lines that do not hold two ``=``-separated operands.
    Values starting with ``0x`` are read as hexadecimal integers.
    """
    tokens = [token for token in line.split("=") if token]
    if len(tokens) < 2:
        return None
    name = trim_space(tokens[0])
    text = trim_space(tokens[1])

    if len(text) >= 2 and text[0] == "0" and text[1].lower() == "x":
        return ConfigValue(name, text, _to_c_int(_strtol(text[2:], 16)), 0.0)
    return ConfigValue(name, text, _to_c_int(_strtol(text, 10)), _atof(text))


def set_config_entry(entry: ConfigParam, value: ConfigValue) -> bool:
    """Store ``value`` in ``entry`` if their names match; return True if stored."""
    if entry is None or value is None:
        raise ValueError("invalid config entry or parameter")
    if entry.name != value.name:
        return False

    if entry.type is ParamType.STRING:
        if value.str_value == "NULL":
            entry.value = ""
        else:
            entry.value = value.str_value[:LOC_MAX_PARAM_STRING]
        loclog.loc_logger.debug("PARAM %s = %s", entry.name, entry.value)
    elif entry.type is ParamType.NUMBER:
        entry.value = value.int_value
        loclog.loc_logger.debug("PARAM %s = %d", entry.name, value.int_value)
    elif entry.type is ParamType.FLOAT:
        entry.value = value.double_value
        loclog.loc_logger.debug("PARAM %s = %f", entry.name, value.double_value)
    else:
        loclog.loc_logger.error(
            "PARAM %s parameter type must be n, f, or s", entry.name
        )
        return False
    entry.is_set = True
    return True


# Parameters every configuration file may set for the logger.
_LOGGER_PARAMS = (
    ConfigParam("DEBUG_LEVEL", ParamType.NUMBER, loclog.DEFAULT_DEBUG_LEVEL),
    ConfigParam("TIMESTAMP", ParamType.NUMBER, 0),
)


def _init_logger() -> None:
    debug_level, timestamp = (param.value for param in _LOGGER_PARAMS)
    loclog.logger_init(debug_level, timestamp)


def _lines(handle: TextIO) -> Iterator[str]:
    """Yield the file in pieces of at most one line of the buffer size."""
    while True:
        piece = handle.readline(LOC_MAX_PARAM_LINE - 1)
        if not piece:
            return
        yield piece


def read_conf(
    path: Union[str, Path], table: Optional[Iterable[ConfigParam]] = None
) -> bool:
    """Read ``path`` and set the entries of ``table`` that it names.

    Every entry's ``is_set`` flag is cleared first. The logger's debug level
    and timestamp settings are taken from the file as well. Returns False
    when the file could not be opened.
    """
    entries = list(table) if table is not None else []
    try:
        handle = open(path, "r", encoding="utf-8", errors="replace")
    except OSError:
        loclog.loc_logger.warning("no %s file found", path)
        _init_logger()
        return False

    loclog.loc_logger.debug("using %s", path)
    for entry in entries:
        entry.is_set = False

    with handle:
        for line in _lines(handle):
            value = parse_config_line(line)
            if value is None:
                continue
            for entry in entries:
                set_config_entry(entry, value)
            for param in _LOGGER_PARAMS:
                if set_config_entry(param, value):
                    # These settings are stored in a single byte.
                    param.value &= 0xFF

    _init_logger()
    return True