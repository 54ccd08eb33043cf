"""Name tables, time strings and the level-gated logger of the location services."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from motodevice.msgqueue import MsgQueueStatus
from motodevice.target import GnssTarget, SscType, target_gnss_type

UNKNOWN_STR = "UNKNOWN"

BOOL_STR = ("False", "True")
VOID_RET = "None"
FROM_AFW = "===>"
TO_MODEM = "--->"
FROM_MODEM = "<---"
TO_AFW = "<==="
EXIT_TAG = "Exiting"
ENTRY_TAG = "Entering"

# Debug level meaning "not configured": fall back to per-level logging.
DEFAULT_DEBUG_LEVEL = 0xFF

VERBOSE = 5

LOGGER_NAME = "motodevice.loc"


@dataclass(frozen=True)
class NameVal:
    """A name paired with the value it stands for."""

    name: str
    val: int


def name_from_mask(table: Iterable[NameVal], mask: int) -> str:
    """Return the name of the first entry whose value shares a bit with ``mask``."""
    for entry in table:
        if entry.val & int(mask):
            return entry.name
    return UNKNOWN_STR


def name_from_val(table: Iterable[NameVal], value: int) -> str:
    """Return the name of the first entry whose value equals ``value``."""
    for entry in table:
        if entry.val == int(value):
            return entry.name
    return UNKNOWN_STR


MSG_Q_STATUS_NAMES = tuple(
    NameVal(f"eMSG_Q_{status.name}", int(status)) for status in MsgQueueStatus
)

TARGET_NAMES = tuple(
    NameVal(f"GNSS_{gnss.name}", int(gnss)) for gnss in GnssTarget
)


def msg_q_status_name(status: int) -> str:
    """Return the name of a message queue status code."""
    return name_from_val(MSG_Q_STATUS_NAMES, status)


def succ_fail_string(is_succ: Any) -> str:
    """Return ``"successful"`` or ``"failed"``."""
    return "successful" if is_succ else "failed"


def target_name(target: int) -> str:
    """Describe a target code, such as ``" GNSS_MSM with SSC"``."""
    index = target_gnss_type(target)
    if index < 0 or index >= len(TARGET_NAMES):
        index = len(TARGET_NAMES) - 1
    name = name_from_val(TARGET_NAMES, index)
    if int(target) & SscType.HAS_SSC == SscType.HAS_SSC:
        return f" {name} with SSC"
    return f" {name}  without SSC"


def format_time(now: Optional[datetime] = None) -> str:
    """Return local time as ``HH:MM:SS.mmm``."""
    if now is None:
        now = datetime.now()
    return f"{now.strftime('%H:%M:%S')}.{now.microsecond // 1000:03d}"


def format_timestamp(now: Optional[float] = None) -> str:
    """Return the time of day from epoch seconds as ``HH:MM:SS.uuuuuu``."""
    if now is None:
        now = time.time()
    seconds, micros = divmod(int(round(now * 1_000_000)), 1_000_000)
    hours = seconds // 3600 % 24
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{micros:06d}"


class LocLogger:
    """Logger whose output is gated by a configured debug level.

    A level from 1 to 5 lets through messages up to that severity
    (1 errors only, 5 everything) and reports them all at error level.
    The default level 0xff lets every message through at its own level.
    """

    def __init__(
        self,
        debug_level: int = DEFAULT_DEBUG_LEVEL,
        timestamp: int = 0,
    ) -> None:
        self.debug_level = debug_level
        self.timestamp = timestamp
        self._log = logging.getLogger(LOGGER_NAME)

    def init(self, debug_level: int, timestamp: int) -> None:
        """Set the debug level and whether call-flow lines carry a timestamp."""
        self.debug_level = debug_level
        self.timestamp = timestamp

    def _emit(
        self, threshold: int, prefix: str, level: int, message: str, args: tuple
    ) -> bool:
        if threshold <= self.debug_level <= 5:
            self._log.log(logging.ERROR, prefix + message, *args)
            return True
        if self.debug_level == DEFAULT_DEBUG_LEVEL:
            self._log.log(level, prefix + message, *args)
            return True
        return False

    def error(self, message: str, *args: Any) -> bool:
        """Log an error; return True if it passed the debug level."""
        return self._emit(1, "W/", logging.ERROR, message, args)

    def warning(self, message: str, *args: Any) -> bool:
        """Log a warning; return True if it passed the debug level."""
        return self._emit(2, "W/", logging.WARNING, message, args)

    def info(self, message: str, *args: Any) -> bool:
        """Log an informational message; return True if it passed the debug level."""
        return self._emit(3, "I/", logging.INFO, message, args)

    def debug(self, message: str, *args: Any) -> bool:
        """Log a debug message; return True if it passed the debug level."""
        return self._emit(4, "D/", logging.DEBUG, message, args)

    def verbose(self, message: str, *args: Any) -> bool:
        """Log a verbose message; return True if it passed the debug level."""
        return self._emit(5, "V/", VERBOSE, message, args)

    def callflow(
        self, ident: str, what: str, value: Any = "", verbose: bool = False
    ) -> bool:
        """Log a call-flow line such as ``"Entering start"``, timestamped if enabled."""
        emit = self.verbose if verbose else self.info
        if self.timestamp:
            return emit("[%s] %s %s %s", format_timestamp(), ident, what, value)
        return emit("%s %s %s", ident, what, value)


loc_logger = LocLogger()


def logger_init(debug_level: int, timestamp: int) -> LocLogger:
    """Configure the shared logger and return it."""
    loc_logger.init(debug_level, timestamp)
    return loc_logger