"""CPU frequency governor tuning driven by power profiles and hints."""

from __future__ import annotations

import enum
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional, Tuple, Union

log = logging.getLogger(__name__)

CPUFREQ_PATH = "/sys/devices/system/cpu/cpu0/cpufreq/"
INTERACTIVE_PATH = "/sys/devices/system/cpu/cpufreq/interactive/"

SCALING_MAX_FREQ = "1190400"
SCALING_MAX_FREQ_LPM = "787200"

HISPEED_FREQ = "998400"
HISPEED_FREQ_LPM = "787200"

GO_HISPEED_LOAD = "50"
GO_HISPEED_LOAD_LPM = "90"

TARGET_LOADS = "80 998400:90 1190400:99"
TARGET_LOADS_LPM = "95 1190400:99"

PathLike = Union[str, Path]


class PowerProfile(enum.IntEnum):
    """Power profiles the device can run in."""

    POWER_SAVE = 0
    BALANCED = 1
    HIGH_PERFORMANCE = 2


class PowerHint(enum.IntEnum):
    """Hints the framework sends to the power HAL."""

    VSYNC = 0x01
    INTERACTION = 0x02
    VIDEO_ENCODE = 0x03
    VIDEO_DECODE = 0x04
    LOW_POWER = 0x05
    SET_PROFILE = 0x111


def sysfs_write(path: PathLike, value: str) -> None:
    """Write ``value`` to an existing file opened write-only.

    Raises OSError when the file cannot be opened or written.
    """
    fd = os.open(path, os.O_WRONLY)
    try:
        os.write(fd, value.encode("ascii"))
    finally:
        os.close(fd)


# Each setting: (True for the interactive governor directory, file name, value).
_Setting = Tuple[bool, str, str]

_PROFILE_SETTINGS = {
    PowerProfile.BALANCED: (
        (True, "boost", "0"),
        (True, "boostpulse_duration", "60000"),
        (True, "go_hispeed_load", GO_HISPEED_LOAD),
        (True, "hispeed_freq", HISPEED_FREQ),
        (True, "io_is_busy", "1"),
        (True, "min_sample_time", "60000"),
        (True, "sampling_down_factor", "100000"),
        (True, "target_loads", TARGET_LOADS),
        (False, "scaling_max_freq", SCALING_MAX_FREQ),
    ),
    PowerProfile.HIGH_PERFORMANCE: (
        (True, "boost", "1"),
        (True, "boostpulse_duration", "60000"),
        (True, "go_hispeed_load", GO_HISPEED_LOAD),
        (True, "hispeed_freq", HISPEED_FREQ),
        (True, "io_is_busy", "1"),
        (True, "min_sample_time", "60000"),
        (True, "sampling_down_factor", "100000"),
        (True, "target_loads", "80"),
        (False, "scaling_max_freq", SCALING_MAX_FREQ),
    ),
    PowerProfile.POWER_SAVE: (
        (True, "boost", "0"),
        (True, "boostpulse_duration", "0"),
        (True, "go_hispeed_load", GO_HISPEED_LOAD_LPM),
        (True, "hispeed_freq", HISPEED_FREQ_LPM),
        (True, "io_is_busy", "0"),
        (True, "min_sample_time", "60000"),
        (True, "sampling_down_factor", "100000"),
        (True, "target_loads", TARGET_LOADS_LPM),
        (False, "scaling_max_freq", SCALING_MAX_FREQ_LPM),
    ),
}

_INTERACTIVE_ON = (
    ("hispeed_freq", HISPEED_FREQ),
    ("go_hispeed_load", GO_HISPEED_LOAD),
    ("target_loads", TARGET_LOADS),
)

_INTERACTIVE_OFF = (
    ("hispeed_freq", HISPEED_FREQ_LPM),
    ("go_hispeed_load", GO_HISPEED_LOAD_LPM),
    ("target_loads", TARGET_LOADS_LPM),
)


class PowerHal:
    """Applies power profiles and hints to the CPU frequency governor.

    Screen on/off tuning and interaction boosts only apply in the balanced
    profile. No profile is active until one is set.
    """

    def __init__(
        self,
        cpufreq_path: PathLike = CPUFREQ_PATH,
        interactive_path: PathLike = INTERACTIVE_PATH,
    ) -> None:
        self._cpufreq = Path(cpufreq_path)
        self._interactive = Path(interactive_path)
        self._lock = threading.Lock()
        self._boostpulse_fd: Optional[int] = None
        self._profile: Optional[int] = None

    @property
    def current_profile(self) -> Optional[int]:
        """The profile last set, or None before any was set."""
        return self._profile

    def _write(self, path: Path, value: str) -> bool:
        try:
            sysfs_write(path, value)
        except OSError as exc:
            log.error("Error writing to %s: %s", path, exc.strerror or exc)
            return False
        return True

    def set_interactive(self, on: bool) -> None:
        """Tune the governor for screen on or off, in the balanced profile only."""
        if self._profile != PowerProfile.BALANCED:
            return
        for name, value in (_INTERACTIVE_ON if on else _INTERACTIVE_OFF):
            self._write(self._interactive / name, value)

    def set_profile(self, profile: int) -> None:
        """Switch to ``profile``; unknown profiles are recorded but change nothing."""
        if profile == self._profile:
            return
        try:
            settings = _PROFILE_SETTINGS[PowerProfile(profile)]
        except ValueError:
            log.error("set_profile: unknown profile: %d", profile)
        else:
            for interactive, name, value in settings:
                base = self._interactive if interactive else self._cpufreq
                self._write(base / name, value)
            log.debug("set_profile: set %s", PowerProfile(profile).name.lower())
        self._profile = profile

    def _boostpulse_open(self) -> Optional[int]:
        with self._lock:
            if self._boostpulse_fd is None:
                try:
                    self._boostpulse_fd = os.open(
                        self._interactive / "boostpulse", os.O_WRONLY
                    )
                except OSError:
                    self._boostpulse_fd = None
            return self._boostpulse_fd

    def _boost(self) -> None:
        fd = self._boostpulse_open()
        if fd is None:
            return
        try:
            os.write(fd, b"1")
        except OSError as exc:
            log.error("Error writing to boostpulse: %s", exc.strerror or exc)
            self.close()

    def close(self) -> None:
        """Release the boost pulse file if it is open."""
        with self._lock:
            if self._boostpulse_fd is not None:
                try:
                    os.close(self._boostpulse_fd)
                finally:
                    self._boostpulse_fd = None

    def power_hint(self, hint: int, data: Any = None) -> None:
        """React to a power hint; hints this device does not use are ignored."""
        if hint == PowerHint.INTERACTION:
            if self._profile == PowerProfile.BALANCED:
                self._boost()
        elif hint == PowerHint.SET_PROFILE:
            self.set_profile(int(data))
        elif hint == PowerHint.LOW_POWER:
            if data is not None and int(data) == 1:
                self.set_profile(PowerProfile.POWER_SAVE)
            else:
                self.set_profile(PowerProfile.BALANCED)