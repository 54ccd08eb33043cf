"""Detection of the GNSS hardware target the device runs on."""

from __future__ import annotations

import enum
import logging
import time
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

log = logging.getLogger(__name__)


class GnssTarget(enum.IntEnum):
    """Kind of GNSS engine present on the device."""

    NONE = 0
    MSM = 1
    GSS = 2
    MDM = 3
    QCA1530 = 4
    UNKNOWN = 5


class SscType(enum.IntEnum):
    """Whether a sensor subsystem core is present."""

    NO_SSC = 0
    HAS_SSC = 1


def make_target(gnss: int, ssc: int) -> int:
    """Combine a GNSS type and an SSC flag into a target code."""
    return (int(gnss) << 1) | int(ssc)


def target_gnss_type(target: int) -> int:
    """Return the GNSS type part of a target code."""
    return int(target) >> 1


TARGET_DEFAULT = make_target(GnssTarget.MSM, SscType.HAS_SSC)
TARGET_MDM = make_target(GnssTarget.MDM, SscType.HAS_SSC)
TARGET_APQ_SA = make_target(GnssTarget.GSS, SscType.NO_SSC)
TARGET_MPQ = make_target(GnssTarget.NONE, SscType.NO_SSC)
TARGET_MSM_NO_SSC = make_target(GnssTarget.MSM, SscType.NO_SSC)
TARGET_QCA1530 = make_target(GnssTarget.QCA1530, SscType.NO_SSC)
TARGET_UNKNOWN = make_target(GnssTarget.UNKNOWN, SscType.NO_SSC)
# Returned when detection could not settle on a target.
TARGET_INVALID = 0xFFFFFFFF

_MPQ8064_ID_1 = "130"
_MSM8930_ID_1 = "142"
_MSM8930_ID_2 = "116"

_LINE_LEN = 100
_STR_LIQUID = "Liquid"
_STR_SURF = "Surf"
_STR_MTP = "MTP"
_STR_APQ = "apq"

_QCA1530_PROPERTY = "persist.qca1530"
_QCA1530_DETECT_TIMEOUT = 30
_QCA1530_DETECT_PRESENT = "yes"
_QCA1530_DETECT_PROGRESS = "detect"

_HW_PLATFORM = "/sys/devices/soc0/hw_platform"
_SOC_ID = "/sys/devices/soc0/soc_id"
_HW_PLATFORM_DEP = "/sys/devices/system/soc/soc0/hw_platform"
_SOC_ID_DEP = "/sys/devices/system/soc/soc0/id"
_MDM = "/dev/mdm"

Properties = Union[Mapping[str, str], Callable[[str], Optional[str]]]


def _matches(line: str, token: str) -> bool:
    """True when ``line`` is ``token`` followed by the end of the string or a line break."""
    if not line.startswith(token):
        return False
    rest = line[len(token):]
    return rest == "" or rest[0] in "\n\r"


class TargetDetector:
    """Works out the target code from system files and properties.

    ``root`` is the directory the system paths are looked up under,
    ``properties`` a mapping or a lookup function for system properties, and
    ``sleep`` the function used to wait between property polls.
    The first settled result is cached.
    """

    def __init__(
        self,
        root: Union[str, Path] = "/",
        properties: Optional[Properties] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._root = Path(root)
        self._properties: Properties = properties if properties is not None else {}
        self._sleep = sleep
        self._target: Optional[int] = None

    def _property(self, name: str, default: str = "") -> str:
        if callable(self._properties):
            value = self._properties(name)
        else:
            value = self._properties.get(name)
        return default if value is None else value

    def _path(self, system_path: str) -> Path:
        return self._root / system_path.lstrip("/")

    def _read_a_line(self, system_path: str) -> Optional[str]:
        path = self._path(system_path)
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as handle:
                line = handle.readline(_LINE_LEN - 1)
        except OSError as exc:
            log.error("open failed: %s: %s", path, exc.strerror)
            return None
        log.debug("cat %s: %s", path, line)
        return line

    def is_qca1530(self) -> bool:
        """Return True when the QCA1530 SoC is configured, waiting out detection."""
        detected = False
        for _ in range(_QCA1530_DETECT_TIMEOUT):
            value = self._property(_QCA1530_PROPERTY)
            log.debug("qca1530: property %s is set to %s", _QCA1530_PROPERTY, value)
            if value == _QCA1530_DETECT_PRESENT:
                detected = True
                break
            if value == _QCA1530_DETECT_PROGRESS:
                log.debug("qca1530: SoC detection is in progress.")
                self._sleep(1)
                continue
            break
        log.debug("qca1530: detected=%s", "true" if detected else "false")
        return detected

    def _read_first_existing(self, primary: str, fallback: str) -> str:
        chosen = primary if self._path(primary).exists() else fallback
        return self._read_a_line(chosen) or ""

    def detect(self) -> int:
        """Return the target code, detecting it on first use."""
        if self._target is not None:
            return self._target

        target = TARGET_INVALID
        if self.is_qca1530():
            target = TARGET_QCA1530
        else:
            baseband = self._property("ro.baseband", "")
            hw_platform = self._read_first_existing(_HW_PLATFORM, _HW_PLATFORM_DEP)
            soc_id = self._read_first_existing(_SOC_ID, _SOC_ID_DEP)

            if baseband.startswith(_STR_APQ):
                if _matches(soc_id, _MPQ8064_ID_1):
                    target = TARGET_MPQ
                else:
                    target = TARGET_APQ_SA
            elif any(
                _matches(hw_platform, token)
                for token in (_STR_LIQUID, _STR_SURF, _STR_MTP)
            ):
                if self._read_a_line(_MDM) is not None:
                    target = TARGET_MDM
            elif _matches(soc_id, _MSM8930_ID_1) or _matches(soc_id, _MSM8930_ID_2):
                target = TARGET_MSM_NO_SSC
            else:
                target = TARGET_UNKNOWN

        log.debug("HAL: detect returned %d", target)
        if target != TARGET_INVALID:
            self._target = target
        return target