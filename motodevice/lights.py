"""Control of the LCD backlight and the notification LED."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union

log = logging.getLogger(__name__)

LCD_FILE = "/sys/class/leds/lcd-backlight/brightness"
RGB_CONTROL_FILE = "/sys/class/leds/rgb/control"

LED_LIGHT_OFF = 0
LED_LIGHT_ON = 255

LIGHT_ID_BACKLIGHT = "backlight"
LIGHT_ID_NOTIFICATIONS = "notifications"
LIGHT_ID_ATTENTION = "attention"

PathLike = Union[str, Path]


class FlashMode(enum.IntEnum):
    """How a light should blink."""

    NONE = 0
    TIMED = 1
    HARDWARE = 2


@dataclass(frozen=True)
class LightState:
    """Requested state of a light; ``color`` is 0xAARRGGBB."""

    color: int = 0
    flash_mode: int = FlashMode.NONE
    flash_on_ms: int = 0
    flash_off_ms: int = 0


def is_lit(state: LightState) -> bool:
    """Return True when any colour channel is non-zero."""
    return bool(state.color & 0x00FFFFFF)


def rgb_to_brightness(state: LightState) -> int:
    """Return the perceived brightness (0-255) of the state's colour."""
    color = state.color & 0x00FFFFFF
    return (
        77 * ((color >> 16) & 0xFF)
        + 150 * ((color >> 8) & 0xFF)
        + 29 * (color & 0xFF)
    ) >> 8


def blink_pattern(state: LightState) -> str:
    """Return the LED control string for ``state``.

    The red component carries the brightness level; it is taken from the
    alpha byte, or full brightness when that is zero.
    """
    if state.flash_mode in (FlashMode.TIMED, FlashMode.HARDWARE):
        on_ms, off_ms = state.flash_on_ms, state.flash_off_ms
    else:
        on_ms = off_ms = 0

    if is_lit(state):
        alpha = (state.color & 0xFF000000) >> 24
        level = alpha if alpha else LED_LIGHT_ON
    else:
        level = LED_LIGHT_OFF
    return f"{level:x}0000 {on_ms} {off_ms} 1 1"


class Lights:
    """The device's lights: the backlight and a shared notification LED.

    An attention request that is lit takes priority over notifications.
    """

    def __init__(
        self, lcd_path: PathLike = LCD_FILE, rgb_path: PathLike = RGB_CONTROL_FILE
    ) -> None:
        self._lcd_path = Path(lcd_path)
        self._rgb_path = Path(rgb_path)
        self._lock = threading.Lock()
        self._attention = LightState()
        self._warned = {"int": False, "str": False}

    def _write(self, path: Path, text: str, kind: str) -> None:
        try:
            handle = open(path, "r+", encoding="ascii")
        except OSError:
            if not self._warned[kind]:
                log.error("write_%s failed to open %s", kind, path)
                self._warned[kind] = True
            raise
        with handle:
            handle.write(f"{text}\n")

    def _set_led_locked(self, state: LightState) -> None:
        self._write(self._rgb_path, blink_pattern(state), "str")

    def _set_prioritized_locked(self, state: LightState) -> None:
        if is_lit(self._attention):
            self._set_led_locked(self._attention)
        else:
            self._set_led_locked(state)

    def set_backlight(self, state: LightState) -> None:
        """Set the LCD backlight to the brightness of ``state``'s colour."""
        brightness = rgb_to_brightness(state)
        with self._lock:
            self._write(self._lcd_path, str(brightness), "int")

    def set_notifications(self, state: LightState) -> None:
        """Show a notification on the LED unless attention is active."""
        with self._lock:
            self._set_prioritized_locked(state)

    def set_attention(self, state: LightState) -> None:
        """Record the attention state and update the LED."""
        with self._lock:
            self._attention = state
            self._set_prioritized_locked(state)

    def open(self, name: str) -> Callable[[LightState], None]:
        """Return the setter for the light called ``name``."""
        setters = {
            LIGHT_ID_BACKLIGHT: self.set_backlight,
            LIGHT_ID_NOTIFICATIONS: self.set_notifications,
            LIGHT_ID_ATTENTION: self.set_attention,
        }
        try:
            return setters[name]
        except KeyError:
            raise ValueError(f"unknown light: {name}") from None