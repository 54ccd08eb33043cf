# motodevice

Small, dependency-free building blocks for device-side support code. Every
part that touches the system takes the paths it reads or writes as
arguments, so it can be pointed at a temporary directory.

## Modules

- `motodevice.linkedlist`: `LinkedList`, a first-in, first-out list. Items
  go in with `add(item, dealloc)` and come out with `remove()`. `flush()`
  calls each item's `dealloc` callback. `search(equal, key, remove)` and
  `discard(equal, key)` find items with a predicate. Errors are
  `InvalidParameterError` and `ResourceUnavailableError`, both
  `LinkedListError`s.
- `motodevice.msgqueue`: `MessageQueue`, a thread-safe queue whose
  `receive()` blocks until a message arrives. `unblock()` wakes every waiting
  receiver. After that, `send` and `receive` raise `QueueUnblockedError`.
  Failures raise `MessageQueueError`, whose `status` is a `MsgQueueStatus`.
- `motodevice.timer`: `LocTimer` and `start_timer(msec, callback, user_data)`.
  These are one-shot timers on their own thread. When the timer runs out it
  calls `callback(user_data, errno.ETIMEDOUT)`, unless `stop()` was called
  first. `state()` reports a `TimerState`.
- `motodevice.target`: target codes built with
  `make_target(gnss, ssc)` and `target_gnss_type(target)`, using the
  `GnssTarget` and `SscType` enums. `TargetDetector(root, properties, sleep)`
  works out the target code from the SoC files under `root` and from system
  properties, and caches the result of `detect()`.
- `motodevice.loclog`: name lookups, which return `"UNKNOWN"` when nothing
  matches:
  - `name_from_val`, `name_from_mask`
  - `msg_q_status_name`, `target_name`
  - `succ_fail_string`

  The time formatters are `format_time` and `format_timestamp`. `LocLogger`
  filters messages by a configured debug level. `logger_init` configures
  the shared logger.
- `motodevice.config`: `read_conf(path, table)` reads `NAME = value` files
  into a list of `ConfigParam` entries. Their types are given by
  `ParamType`: number, string or float. The file may also set `DEBUG_LEVEL`
  and `TIMESTAMP` for the shared logger. `parse_config_line`,
  `set_config_entry` and `trim_space` are the steps it is built from.
- `motodevice.lights`: `Lights(lcd_path, rgb_path)` controls two lights:
  - the backlight brightness
  - the notification LED control string

  A lit attention state takes priority over notifications. `Lights.open(name)`
  returns the setter for `"backlight"`, `"notifications"` or `"attention"`.
  `is_lit`, `rgb_to_brightness` and `blink_pattern` work on a `LightState`.
- `motodevice.power`: `PowerHal(cpufreq_path, interactive_path)` applies the
  `PowerProfile` settings to the CPU frequency governor files. It also
  handles `PowerHint`s through `power_hint(hint, data)`. Screen on/off tuning
  and interaction boosts apply only in the balanced profile.
- `motodevice.fsconfig`: `fs_config(path, is_dir, mode)` returns the uid,
  gid, mode and capabilities that a system image gives a path. The result is
  an `FsConfigResult`. `find_android_id` and `android_id_name` map between
  Android user and group names and ids.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

A message queue shared between threads:

```python
from motodevice.msgqueue import MessageQueue

queue = MessageQueue()
queue.send("hello", None)
print(queue.receive())   # "hello"
queue.unblock()          # waiting receivers now raise QueueUnblockedError
```

Reading a configuration file:

```python
from motodevice.config import ConfigParam, ParamType, read_conf

table = [ConfigParam("INTERMEDIATE_POS", ParamType.NUMBER)]
read_conf("gps.conf", table)
print(table[0].value, table[0].is_set)
```

Filesystem permissions for an image path:

```python
from motodevice.fsconfig import fs_config

result = fs_config("system/bin/run-as", False, 0)
print(result.uid, result.gid, oct(result.mode), result.capabilities)
```

## What it does not do

This is a library only. It has no command-line program and no daemon.

It does not compute positions or talk to a GNSS engine. `TargetDetector`
only classifies the platform.

`Lights` and `PowerHal` only write text to the files they are given. They
do not load drivers or check that the hardware exists.