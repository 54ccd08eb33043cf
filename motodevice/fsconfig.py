"""Android user and group ids and the default ownership of system paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

AID_ROOT = 0
AID_SYSTEM = 1000
AID_RADIO = 1001
AID_BLUETOOTH = 1002
AID_GRAPHICS = 1003
AID_INPUT = 1004
AID_AUDIO = 1005
AID_CAMERA = 1006
AID_LOG = 1007
AID_COMPASS = 1008
AID_MOUNT = 1009
AID_WIFI = 1010
AID_ADB = 1011
AID_INSTALL = 1012
AID_MEDIA = 1013
AID_DHCP = 1014
AID_SDCARD_RW = 1015
AID_VPN = 1016
AID_KEYSTORE = 1017
AID_USB = 1018
AID_DRM = 1019
AID_MDNSR = 1020
AID_GPS = 1021
AID_UNUSED1 = 1022
AID_MEDIA_RW = 1023
AID_MTP = 1024
AID_UNUSED2 = 1025
AID_DRMRPC = 1026
AID_NFC = 1027
AID_SDCARD_R = 1028
AID_CLAT = 1029
AID_LOOP_RADIO = 1030
AID_MEDIA_DRM = 1031
AID_PACKAGE_INFO = 1032
AID_SDCARD_PICS = 1033
AID_SDCARD_AV = 1034
AID_SDCARD_ALL = 1035
AID_LOGD = 1036
AID_SHARED_RELRO = 1037

AID_AUDIT = 1049

AID_SHELL = 2000
AID_CACHE = 2001
AID_DIAG = 2002

AID_NET_BT_ADMIN = 3001
AID_NET_BT = 3002
AID_INET = 3003
AID_NET_RAW = 3004
AID_NET_ADMIN = 3005
AID_NET_BW_STATS = 3006
AID_NET_BW_ACCT = 3007
AID_NET_BT_STACK = 3008
AID_QCOM_DIAG = 3009
AID_IMS = 3010
AID_SENSORS = 3011
AID_RFS = 3012
AID_RFS_SHARED = 3013

AID_MOT_ACCY = 9000
AID_MOT_PWRIC = 9001
AID_MOT_USB = 9002
AID_MOT_DRM = 9003
AID_MOT_TCMD = 9004
AID_MOT_SEC_RTC = 9005
AID_MOT_TOMBSTONE = 9006
AID_MOT_TPAPI = 9007
AID_MOT_SECCLKD = 9008
AID_MOT_WHISPER = 9009
AID_MOT_CAIF = 9010
AID_MOT_DLNA = 9011
AID_MOT_ATVC = 9012
AID_SPRINT_EXTENSION = 9013
AID_MOT_DBVC = 9014

AID_EVERYBODY = 9997
AID_MISC = 9998
AID_NOBODY = 9999

AID_APP = 10000

AID_ISOLATED_START = 99000
AID_ISOLATED_END = 99999

AID_USER = 100000

AID_SHARED_GID_START = 50000
AID_SHARED_GID_END = 59999

CAP_SETGID = 6
CAP_SETUID = 7

ANDROID_IDS: Tuple[Tuple[str, int], ...] = (
    ("root", AID_ROOT),
    ("system", AID_SYSTEM),
    ("radio", AID_RADIO),
    ("bluetooth", AID_BLUETOOTH),
    ("graphics", AID_GRAPHICS),
    ("input", AID_INPUT),
    ("audio", AID_AUDIO),
    ("camera", AID_CAMERA),
    ("log", AID_LOG),
    ("compass", AID_COMPASS),
    ("mount", AID_MOUNT),
    ("wifi", AID_WIFI),
    ("adb", AID_ADB),
    ("install", AID_INSTALL),
    ("media", AID_MEDIA),
    ("dhcp", AID_DHCP),
    ("sdcard_rw", AID_SDCARD_RW),
    ("vpn", AID_VPN),
    ("keystore", AID_KEYSTORE),
    ("usb", AID_USB),
    ("drm", AID_DRM),
    ("mdnsr", AID_MDNSR),
    ("gps", AID_GPS),
    ("media_rw", AID_MEDIA_RW),
    ("mtp", AID_MTP),
    ("drmrpc", AID_DRMRPC),
    ("nfc", AID_NFC),
    ("sdcard_r", AID_SDCARD_R),
    ("clat", AID_CLAT),
    ("loop_radio", AID_LOOP_RADIO),
    ("mediadrm", AID_MEDIA_DRM),
    ("package_info", AID_PACKAGE_INFO),
    ("sdcard_pics", AID_SDCARD_PICS),
    ("sdcard_av", AID_SDCARD_AV),
    ("sdcard_all", AID_SDCARD_ALL),
    ("logd", AID_LOGD),
    ("shared_relro", AID_SHARED_RELRO),
    ("audit", AID_AUDIT),
    ("shell", AID_SHELL),
    ("cache", AID_CACHE),
    ("diag", AID_DIAG),
    ("net_bt_admin", AID_NET_BT_ADMIN),
    ("net_bt", AID_NET_BT),
    ("inet", AID_INET),
    ("net_raw", AID_NET_RAW),
    ("net_admin", AID_NET_ADMIN),
    ("net_bw_stats", AID_NET_BW_STATS),
    ("qcom_diag", AID_QCOM_DIAG),
    ("ims", AID_IMS),
    ("net_bw_acct", AID_NET_BW_ACCT),
    ("net_bt_stack", AID_NET_BT_STACK),
    ("qcom_diag", AID_QCOM_DIAG),
    ("sensors", AID_SENSORS),
    ("rfs", AID_RFS),
    ("rfs_shared", AID_RFS_SHARED),
    ("mot_accy", AID_MOT_ACCY),
    ("mot_pwric", AID_MOT_PWRIC),
    ("mot_usb", AID_MOT_USB),
    ("mot_drm", AID_MOT_DRM),
    ("mot_tcmd", AID_MOT_TCMD),
    ("mot_sec_rtc", AID_MOT_SEC_RTC),
    ("mot_tombstone", AID_MOT_TOMBSTONE),
    ("mot_tpapi", AID_MOT_TPAPI),
    ("mot_secclkd", AID_MOT_SECCLKD),
    ("mot_whisper", AID_MOT_WHISPER),
    ("mot_caif", AID_MOT_CAIF),
    ("mot_dlna", AID_MOT_DLNA),
    ("mot_atvc", AID_MOT_ATVC),
    ("sprint_extension", AID_SPRINT_EXTENSION),
    ("mot_dbvc", AID_MOT_DBVC),
    ("everybody", AID_EVERYBODY),
    ("misc", AID_MISC),
    ("nobody", AID_NOBODY),
)


@dataclass(frozen=True)
class FsPathConfig:
    """Ownership, permissions and capabilities for paths matching ``prefix``.

    A None prefix marks the rule that applies when nothing else matches.
    """

    mode: int
    uid: int
    gid: int
    capabilities: int
    prefix: Optional[str]


@dataclass(frozen=True)
class FsConfigResult:
    """Ownership, mode and capabilities worked out for one path."""

    uid: int
    gid: int
    mode: int
    capabilities: int


_C = FsPathConfig

# Rules apply on first match, most specific first.
ANDROID_DIRS: Tuple[FsPathConfig, ...] = (
    _C(0o0770, AID_SYSTEM, AID_CACHE, 0, "cache"),
    _C(0o0771, AID_SYSTEM, AID_SYSTEM, 0, "data/app"),
    _C(0o0771, AID_SYSTEM, AID_SYSTEM, 0, "data/app-private"),
    _C(0o0771, AID_ROOT, AID_ROOT, 0, "data/dalvik-cache"),
    _C(0o0771, AID_SYSTEM, AID_SYSTEM, 0, "data/data"),
    _C(0o0771, AID_SHELL, AID_SHELL, 0, "data/local/tmp"),
    _C(0o0771, AID_SHELL, AID_SHELL, 0, "data/local"),
    _C(0o1771, AID_SYSTEM, AID_MISC, 0, "data/misc"),
    _C(0o0770, AID_DHCP, AID_DHCP, 0, "data/misc/dhcp"),
    _C(0o0771, AID_SHARED_RELRO, AID_SHARED_RELRO, 0, "data/misc/shared_relro"),
    _C(0o0775, AID_MEDIA_RW, AID_MEDIA_RW, 0, "data/media"),
    _C(0o0775, AID_MEDIA_RW, AID_MEDIA_RW, 0, "data/media/Music"),
    _C(0o0771, AID_SYSTEM, AID_SYSTEM, 0, "data"),
    _C(0o0750, AID_ROOT, AID_SHELL, 0, "sbin"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/bin"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/vendor"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/xbin"),
    _C(0o0755, AID_ROOT, AID_ROOT, 0, "system/etc/ppp"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/etc"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "vendor"),
    _C(0o0777, AID_ROOT, AID_ROOT, 0, "sdcard"),
    _C(0o0755, AID_ROOT, AID_ROOT, 0, None),
)

# Prefixes ending in * match any path that starts with the rest.
ANDROID_FILES: Tuple[FsPathConfig, ...] = (
    _C(0o0440, AID_ROOT, AID_SHELL, 0, "system/etc/init.goldfish.rc"),
    _C(0o0550, AID_ROOT, AID_SHELL, 0, "system/etc/init.goldfish.sh"),
    _C(0o0440, AID_ROOT, AID_SHELL, 0, "system/etc/init.trout.rc"),
    _C(0o0550, AID_ROOT, AID_SHELL, 0, "system/etc/init.ril"),
    _C(0o0550, AID_ROOT, AID_SHELL, 0, "system/etc/init.testmenu"),
    _C(0o0550, AID_DHCP, AID_SHELL, 0, "system/etc/dhcpcd/dhcpcd-run-hooks"),
    _C(0o0444, AID_RADIO, AID_AUDIO, 0, "system/etc/AudioPara4.csv"),
    _C(0o0555, AID_ROOT, AID_ROOT, 0, "system/etc/ppp/*"),
    _C(0o0555, AID_ROOT, AID_ROOT, 0, "system/etc/rc.*"),
    _C(0o0644, AID_SYSTEM, AID_SYSTEM, 0, "data/app/*"),
    _C(0o0644, AID_MEDIA_RW, AID_MEDIA_RW, 0, "data/media/*"),
    _C(0o0644, AID_SYSTEM, AID_SYSTEM, 0, "data/app-private/*"),
    _C(0o0644, AID_APP, AID_APP, 0, "data/data/*"),
    _C(0o0755, AID_ROOT, AID_ROOT, 0, "system/bin/ping"),
    # Set-gid on purpose, not set-uid.
    _C(0o2750, AID_ROOT, AID_INET, 0, "system/bin/netcfg"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/xbin/su"),
    _C(0o6755, AID_ROOT, AID_ROOT, 0, "system/xbin/librank"),
    _C(0o6755, AID_ROOT, AID_ROOT, 0, "system/xbin/procrank"),
    _C(0o6755, AID_ROOT, AID_ROOT, 0, "system/xbin/procmem"),
    _C(0o4770, AID_ROOT, AID_RADIO, 0, "system/bin/pppd-ril"),
    _C(
        0o0750,
        AID_ROOT,
        AID_SHELL,
        (1 << CAP_SETUID) | (1 << CAP_SETGID),
        "system/bin/run-as",
    ),
    _C(0o0750, AID_ROOT, AID_ROOT, 0, "system/bin/uncrypt"),
    _C(0o0750, AID_ROOT, AID_ROOT, 0, "system/bin/install-recovery.sh"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/bin/*"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/etc/init.d/*"),
    _C(0o0755, AID_ROOT, AID_ROOT, 0, "system/lib/valgrind/*"),
    _C(0o0755, AID_ROOT, AID_ROOT, 0, "system/lib64/valgrind/*"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/xbin/*"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/vendor/bin/*"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "vendor/bin/*"),
    _C(0o0750, AID_ROOT, AID_SHELL, 0, "sbin/*"),
    _C(0o0755, AID_ROOT, AID_ROOT, 0, "bin/*"),
    _C(0o0750, AID_ROOT, AID_SHELL, 0, "init*"),
    _C(0o0750, AID_ROOT, AID_SHELL, 0, "sbin/fs_mgr"),
    _C(0o0640, AID_ROOT, AID_SHELL, 0, "fstab.*"),
    _C(0o0755, AID_ROOT, AID_SHELL, 0, "system/etc/init.d/*"),
    _C(0o0644, AID_ROOT, AID_ROOT, 0, None),
)


def _rule_matches(rule: FsPathConfig, path: str, is_dir: bool) -> bool:
    prefix = rule.prefix
    if prefix is None:
        return True
    if is_dir:
        return path.startswith(prefix)
    if prefix.endswith("*"):
        return path.startswith(prefix[:-1])
    return path == prefix


def fs_config(path: str, is_dir: bool, mode: int = 0) -> FsConfigResult:
    """Return the ownership, mode and capabilities the build gives ``path``.

    The permission bits of ``mode`` are replaced; its file type bits are kept.
    """
    if path.startswith("/"):
        path = path[1:]
    rules = ANDROID_DIRS if is_dir else ANDROID_FILES
    rule = next(r for r in rules if _rule_matches(r, path, is_dir))
    return FsConfigResult(
        uid=rule.uid,
        gid=rule.gid,
        mode=(mode & ~0o7777) | rule.mode,
        capabilities=rule.capabilities,
    )


def find_android_id(name: str) -> int:
    """Return the id of the named Android user or group."""
    for entry_name, aid in ANDROID_IDS:
        if entry_name == name:
            return aid
    raise KeyError(name)


def android_id_name(aid: int) -> str:
    """Return the name of the Android user or group with id ``aid``."""
    for name, entry_aid in ANDROID_IDS:
        if entry_aid == aid:
            return name
    raise KeyError(aid)