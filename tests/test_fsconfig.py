import stat

import pytest

from motodevice.fsconfig import (
    AID_APP,
    AID_INET,
    AID_MISC,
    AID_QCOM_DIAG,
    AID_ROOT,
    AID_SHELL,
    AID_SYSTEM,
    ANDROID_IDS,
    CAP_SETGID,
    CAP_SETUID,
    FsConfigResult,
    android_id_name,
    find_android_id,
    fs_config,
)


def test_system_bin_wildcard():
    assert fs_config("system/bin/sh", False) == FsConfigResult(
        uid=AID_ROOT, gid=AID_SHELL, mode=0o755, capabilities=0
    )


def test_leading_slash_is_ignored():
    assert fs_config("/system/bin/sh", False) == fs_config("system/bin/sh", False)


def test_exact_file_match_before_wildcard():
    result = fs_config("system/bin/netcfg", False)
    assert result.mode == 0o2750
    assert result.gid == AID_INET


def test_run_as_capabilities():
    result = fs_config("system/bin/run-as", False)
    assert result.capabilities == (1 << CAP_SETUID) | (1 << CAP_SETGID)
    assert result.mode == 0o750


def test_data_data_files_owned_by_app():
    result = fs_config("data/data/com.example/file", False)
    assert (result.uid, result.gid, result.mode) == (AID_APP, AID_APP, 0o644)


def test_exact_rule_needs_full_length():
    result = fs_config("system/bin/pinger", False)
    assert result.gid == AID_SHELL
    assert result.mode == 0o755


def test_default_file_rule():
    result = fs_config("some/unknown/file", False)
    assert (result.uid, result.gid, result.mode) == (AID_ROOT, AID_ROOT, 0o644)


def test_file_type_bits_are_kept():
    result = fs_config("some/unknown/file", False, stat.S_IFREG | 0o777)
    assert stat.S_ISREG(result.mode)
    assert stat.S_IMODE(result.mode) == 0o644


def test_dir_first_match_wins():
    # "data/misc" is listed before "data/misc/dhcp", so it matches first.
    result = fs_config("data/misc/dhcp", True)
    assert result.mode == 0o1771
    assert result.gid == AID_MISC


def test_dir_data_app():
    result = fs_config("/data/app", True)
    assert (result.uid, result.gid, result.mode) == (AID_SYSTEM, AID_SYSTEM, 0o771)


def test_default_dir_rule():
    result = fs_config("elsewhere", True, stat.S_IFDIR)
    assert stat.S_ISDIR(result.mode)
    assert stat.S_IMODE(result.mode) == 0o755
    assert result.uid == AID_ROOT


def test_find_android_id():
    assert find_android_id("shell") == AID_SHELL
    assert find_android_id("root") == AID_ROOT


def test_find_unknown_id_raises():
    with pytest.raises(KeyError):
        find_android_id("no_such_group")


def test_id_name_round_trip():
    for name, aid in ANDROID_IDS:
        assert find_android_id(android_id_name(aid)) == aid
        assert android_id_name(find_android_id(name)) == name


def test_qcom_diag_name():
    assert android_id_name(AID_QCOM_DIAG) == "qcom_diag"


def test_unlisted_id_raises():
    with pytest.raises(KeyError):
        android_id_name(AID_APP)