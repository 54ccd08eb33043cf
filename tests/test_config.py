import pytest

from motodevice import loclog
from motodevice.config import (
    LOC_MAX_PARAM_STRING,
    ConfigParam,
    ConfigValue,
    ParamType,
    parse_config_line,
    read_conf,
    set_config_entry,
    trim_space,
)


@pytest.fixture(autouse=True)
def reset_logger(tmp_path):
    yield
    defaults = tmp_path / "defaults.conf"
    defaults.write_text("DEBUG_LEVEL = 0xff\nTIMESTAMP = 0\n")
    read_conf(defaults)


def test_trim_space_removes_both_ends():
    assert trim_space("  \tabc def \r\n") == "abc def"


def test_trim_space_keeps_whitespace_only_string():
    assert trim_space(" \t ") == " \t "


def test_trim_space_keeps_clean_string():
    assert trim_space("value") == "value"


def test_parse_line_without_equals_is_skipped():
    assert parse_config_line("no equals here\n") is None


def test_parse_line_without_value_is_skipped():
    assert parse_config_line("NAME=") is None


def test_parse_decimal_value():
    value = parse_config_line("SUPL_PORT = 7275\n")
    assert value.name == "SUPL_PORT"
    assert value.str_value == "7275"
    assert value.int_value == 7275
    assert value.double_value == 7275.0


def test_parse_hex_value():
    value = parse_config_line("MASK=0x1F\n")
    assert value.int_value == 0x1F
    assert value.double_value == 0.0


def test_parse_float_value_truncates_integer():
    value = parse_config_line("RATIO = 3.5")
    assert value.double_value == 3.5
    assert value.int_value == 3


def test_parse_leading_number_prefix():
    value = parse_config_line("N=12abc")
    assert value.int_value == 12
    assert value.str_value == "12abc"


def test_parse_repeated_separators_are_skipped():
    value = parse_config_line("=NAME==value=ignored")
    assert value.name == "NAME"
    assert value.str_value == "value"


def test_set_entry_ignores_other_names():
    entry = ConfigParam("A", ParamType.NUMBER, 1)
    assert set_config_entry(entry, ConfigValue("B", "5", 5, 5.0)) is False
    assert entry.value == 1
    assert entry.is_set is False


def test_set_string_entry_null_clears():
    entry = ConfigParam("HOST", ParamType.STRING, "old")
    assert set_config_entry(entry, ConfigValue("HOST", "NULL"))
    assert entry.value == ""
    assert entry.is_set


def test_set_string_entry_is_truncated():
    entry = ConfigParam("HOST", ParamType.STRING)
    set_config_entry(entry, ConfigValue("HOST", "h" * 200))
    assert len(entry.value) == LOC_MAX_PARAM_STRING


def test_set_float_entry():
    entry = ConfigParam("F", ParamType.FLOAT)
    set_config_entry(entry, ConfigValue("F", "2.25", 2, 2.25))
    assert entry.value == 2.25


def test_bad_param_type_rejected():
    with pytest.raises(ValueError):
        ConfigParam("X", "q")


def test_set_entry_none_rejected():
    with pytest.raises(ValueError):
        set_config_entry(None, ConfigValue("A", "1"))


def test_read_conf_sets_table(tmp_path):
    conf = tmp_path / "gps.conf"
    conf.write_text(
        "# comment line\n"
        "SUPL_HOST = supl.example.com\n"
        "INTERMEDIATE_POS = 1\n"
        "ACCURACY_THRES = 0x10\n"
        "RATE = 1.5\n"
    )
    host = ConfigParam("SUPL_HOST", ParamType.STRING)
    pos = ConfigParam("INTERMEDIATE_POS", ParamType.NUMBER)
    thres = ConfigParam("ACCURACY_THRES", ParamType.NUMBER)
    rate = ConfigParam("RATE", ParamType.FLOAT)
    missing = ConfigParam("MISSING", ParamType.NUMBER, 7, is_set=True)

    assert read_conf(conf, [host, pos, thres, rate, missing]) is True
    assert host.value == "supl.example.com"
    assert pos.value == 1
    assert thres.value == 0x10
    assert rate.value == 1.5
    assert all(p.is_set for p in (host, pos, thres, rate))
    assert missing.is_set is False
    assert missing.value == 7


def test_read_conf_missing_file(tmp_path):
    entry = ConfigParam("A", ParamType.NUMBER, 3, is_set=True)
    assert read_conf(tmp_path / "absent.conf", [entry]) is False
    assert entry.is_set is True
    assert entry.value == 3


def test_read_conf_configures_logger(tmp_path):
    conf = tmp_path / "gps.conf"
    conf.write_text("DEBUG_LEVEL = 3\nTIMESTAMP = 1\n")
    assert read_conf(conf) is True
    assert loclog.loc_logger.debug_level == 3
    assert loclog.loc_logger.timestamp == 1


def test_read_conf_long_line_is_split(tmp_path):
    conf = tmp_path / "gps.conf"
    name = "NAME="
    conf.write_text(name + "a" * 100 + "\n")
    entry = ConfigParam("NAME", ParamType.STRING)
    read_conf(conf, [entry])
    assert entry.is_set
    assert set(entry.value) == {"a"}
    assert len(name) + len(entry.value) < 100