import logging
from datetime import datetime

import pytest

from motodevice.loclog import (
    LOGGER_NAME,
    UNKNOWN_STR,
    VERBOSE,
    LocLogger,
    NameVal,
    format_time,
    format_timestamp,
    logger_init,
    loc_logger,
    msg_q_status_name,
    name_from_mask,
    name_from_val,
    succ_fail_string,
    target_name,
)
from motodevice.msgqueue import MsgQueueStatus
from motodevice.target import (
    TARGET_MDM,
    TARGET_UNKNOWN,
    GnssTarget,
    SscType,
    make_target,
)

TABLE = (NameVal("one", 1), NameVal("two", 2), NameVal("four", 4))


def _digits_only(text):
    return text.replace(":", "").replace(".", "")


def test_name_from_val_finds_entry():
    assert name_from_val(TABLE, 2) == "two"


def test_name_from_val_unknown():
    assert name_from_val(TABLE, 3) == UNKNOWN_STR


def test_name_from_mask_returns_first_matching_bit():
    assert name_from_mask(TABLE, 6) == "two"
    assert name_from_mask(TABLE, 8) == UNKNOWN_STR


@pytest.mark.parametrize("status", list(MsgQueueStatus))
def test_msg_q_status_names(status):
    assert msg_q_status_name(status) == "eMSG_Q_" + status.name


def test_msg_q_status_unknown():
    assert msg_q_status_name(7) == UNKNOWN_STR


def test_succ_fail_string():
    assert succ_fail_string(1) == "successful"
    assert succ_fail_string(0) == "failed"


def test_target_name_with_ssc():
    assert target_name(TARGET_MDM) == " GNSS_MDM with SSC"


def test_target_name_without_ssc():
    assert target_name(TARGET_UNKNOWN) == " GNSS_UNKNOWN  without SSC"


@pytest.mark.parametrize("gnss", list(GnssTarget))
def test_target_name_for_each_gnss(gnss):
    assert target_name(make_target(gnss, SscType.NO_SSC)) == (
        f" GNSS_{gnss.name}  without SSC"
    )


def test_target_name_out_of_range_falls_back_to_unknown():
    assert target_name(0xFFFFFFFF) == " GNSS_UNKNOWN with SSC"


def test_format_time_fixed():
    assert format_time(datetime(2020, 1, 2, 3, 4, 5, 678901)) == "03:04:05.678"


def test_format_time_now_shape():
    text = format_time()
    assert len(text) == 12
    assert text[2:9:3] == "::."
    assert _digits_only(text).isdigit() is True


def test_format_timestamp_fixed():
    assert format_timestamp(3661.5) == "01:01:01.500000"


def test_format_timestamp_wraps_days():
    assert format_timestamp(86400 + 3661.5) == format_timestamp(3661.5)


def test_format_timestamp_now_shape():
    text = format_timestamp()
    assert len(text) == 15
    assert text[2:9:3] == "::."
    assert _digits_only(text).isdigit() is True


@pytest.fixture
def captured(caplog):
    caplog.set_level(1, logger=LOGGER_NAME)
    return caplog


def test_default_level_uses_own_levels(captured):
    logger = LocLogger()
    assert logger.warning("w %d", 1) is True
    assert logger.verbose("v") is True
    levels = [(r.levelno, r.getMessage()) for r in captured.records]
    assert levels == [(logging.WARNING, "W/w 1"), (VERBOSE, "V/v")]


def test_numeric_level_gates_and_reports_as_error(captured):
    logger = LocLogger(debug_level=2)
    assert logger.error("e") is True
    assert logger.warning("w") is True
    assert logger.info("i") is False
    assert logger.debug("d") is False
    assert logger.verbose("v") is False
    assert [r.levelno for r in captured.records] == [logging.ERROR, logging.ERROR]
    assert [r.getMessage() for r in captured.records] == ["W/e", "W/w"]


def test_level_zero_logs_nothing(captured):
    logger = LocLogger(debug_level=0)
    assert logger.error("e") is False
    assert captured.records == []


def test_init_changes_level():
    logger = LocLogger()
    logger.init(5, 1)
    assert (logger.debug_level, logger.timestamp) == (5, 1)


def test_callflow_without_timestamp(captured):
    logger = LocLogger()
    assert logger.callflow("Entering", "start") is True
    assert captured.records[0].getMessage() == "I/Entering start "


def test_callflow_with_timestamp(captured):
    logger = LocLogger(timestamp=1)
    assert logger.callflow("Exiting", "stop", 0, verbose=True) is True
    record = captured.records[0]
    assert record.levelno == VERBOSE
    message = record.getMessage()
    head, tail = "V/[", "] Exiting stop 0"
    assert message.startswith(head)
    assert message.endswith(tail)
    stamp = message[len(head):-len(tail)]
    assert len(stamp) == 15
    assert _digits_only(stamp).isdigit() is True


def test_logger_init_sets_shared_logger():
    old = (loc_logger.debug_level, loc_logger.timestamp)
    try:
        result = logger_init(3, 0)
        assert result is loc_logger
        assert (loc_logger.debug_level, loc_logger.timestamp) == (3, 0)
    finally:
        logger_init(*old)