"""Tests for power-state translation helpers."""

import pytest

from ewelink_session.core import ChannelState, PowerStateReport
from ewelink_session.errors import InvalidChannelError, InvalidPowerStateError
from ewelink_session.power_state import (
    get_all_channels_report,
    get_all_channels_state,
    get_new_power_state,
    get_power_state_params,
    get_power_state_report,
    get_specific_channel_state,
    is_multi_channel,
    validate_power_state,
)


def test_multi_channel_update_mutates_only_target_channel():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}]}

    result = get_power_state_params(params, "on", channel=2)

    assert result == {"switches": [{"switch": "on"}, {"switch": "on"}]}
    # The device's own params are left untouched.
    assert params == {"switches": [{"switch": "on"}, {"switch": "off"}]}


def test_multi_channel_update_keeps_outlets():
    params = {
        "switches": [
            {"switch": "off", "outlet": 0},
            {"switch": "on", "outlet": 1},
            {"switch": "off", "outlet": 2},
        ]
    }

    result = get_power_state_params(params, "on", channel=3)

    assert result["switches"] == [
        {"switch": "off", "outlet": 0},
        {"switch": "on", "outlet": 1},
        {"switch": "on", "outlet": 2},
    ]


def test_single_channel_update():
    assert get_power_state_params({"switch": "off"}, "on") == {"switch": "on"}


def test_single_channel_update_ignores_channel():
    assert get_power_state_params({"switch": "on"}, "off", channel=4) == {
        "switch": "off"
    }


def test_all_channels_update():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}, {"switch": "on"}]}

    result = get_power_state_params(params, "off", all_channels=True)

    assert [item["switch"] for item in result["switches"]] == ["off", "off", "off"]


@pytest.mark.parametrize("channel", [0, 3, -1, "1", None, True])
def test_update_with_out_of_range_channel(channel):
    params = {"switches": [{"switch": "on"}, {"switch": "off"}]}

    with pytest.raises(InvalidChannelError):
        get_power_state_params(params, "on", channel=channel)


@pytest.mark.parametrize("state", ["toggle", "ON", "", None, 1])
def test_update_with_invalid_state(state):
    with pytest.raises(InvalidPowerStateError):
        get_power_state_params({"switch": "off"}, state)


def test_all_channels_state_in_declared_order():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}, {"switch": "on"}]}

    assert get_all_channels_state(params) == ["on", "off", "on"]


def test_all_channels_state_follows_outlet_numbering():
    params = {
        "switches": [
            {"switch": "off", "outlet": 1},
            {"switch": "on", "outlet": 0},
        ]
    }

    assert get_all_channels_state(params) == ["on", "off"]
    assert get_all_channels_report(params) == [
        ChannelState(channel=1, state="on"),
        ChannelState(channel=2, state="off"),
    ]


def test_specific_channel_state():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}]}

    assert get_specific_channel_state(params, 1) == "on"
    assert get_specific_channel_state(params, 2) == "off"


def test_specific_channel_state_out_of_range():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}]}

    with pytest.raises(InvalidChannelError) as excinfo:
        get_specific_channel_state(params, 5)

    assert excinfo.value.channel == 5
    assert excinfo.value.channel_count == 2


def test_new_power_state_has_no_toggle():
    assert get_new_power_state("on", "on") == "on"
    assert get_new_power_state("on", "off") == "off"
    with pytest.raises(InvalidPowerStateError):
        get_new_power_state("on", "toggle")


def test_validate_power_state():
    assert validate_power_state("on") == "on"
    with pytest.raises(InvalidPowerStateError) as excinfo:
        validate_power_state("dim")
    assert excinfo.value.state == "dim"


def test_is_multi_channel():
    assert is_multi_channel({"switches": [{"switch": "on"}]})
    assert not is_multi_channel({"switch": "on"})
    assert not is_multi_channel({"switches": []})


def test_report_for_single_channel_device():
    report = get_power_state_report({"switch": "on"})

    assert report == PowerStateReport(status="ok", state="on", channel=1)
    assert report.as_dict() == {"status": "ok", "state": "on", "channel": 1}


@pytest.mark.parametrize("params", [{}, {"startup": "on"}, {"switch": "toggle"}])
def test_report_without_power_state_is_an_error(params):
    report = get_power_state_report(params)

    assert report.status == "error"
    assert report.state is None
    assert report.message == "snapshot carried no power state"


def test_report_for_specific_channel():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}]}

    report = get_power_state_report(params, channel=2)

    assert report.state == "off"
    assert report.channel == 2


def test_report_for_all_channels():
    params = {"switches": [{"switch": "on"}, {"switch": "off"}]}

    report = get_power_state_report(params, all_channels=True)

    assert report.as_dict() == {
        "status": "ok",
        "state": [
            {"channel": 1, "state": "on"},
            {"channel": 2, "state": "off"},
        ],
    }
