"""Power-state translation between device params and update payloads.

Single-channel devices report ``{"switch": "on"}``. Multi-channel devices
report ``{"switches": [{"switch": "on", "outlet": 0}, ...]}``. Channels are
numbered from 1 for callers; ``outlet`` on the wire is numbered from 0.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping

from .constants import VALID_POWER_STATES
from .core.models import ChannelState, PowerStateReport
from .errors import InvalidChannelError, InvalidPowerStateError


def validate_power_state(state: Any) -> str:
    if state not in VALID_POWER_STATES:
        raise InvalidPowerStateError(state)
    return state


def get_new_power_state(current_state: Any, requested_state: Any) -> str:
    """Return the state a device should move to.

    There is no toggle: the requested state is returned as-is once validated,
    whatever ``current_state`` is.
    """

    return validate_power_state(requested_state)


def is_multi_channel(params: Mapping[str, Any]) -> bool:
    return bool(params.get("switches"))


def _ordered_switches(params: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    switches = list(params.get("switches") or [])
    if switches and all(isinstance(item.get("outlet"), int) for item in switches):
        return sorted(switches, key=lambda item: item["outlet"])
    return switches


def get_all_channels_state(params: Mapping[str, Any]) -> List[str]:
    """Return every channel's state, in outlet order."""

    return [item.get("switch") for item in _ordered_switches(params)]


def get_all_channels_report(params: Mapping[str, Any]) -> List[ChannelState]:
    return [
        ChannelState(channel=index, state=state)
        for index, state in enumerate(get_all_channels_state(params), start=1)
    ]


def get_specific_channel_state(params: Mapping[str, Any], channel: int) -> str:
    states = get_all_channels_state(params)
    if not _channel_in_range(channel, len(states)):
        raise InvalidChannelError(channel, len(states))
    return states[channel - 1]


def get_power_state_params(
    params: Mapping[str, Any],
    state: str,
    channel: int = 1,
    all_channels: bool = False,
) -> Dict[str, Any]:
    """Build the params of an update command that sets ``state``.

    Multi-channel updates must carry the complete ``switches`` list, so every
    channel other than the target keeps its current entry.
    """

    state = validate_power_state(state)

    if not is_multi_channel(params):
        return {"switch": state}

    switches = copy.deepcopy(_ordered_switches(params))
    if all_channels:
        for item in switches:
            item["switch"] = state
        return {"switches": switches}

    if not _channel_in_range(channel, len(switches)):
        raise InvalidChannelError(channel, len(switches))
    switches[channel - 1]["switch"] = state
    return {"switches": switches}


def get_power_state_report(
    params: Mapping[str, Any],
    channel: int = 1,
    all_channels: bool = False,
) -> PowerStateReport:
    """Normalize a status snapshot into a power-state report."""

    if is_multi_channel(params):
        if all_channels:
            return PowerStateReport(status="ok", state=get_all_channels_report(params))
        return PowerStateReport(
            status="ok",
            state=get_specific_channel_state(params, channel),
            channel=channel,
        )

    state = params.get("switch")
    if state not in VALID_POWER_STATES:
        return PowerStateReport(
            status="error",
            channel=channel,
            message="snapshot carried no power state",
        )
    return PowerStateReport(status="ok", state=state, channel=channel)


def _channel_in_range(channel: Any, count: int) -> bool:
    return (
        isinstance(channel, int)
        and not isinstance(channel, bool)
        and 1 <= channel <= count
    )
