"""
Stage classification.

A Funlet keeps no session: Twilio calls it once to get the first
instructions and calls it again, through the action URL, once the dial
has ended. The second request is recognized by the Dial marker that the
action URL carries. This module is the only place that looks at the shape
of the request to tell the two stages apart.
"""

from dataclasses import dataclass

from funlets.inputs import first_param, format_phone_number

NO_CALL_STATUS = ''


@dataclass(frozen=True)
class CallSnapshot:
    """What the current request says about the call."""

    caller: str = ''
    called: str = ''
    dial_done: bool = False
    call_status: str = NO_CALL_STATUS
    digits: str = ''

    @classmethod
    def from_params(cls, params):
        api_version = first_param(params, 'ApiVersion')
        return cls(
            caller=format_phone_number(first_param(params, 'From', 'Caller'), api_version),
            called=format_phone_number(first_param(params, 'To', 'Called'), api_version),
            # set by our own action URL, even an empty value counts
            dial_done='Dial' in params,
            call_status=first_param(params, 'DialStatus', 'DialCallStatus'),
            digits=first_param(params, 'Digits'),
        )


@dataclass(frozen=True)
class AwaitingAction:
    """Stage 1: nothing has been attempted yet in this flow."""


@dataclass(frozen=True)
class ProcessingResult:
    """Stage 2: the dial has ended with the given status."""

    status: str = NO_CALL_STATUS


def is_stage_two(snapshot):
    return snapshot.dial_done


def classify_stage(snapshot):
    if is_stage_two(snapshot):
        return ProcessingResult(snapshot.call_status)
    return AwaitingAction()
