"""
Decisions taken before any instruction is emitted: whether a caller may be
forwarded, and which menu option the gathered digits select.
"""

import enum


class Match(enum.Enum):
    NOTHING_GATHERED = 'nothing gathered'
    NO_MATCH = 'no match'


def is_forwarding_allowed(caller, called, allowed_callers):
    """
    Tell whether the call may be forwarded.

    Parameters:
        caller - digits of the phone number of the caller
        called - digits of the Twilio phone number called
        allowed_callers - digits of the allowed callers; empty allows all

    Returns True when the list is empty, when the caller is in the list,
    or when the called number is in the list. Nothing documents why the
    called number counts; the rule is kept for compatibility with the
    original Forward Twimlet and grants no extra security.
    A caller or called number without digits, such as 'anonymous', never
    matches, even an allowed caller that had no digits either.
    """
    if len(allowed_callers) == 0:
        return True
    return (caller != '' and caller in allowed_callers) or (
        called != '' and called in allowed_callers
    )


def match_option(digits, options):
    """Return the URL of the option for the digits, or a Match outcome."""
    if digits == '':
        return Match.NOTHING_GATHERED
    if digits not in options:
        return Match.NO_MATCH
    return options[digits]
