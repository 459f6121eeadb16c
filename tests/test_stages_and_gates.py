"""
Tests for stage classification and gates
"""
from funlets.gates import Match, is_forwarding_allowed, match_option
from funlets.stages import (
    AwaitingAction,
    CallSnapshot,
    ProcessingResult,
    classify_stage,
    is_stage_two,
)


def test_snapshot_from_params():
    snapshot = CallSnapshot.from_params({
        'Caller': '+1 415 555 0100',
        'Called': '+1 415 555 0199',
        'DialCallStatus': 'busy',
        'Digits': '12',
    })
    assert snapshot == CallSnapshot(
        caller='14155550100',
        called='14155550199',
        dial_done=False,
        call_status='busy',
        digits='12',
    )


def test_snapshot_prefers_from_and_to():
    snapshot = CallSnapshot.from_params({
        'From': '5550001', 'Caller': '5550002', 'To': '5550003', 'Called': '5550004',
        'DialStatus': 'answered', 'DialCallStatus': 'busy',
    })
    assert (snapshot.caller, snapshot.called, snapshot.call_status) == ('5550001', '5550003', 'answered')


def test_stage_one_without_dial_marker():
    snapshot = CallSnapshot.from_params({'DialCallStatus': 'completed'})
    assert not is_stage_two(snapshot)
    assert classify_stage(snapshot) == AwaitingAction()


def test_empty_dial_marker_still_means_stage_two():
    snapshot = CallSnapshot.from_params({'Dial': '', 'DialCallStatus': 'no-answer'})
    assert is_stage_two(snapshot)
    assert classify_stage(snapshot) == ProcessingResult('no-answer')


def test_forwarding_allowed_with_empty_list():
    assert is_forwarding_allowed('5550001', '5550002', ())


def test_forwarding_allowed_for_listed_caller():
    assert is_forwarding_allowed('5550001', '5550002', ('5550001',))


def test_forwarding_allowed_for_listed_called_number():
    assert is_forwarding_allowed('5550001', '5550002', ('5550002',))


def test_forwarding_refused_otherwise():
    assert not is_forwarding_allowed('5550001', '5550002', ('5550003',))


def test_match_option_outcomes():
    options = {'1': 'https://example.com/1', '22': 'https://example.com/22'}
    assert match_option('', options) is Match.NOTHING_GATHERED
    assert match_option('9', options) is Match.NO_MATCH
    assert match_option('22', options) == 'https://example.com/22'


def test_forwarding_refused_for_numbers_without_digits():
    assert not is_forwarding_allowed('', '', ('',))
    assert not is_forwarding_allowed('', '5550002', ('', '5550003'))


def test_forwarding_still_allows_everyone_without_list():
    assert is_forwarding_allowed('', '', ())


def test_snapshot_keeps_zero_digits_from_json():
    snapshot = CallSnapshot.from_params({'Digits': 0, 'Dial': None})
    assert snapshot.digits == '0'
    assert is_stage_two(snapshot)
