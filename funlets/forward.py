"""
Forward Funlet.

Forward the call to a forwarding number, optionally checking that the
caller is on a list of allowed numbers (stage 1). When the forwarding call
ends (stage 2), hang up if it was successful or redirect to the fallback
URL, if any.
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote

from twilio.twiml.voice_response import VoiceResponse

from funlets.config import FORWARD_ENV_PREFIX, ForwardDefaults
from funlets.gates import is_forwarding_allowed
from funlets.inputs import get_allowed_callers, resolve, resolve_number
from funlets.messages import simple_message
from funlets.stages import CallSnapshot, ProcessingResult, classify_stage

logger = logging.getLogger(__name__)

BASE_URL = '.'
SUCCESSFUL_CALL_STATUSES = ('answered', 'completed')


@dataclass(frozen=True)
class ForwardInputs:
    phone_number: str
    caller_id: str
    fallback_url: str
    timeout: int
    allowed_callers: tuple
    access_restricted: str
    language: str
    voice: str


def resolve_forward_inputs(params, env, defaults):
    def get(name, env_suffix, default):
        return resolve(name, params, env, FORWARD_ENV_PREFIX + env_suffix, default)

    return ForwardInputs(
        phone_number=get('PhoneNumber', 'PHONE_NUMBER', defaults.phone_number),
        caller_id=get('CallerId', 'CALLER_ID', defaults.caller_id),
        fallback_url=get('FailUrl', 'FALLBACK_URL', defaults.fallback_url),
        timeout=resolve_number(
            'Timeout', params, env, FORWARD_ENV_PREFIX + 'TIMEOUT', defaults.timeout
        ),
        allowed_callers=get_allowed_callers(params, env, defaults),
        access_restricted=get(
            'AccessRestricted', 'ACCESS_RESTRICTED', defaults.access_restricted
        ),
        language=get('Language', 'LANGUAGE', defaults.language),
        voice=get('Voice', 'VOICE', defaults.voice),
    )


def forward_action_url(fallback_url):
    """
    Return the action URL that brings Twilio back to this Funlet when the
    forwarding call ends.

    The fallback URL travels in the action URL as FailUrl, so that the
    stage 2 request resolves it like any other request parameter.
    """
    action_url = BASE_URL + '?Dial=true'
    if fallback_url != '':
        action_url += '&FailUrl=' + quote(fallback_url, safe="!*'()")
    return action_url


def forward_stage1(
    response,
    allowed, access_restricted, language, voice,
    caller_id, forwarding_number, timeout, fallback_url,
):
    """
    Forward the call, or tell a restricted caller that they cannot be
    forwarded.

    When the caller is allowed, the response gets a <Dial> to the
    forwarding number with the given caller ID (when set) and timeout, and
    an action URL leading to stage 2. Otherwise the response gets the
    access restricted message, played or said, and nothing else.
    """
    if not allowed:
        logger.info('Caller is not allowed to be forwarded')
        simple_message(response, access_restricted, language, voice)
        return
    dial_options = {'action': forward_action_url(fallback_url)}
    if caller_id != '':
        dial_options['caller_id'] = caller_id
    dial_options['timeout'] = timeout
    response.dial(forwarding_number, **dial_options)


def forward_stage2(response, stage, fallback_url):
    """
    Conclude the flow once the forwarding call has ended.

    A failed call is redirected to the fallback URL when there is one;
    in every other case the call is hung up. Until the forwarding call has
    ended, the response is left unchanged.

    Returns True when the forwarding call has ended, False otherwise.
    """
    if not isinstance(stage, ProcessingResult):
        return False
    if stage.status not in SUCCESSFUL_CALL_STATUSES and fallback_url != '':
        logger.info('Forwarding call ended with status %r, falling back', stage.status)
        response.redirect(fallback_url)
    else:
        response.hangup()
    return True


def handle_forward(params, env, defaults=None):
    """Build the Voice response of the Forward Funlet for one request."""
    defaults = defaults or ForwardDefaults()
    inputs = resolve_forward_inputs(params, env, defaults)
    snapshot = CallSnapshot.from_params(params)
    stage = classify_stage(snapshot)
    logger.debug('Forward stage: %s', stage)

    response = VoiceResponse()
    if not forward_stage2(response, stage, inputs.fallback_url):
        forward_stage1(
            response,
            is_forwarding_allowed(
                snapshot.caller, snapshot.called, inputs.allowed_callers
            ),
            inputs.access_restricted, inputs.language, inputs.voice,
            inputs.caller_id, inputs.phone_number, inputs.timeout,
            inputs.fallback_url,
        )
    return response
