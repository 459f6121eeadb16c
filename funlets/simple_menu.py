"""
Simple Menu Funlet.

Ask the caller to select an option in a menu (stage 1), then gather the
digits pressed and redirect to the URL of the matching option (stage 2).
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType

from twilio.twiml.voice_response import VoiceResponse

from funlets.config import MENU_ENV_PREFIX, MenuDefaults
from funlets.gates import Match, match_option
from funlets.inputs import get_options, resolve
from funlets.messages import simple_message
from funlets.stages import CallSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuInputs:
    message: str
    error_message: str
    language: str
    voice: str
    options: MappingProxyType


def resolve_menu_inputs(params, env, defaults):
    def get(name, env_suffix, default):
        return resolve(name, params, env, MENU_ENV_PREFIX + env_suffix, default)

    return MenuInputs(
        message=get('Message', 'MESSAGE', defaults.message),
        error_message=get('ErrorMessage', 'ERROR_MESSAGE', defaults.error_message),
        language=get('Language', 'LANGUAGE', defaults.language),
        voice=get('Voice', 'VOICE', defaults.voice),
        options=MappingProxyType(get_options(params, env, defaults)),
    )


def gather_digits(response, max_digits, message, language, voice):
    """Gather at most max_digits while playing or saying the message."""
    simple_message(
        response.gather(num_digits=max_digits),
        message,
        language,
        voice,
    )


def simple_menu_stage1(response, message, language, voice, options):
    """
    Prompt the caller for an option.

    The gather accepts as many digits as the longest option, and is
    followed by a redirect to this Funlet so that the menu starts over
    when the caller presses nothing.
    """
    max_digits = max([1] + [len(digits) for digits in options])
    gather_digits(response, max_digits, message, language, voice)
    response.redirect('')


def simple_menu_stage2(response, digits, options, error_message, language, voice):
    """
    Redirect to the option selected by the digits.

    Digits matching no option get the error message instead. Without
    digits, the response is left unchanged.

    Returns True when an option was selected, False otherwise.
    """
    destination = match_option(digits, options)
    if destination is Match.NOTHING_GATHERED:
        return False
    if destination is Match.NO_MATCH:
        logger.info('No menu option for digits %r', digits)
        simple_message(response, error_message, language, voice)
        return False
    response.redirect(str(destination))
    return True


def handle_simple_menu(params, env, defaults=None):
    """Build the Voice response of the Simple Menu Funlet for one request."""
    defaults = defaults or MenuDefaults()
    inputs = resolve_menu_inputs(params, env, defaults)
    snapshot = CallSnapshot.from_params(params)
    logger.debug('Menu digits: %r', snapshot.digits)

    response = VoiceResponse()
    if not simple_menu_stage2(
        response, snapshot.digits, inputs.options,
        inputs.error_message, inputs.language, inputs.voice,
    ):
        simple_menu_stage1(
            response, inputs.message, inputs.language, inputs.voice,
            inputs.options,
        )
    return response
