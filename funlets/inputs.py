"""
Input resolution shared by the Funlets.

Every logical input is looked up in three places, first match wins:

1. the request parameter (an empty string counts as absent)
2. the environment variable
3. the compiled default

Request fields that can arrive in several shapes (a string, a list, a map)
are converted here into one canonical form so the rest of the engine never
sees the difference.
"""

import logging
import re

from funlets.config import (
    FORWARD_ENV_PREFIX,
    LEGACY_API_VERSION,
    MAX_ALLOWED_CALLERS_IN_ENV,
    MENU_ENV_PREFIX,
)

logger = logging.getLogger(__name__)

NUMERIC = re.compile(r'[0-9]+')
NON_DIGITS = re.compile(r'[^0-9]')
ENV_OPTION_URL = re.compile(r'^' + MENU_ENV_PREFIX + r'OPTION([0-9]+)_URL$')
INDEXED_OPTION = re.compile(r'^Options\[([0-9]+)\]$')


def _present(value):
    return value is not None and value != ''


def _scalar(value):
    # a repeated parameter counts by its first value
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def first_param(params, *names):
    """Return the first present parameter among names, as a string."""
    for name in names:
        value = _scalar(params.get(name))
        if _present(value):
            return str(value)
    return ''


def resolve(name, params, env, env_name, default):
    """Return the first present value among param, env var and default."""
    value = _scalar(params.get(name))
    if _present(value):
        return str(value)
    value = env.get(env_name)
    if _present(value):
        return value
    return default


def resolve_number(name, params, env, env_name, default):
    """
    Like resolve(), for an integer input.

    The request or environment value is only used when it is made of
    digits alone; anything else gives the compiled default.
    """
    value = _scalar(params.get(name))
    if not _present(value):
        value = env.get(env_name)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str) and NUMERIC.fullmatch(value):
        return int(value)
    return default


def format_phone_number(number, api_version=None):
    """
    Keep the digits of a phone number.

    With the legacy API version, an 11-digit number starting with 1 loses
    its North American prefix, as Twilio used to send numbers that way.
    """
    digits = NON_DIGITS.sub('', number or '')
    if (
        api_version == LEGACY_API_VERSION
        and len(digits) == 11
        and digits[0] == '1'
    ):
        return digits[1:]
    return digits


def get_allowed_callers(params, env, defaults):
    """
    Build the list of allowed callers, digits only.

    Sources are merged in order: the AllowedCallers parameter (a list or a
    single number), FUNLET_FORWARD_ALLOWED_CALLER1 to 5, then the compiled
    defaults. An empty result means all callers are allowed.
    """
    api_version = _scalar(params.get('ApiVersion'))
    allowed_callers = []

    def add_if_not_empty(number):
        if isinstance(number, str) and number != '':
            allowed_callers.append(format_phone_number(number, api_version))

    from_params = params.get('AllowedCallers')
    if isinstance(from_params, (list, tuple)):
        for number in from_params:
            add_if_not_empty(number)
    else:
        add_if_not_empty(from_params)

    for index in range(1, MAX_ALLOWED_CALLERS_IN_ENV + 1):
        add_if_not_empty(env.get(f'{FORWARD_ENV_PREFIX}ALLOWED_CALLER{index}'))

    for number in defaults.allowed_callers:
        add_if_not_empty(number)

    return tuple(allowed_callers)


def _env_options(env):
    # sorted by option number so that the result does not depend on
    # the iteration order of the environment
    found = []
    for name in env.keys():
        matches = ENV_OPTION_URL.match(name)
        if matches is not None:
            found.append((int(matches.group(1)), matches.group(1), name))
    for _, number, name in sorted(found):
        digits = env.get(f'{MENU_ENV_PREFIX}OPTION{number}_DIGITS') or number
        yield digits, env[name]


def get_options(params, env, defaults):
    """
    Build the menu options, a dict of digits -> action URL.

    Later sources overwrite earlier ones for the same digits:

    1. compiled defaults
    2. FUNLET_MENU_OPTION<n>_URL, keyed by FUNLET_MENU_OPTION<n>_DIGITS
       or by <n> itself
    3. the Options parameter: a string goes under '0', a map is merged,
       a list is merged by position
    4. Options[<n>] parameters

    Values from the request that are not a non-empty string are ignored.
    """
    options = dict(defaults.options)

    for digits, url in _env_options(env):
        options[digits] = url

    def set_option(digits, url):
        # a JSON null or a blank value would make an invalid redirect
        if isinstance(url, str) and url != '':
            options[str(digits)] = url

    bulk = params.get('Options')
    if isinstance(bulk, str):
        set_option('0', bulk)
    elif isinstance(bulk, dict):
        for digits, url in bulk.items():
            set_option(digits, url)
    elif isinstance(bulk, (list, tuple)):
        for index, url in enumerate(bulk):
            set_option(index, url)

    for name, value in params.items():
        matches = INDEXED_OPTION.match(name)
        if matches is not None:
            set_option(matches.group(1), _scalar(value))

    return options


def request_params(args, form, json_body=None):
    """
    Merge the query string, the form body and a JSON body into one dict.

    Single values stay strings. A repeated field, or a field named with a
    trailing '[]', becomes a list under the bare name. A JSON object body
    is merged last and may carry structured values such as an Options map.
    """
    params = {}
    for source in (args, form):
        for name, values in source.lists():
            if name.endswith('[]'):
                params[name[:-2]] = list(values)
            elif len(values) > 1:
                params[name] = list(values)
            else:
                params[name] = values[0]
    if isinstance(json_body, dict):
        params.update(json_body)
    logger.debug('Request parameters: %s', sorted(params))
    return params
