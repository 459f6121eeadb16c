"""
Compiled defaults of the Funlets.

These values are the last level of input resolution, after the request
parameters and the environment. They are frozen: a deployment that needs
other defaults builds a new value with dataclasses.replace() and installs
it in the Flask app config.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType

from dotenv import load_dotenv

LEGACY_API_VERSION = '2008-08-01'

FORWARD_ENV_PREFIX = 'FUNLET_FORWARD_'
MENU_ENV_PREFIX = 'FUNLET_MENU_'

MAX_ALLOWED_CALLERS_IN_ENV = 5


@dataclass(frozen=True)
class ForwardDefaults:
    # the forwarding number
    phone_number: str = ''

    # one of the verified phone numbers of your account,
    # shown as caller ID for the forwarded call
    caller_id: str = ''

    # URL where further instructions are requested when the forwarding call fails
    fallback_url: str = ''

    # seconds to let the call ring before the recipient picks up
    timeout: int = 20

    # the only callers allowed to be forwarded; empty means everyone
    allowed_callers: tuple = ()

    # recording URL or text to say when the caller is not allowed
    access_restricted: str = (
        'Sorry, you are calling from a restricted number. Good bye.'
    )

    language: str = 'en'
    voice: str = 'alice'

    def __post_init__(self):
        object.__setattr__(self, 'allowed_callers', tuple(self.allowed_callers))


@dataclass(frozen=True)
class MenuDefaults:
    # recording URL or text inviting the caller to select an option
    message: str = ''

    # recording URL or text when the digits pressed match no option
    error_message: str = "I'm sorry, that wasn't a valid option."

    language: str = 'en'
    voice: str = 'alice'

    # digits -> action URL, e.g. {"1": "https://example.com/option/1"}
    options: MappingProxyType = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'options', MappingProxyType(dict(self.options)))


def load_environment(path=None):
    """Load a .env file into os.environ without overriding what is set."""
    path = path or os.environ.get('DOTENV_PATH') or '.env'
    return load_dotenv(path)
