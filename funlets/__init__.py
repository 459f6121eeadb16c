"""
Funlets: stateless Twilio Voice webhooks for simple IVR flows.

Each Funlet is invoked once per stage of a call and rebuilds its position
in the flow from the request parameters alone.
"""

from funlets.forward import handle_forward
from funlets.simple_menu import handle_simple_menu

__all__ = ['handle_forward', 'handle_simple_menu']
