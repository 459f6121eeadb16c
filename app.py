"""
app.py
Description: A Flask application serving two Funlets, small stateless Twilio Voice webhooks. The Forward Funlet forwards
the call to a phone number, optionally restricted to a list of allowed callers, and falls back to another URL when the
forwarded call fails. The Simple Menu Funlet asks the caller to press digits and redirects to the matching option.

 Contents:
1. Initialize the Flask application
2. Create helper functions
3. Handle unexpected errors
4. Define the webhooks

No session is used: Twilio calls the same webhook once per stage of the call, and each request carries everything the
Funlet needs to know which stage it is in.
"""

import logging
import os

from flask import Flask, Response, request
from twilio.twiml.voice_response import VoiceResponse
from werkzeug.exceptions import HTTPException

from funlets.config import ForwardDefaults, MenuDefaults, load_environment
from funlets.forward import handle_forward
from funlets.inputs import request_params
from funlets.simple_menu import handle_simple_menu

"""
1. Initialize the Flask application
The compiled defaults of each Funlet are kept in the app config. They are frozen values, replace them as a whole to
change them. Environment overrides (FUNLET_FORWARD_*, FUNLET_MENU_*) are read on every request, after a .env file, if
any, has been loaded.
"""
load_environment()

app = Flask(__name__)
app.config['FUNLET_FORWARD_DEFAULTS'] = ForwardDefaults()
app.config['FUNLET_MENU_DEFAULTS'] = MenuDefaults()

"""
2. Create helper functions
Twilio sends its parameters in the query string for GET and in the form body for POST. The action URL of the Forward
Funlet adds its own query parameters to a POST, so both are merged. A JSON body may also be sent by hand to pass
structured values, such as a map of menu options.
"""

def current_params():
    return request_params(request.args, request.form, request.get_json(silent=True))


def twiml(response):
    return Response(str(response), mimetype='text/xml')

"""
3. Handle unexpected errors
The Funlets resolve every missing or invalid input to a default, so this is a last resort. Twilio still needs TwiML
in return, or it would read out its own application error to the caller.
"""

@app.errorhandler(Exception)
def on_error(e):
    if isinstance(e, HTTPException):
        return e
    app.logger.exception('Funlet failed on %s', request.path)
    response = VoiceResponse()
    response.say('Sorry, an application error has occurred. Good bye.')
    response.hangup()
    return twiml(response)

"""
4. Define the webhooks
The routes end with a slash: the Forward Funlet returns to itself through the relative action URL ".", which resolves
to the same route only from a URL ending with a slash.
"""

@app.route('/forward/', methods=['GET', 'POST'])
def forward_webhook():
    response = handle_forward(current_params(), os.environ, app.config['FUNLET_FORWARD_DEFAULTS'])
    return twiml(response)


@app.route('/simple-menu/', methods=['GET', 'POST'])
def simple_menu_webhook():
    response = handle_simple_menu(current_params(), os.environ, app.config['FUNLET_MENU_DEFAULTS'])
    return twiml(response)


if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', '5000')),
        debug=os.environ.get('FLASK_DEBUG', '0') == '1',
    )
