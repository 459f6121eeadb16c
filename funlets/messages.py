def simple_message(response, message, language, voice):
    """
    Play a recording or say a text message.

    A message starting with 'http' is the URL of a recording; any other
    non-empty message is read out with the given language and voice.
    An empty message adds nothing to the response.
    """
    if len(message) == 0:
        return
    if message.startswith('http'):
        response.play(message)
    else:
        response.say(message, language=language, voice=voice)
