#!/usr/bin/env python3
"""
01_hello.py - Speak Your First Message

This is the foundational example for talking to Speech Dispatcher.

What this example demonstrates:
- Using connect() for a one-liner connection
- Adjusting voice, rate and punctuation
- Speaking text and reading back the message id
- Proper resource cleanup with context managers

Key Concepts:
- connect(): Opens the socket and announces the client name
- Message id: Number the server assigns to every queued message
- QUIT: Sent automatically when leaving the with block

Prerequisites:
    - Speech Dispatcher running (speech-dispatcher -d)
    - pyssip installed: pip install pyssip

Expected Output:
    Connecting to Speech Dispatcher...
    Output module: espeak-ng
    ✓ Queued message 12

Run with:
    python 01_hello.py
"""

from pyssip import PunctuationMode, VoiceType, connect


def main():
    print("Connecting to Speech Dispatcher...")
    with connect(application="hello") as client:
        print(f"Output module: {client.get_output_module()}")

        client.set_voice(VoiceType.FEMALE1)
        client.set_rate(10)
        client.set_punctuation(PunctuationMode.SOME)

        message_id = client.speak("Hello, world! This is Speech Dispatcher speaking.")
        print(f"✓ Queued message {message_id}")


if __name__ == "__main__":
    main()
