#!/usr/bin/env python3
"""
02_voices.py - Output Modules and Voices

This example demonstrates:
- Listing output modules
- Listing the voices of the current module
- Handling server errors for modules that cannot report voices

Prerequisites:
    - Speech Dispatcher running
    - pyssip installed

Run with:
    python 02_voices.py [language]
"""

import sys

from pyssip import ServerError, SSIPClient


def main():
    language = sys.argv[1] if len(sys.argv) > 1 else None

    with SSIPClient(application="voices") as client:
        print("Output modules:")
        for module in client.list_output_modules():
            print(f"  - {module}")

        print(f"\nVoice types: {', '.join(client.list_voices())}")

        try:
            voices = client.list_synthesis_voices()
        except ServerError as e:
            print(f"\nThe current module cannot list voices: {e.message}")
            return

        if language:
            voices = [v for v in voices if v.language and v.language.startswith(language)]

        print(f"\nSynthesis voices ({len(voices)}):")
        for voice in voices[:20]:
            variant = f" [{voice.variant}]" if voice.variant else ""
            print(f"  {voice.name:<30} {voice.language or '-'}{variant}")

        if voices:
            client.set_synthesis_voice(voices[0].name)
            client.speak(f"This is {voices[0].name}")


if __name__ == "__main__":
    main()
