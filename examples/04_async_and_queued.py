#!/usr/bin/env python3
"""
04_async_and_queued.py - Non-blocking Clients

This example demonstrates:
- AsyncSSIPClient with async/await
- QueuedClient driven by a selectors loop
- Error handling for rejected commands

Both clients share the same protocol engine as SSIPClient, so replies and
notifications behave identically.

Prerequisites:
    - Speech Dispatcher running
    - pyssip installed

Run with:
    python 04_async_and_queued.py
"""

import asyncio
import selectors

from pyssip import AsyncSSIPClient, QueuedClient, ServerError, SSIPError, commands


async def async_example():
    """asyncio client"""
    print("asyncio Example")
    print("-" * 50)

    async with await AsyncSSIPClient.connect(application="async-demo") as client:
        print(f"  language: {await client.get_language()}")
        await client.set_volume(50)
        message_id = await client.speak("Spoken from asyncio.")
        print(f"  queued message {message_id}")

        try:
            await client.set_output_module("does-not-exist")
        except ServerError as e:
            print(f"  rejected as expected: {e.code} {e.message}")


def queued_example():
    """Selector-driven client"""
    print("\nQueued Example")
    print("-" * 50)

    with QueuedClient.connect(application="queued-demo") as client:
        requests = [
            client.push(commands.set_rate(-20)),
            client.push(commands.speak("First message.")),
            client.push(commands.speak("Second message.")),
        ]

        with selectors.DefaultSelector() as selector:
            client.register(selector)
            while client.has_next():
                for _key, mask in selector.select(1.0):
                    if mask & selectors.EVENT_WRITE:
                        client.on_writable()
                    if mask & selectors.EVENT_READ:
                        for request in client.on_readable():
                            print(f"  {request.command.verb}: {request.exception() or request.result()}")
                client.update(selector)

        print(f"  all succeeded: {all(r.succeeded() for r in requests)}")


if __name__ == "__main__":
    try:
        asyncio.run(async_example())
        queued_example()
    except SSIPError as e:
        print(f"Error: {e}")
