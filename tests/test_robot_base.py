"""Tests for the abstract robot."""

import re

import pytest

from hangout_bot.robot.base import HelpEntry, Response, Robot


class RecordingResponse(Response):
    """Response that records what was sent."""

    def __init__(self, match, user_name, outbox):
        super().__init__(match, user_name)
        self.outbox = outbox

    async def say(self, text: str) -> None:
        self.outbox.append(("say", text))

    async def error(self, text: str) -> None:
        self.outbox.append(("error", text))


class RecordingRobot(Robot):
    """Robot whose responses write to an outbox list."""

    def __init__(self):
        super().__init__()
        self.outbox = []

    def build_response(self, match, message):
        return RecordingResponse(match, message, self.outbox)


def test_help_entries():
    robot = RecordingRobot()
    robot.help("hangout me <title>", "create a google calendar event named <title>")

    entries = robot.get_help()
    assert entries == [
        HelpEntry("hangout me <title>", "create a google calendar event named <title>")
    ]
    assert entries[0].format() == "hangout me <title> - create a google calendar event named <title>"


def test_on_mention_compiles_string_patterns():
    robot = RecordingRobot()

    async def handler(response):
        pass

    robot.on_mention(r"^ping$", handler)

    listeners = robot.get_listeners()
    assert len(listeners) == 1
    assert isinstance(listeners[0].pattern, re.Pattern)
    assert listeners[0].handler is handler


@pytest.mark.asyncio
async def test_dispatch_runs_matching_listeners():
    robot = RecordingRobot()

    async def pong(response):
        await response.say(f"pong {response.user_name}")

    async def echo(response):
        await response.say(response[1])

    robot.on_mention(r"^ping$", pong)
    robot.on_mention(r"^echo (.+)$", echo)

    assert await robot.dispatch_mention("ping", "Alice") == 1
    assert await robot.dispatch_mention("echo hi there", "Bob") == 1
    assert await robot.dispatch_mention("nothing", "Carol") == 0

    assert robot.outbox == [("say", "pong Alice"), ("say", "hi there")]


@pytest.mark.asyncio
async def test_dispatch_is_case_sensitive():
    robot = RecordingRobot()

    async def handler(response):
        await response.say("matched")

    robot.on_mention(r"^hangout", handler)

    assert await robot.dispatch_mention("Hangout me", "Alice") == 0
    assert robot.outbox == []


@pytest.mark.asyncio
async def test_dispatch_survives_failing_listener():
    robot = RecordingRobot()

    async def broken(response):
        raise RuntimeError("boom")

    async def working(response):
        await response.say("still here")

    robot.on_mention(r"^go", broken)
    robot.on_mention(r"^go", working)

    assert await robot.dispatch_mention("go", "Alice") == 2
    assert robot.outbox == [("say", "still here")]


def test_response_missing_group_is_none():
    match = re.search(r"^hangout( me)?\s*(.+)?", "hangout")
    response = RecordingResponse(match, "Alice", [])

    assert response[1] is None
    assert response[2] is None
