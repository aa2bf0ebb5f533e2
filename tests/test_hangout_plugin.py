"""Tests for the hangout plugin."""

import re
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

from hangout_bot.config.config_schema import HangoutsConfig
from hangout_bot.plugins.hangouts import (
    FAILURE_MESSAGE,
    HANGOUT_PATTERN,
    HangoutPlugin,
    format_success,
    secondary_account_link,
)
from hangout_bot.robot.base import Response, Robot

LINK = "https://plus.google.com/hangouts/_/abc123"


class FakeResponse(Response):
    """Response that records replies."""

    def __init__(self, match, user_name):
        super().__init__(match, user_name)
        self.said = []
        self.errors = []

    async def say(self, text: str) -> None:
        self.said.append(text)

    async def error(self, text: str) -> None:
        self.errors.append(text)


class FakeRobot(Robot):
    """Robot whose last response can be inspected."""

    def __init__(self):
        super().__init__()
        self.responses = []

    def build_response(self, match, message):
        response = FakeResponse(match, message)
        self.responses.append(response)
        return response


def mention(text: str, user_name: str = "Alice") -> FakeResponse:
    return FakeResponse(HANGOUT_PATTERN.search(text), user_name)


@pytest.fixture
def options():
    return {"key": "client-id", "secret": "client-secret", "refresh": "refresh-token"}


@pytest.fixture
def plugin(options):
    plugin = HangoutPlugin(options)
    plugin.client = MagicMock()
    return plugin


@pytest.mark.parametrize("missing", ["key", "secret", "refresh"])
def test_construction_requires_credentials(options, missing):
    """Construction fails before any network access."""
    del options[missing]

    with patch("hangout_bot.google_calendar.client.build") as build:
        with pytest.raises(ValueError):
            HangoutPlugin(options)

    build.assert_not_called()


def test_construction_applies_defaults(options):
    plugin = HangoutPlugin(options)

    assert isinstance(plugin.config, HangoutsConfig)
    assert plugin.config.id == "primary"
    assert plugin.config.duration == 10800000
    assert plugin.config.redirect == "https://google-oauth2.herokuapp.com/oauth2fn"
    assert plugin.client is None


def test_construction_accepts_config_model(options):
    config = HangoutsConfig(**options)
    assert HangoutPlugin(config).config is config


def test_pattern():
    match = HANGOUT_PATTERN.search("hangout me Sprint Planning")
    assert match.group(2) == "Sprint Planning"

    match = HANGOUT_PATTERN.search("hangout Retro")
    assert match.group(2) == "Retro"

    match = HANGOUT_PATTERN.search("hangout")
    assert match.group(2) is None

    assert HANGOUT_PATTERN.search("Hangout me") is None
    assert HANGOUT_PATTERN.search("please hangout me") is None


def test_format_success():
    assert format_success("Sprint Planning", LINK) == (
        "I've started a hangout titled 'Sprint Planning'\n"
        f"Primary account: {LINK}\n"
        f"Secondary account: {LINK}?authuser=1"
    )


@pytest.mark.asyncio
async def test_register_loads_client_then_listens(options):
    plugin = HangoutPlugin(options)
    robot = FakeRobot()
    client = MagicMock()

    with patch(
        "hangout_bot.plugins.hangouts.load_client", AsyncMock(return_value=client)
    ) as load:
        assert await plugin.register(robot) is True

    load.assert_awaited_once_with(plugin.config)
    assert plugin.client is client
    assert [entry.usage for entry in robot.get_help()] == ["hangout me <title>"]
    assert robot.get_help()[0].description == "create a google calendar event named <title>"

    listeners = robot.get_listeners()
    assert len(listeners) == 1
    assert listeners[0].pattern is HANGOUT_PATTERN


@pytest.mark.asyncio
async def test_register_without_client_stays_inert(options):
    plugin = HangoutPlugin(options)
    robot = FakeRobot()

    with patch(
        "hangout_bot.plugins.hangouts.load_client",
        AsyncMock(side_effect=ConnectionError("discovery failed")),
    ) as load:
        assert await plugin.register(robot) is False
        # No second attempt
        assert await plugin.register(FakeRobot()) is False

    load.assert_awaited_once()
    assert robot.get_listeners() == []
    assert await robot.dispatch_mention("hangout me Standup", "Alice") == 0


@pytest.mark.asyncio
async def test_handle_hangout_success(plugin):
    response = mention("hangout me Sprint Planning")
    create = AsyncMock(return_value={"id": "evt1", "hangoutLink": LINK})

    with patch("hangout_bot.plugins.hangouts.create_event", create):
        await plugin.handle_hangout(response)

    create.assert_awaited_once_with(
        plugin.client, "Sprint Planning", "Requested by Alice", plugin.config
    )
    assert response.errors == []
    assert len(response.said) == 1

    lines = response.said[0].split("\n")
    assert lines == [
        "I've started a hangout titled 'Sprint Planning'",
        f"Primary account: {LINK}",
        f"Secondary account: {LINK}?authuser=1",
    ]


@pytest.mark.asyncio
async def test_handle_hangout_default_title(plugin):
    response = mention("hangout", user_name="Bob")
    create = AsyncMock(return_value={"hangoutLink": LINK})

    with patch("hangout_bot.plugins.hangouts.create_event", create):
        await plugin.handle_hangout(response)

    create.assert_awaited_once_with(plugin.client, "Hangout", "Requested by Bob", plugin.config)
    assert response.said[0].startswith("I've started a hangout titled 'Hangout'")


@pytest.mark.asyncio
async def test_handle_hangout_sends_prefixed_summary(plugin):
    """The outbound request carries the prefixed summary."""
    response = mention("hangout me Sprint Planning")
    request = plugin.client.service.events.return_value.insert.return_value
    request.execute.return_value = {"hangoutLink": LINK}

    await plugin.handle_hangout(response)

    kwargs = plugin.client.service.events.return_value.insert.call_args.kwargs
    assert kwargs["body"]["summary"] == "Google Hangout: Sprint Planning"
    assert kwargs["body"]["description"] == "Requested by Alice"
    assert response.said[0].split("\n")[1] == f"Primary account: {LINK}"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ConnectionError("connection reset"),
        HttpError(MagicMock(status=403, reason="Forbidden"), b'{"error": {"message": "Quota exceeded"}}'),
        RuntimeError("anything at all"),
    ],
)
async def test_handle_hangout_failure(plugin, error):
    response = mention("hangout me Sprint Planning")

    with patch("hangout_bot.plugins.hangouts.create_event", AsyncMock(side_effect=error)):
        await plugin.handle_hangout(response)

    assert response.said == []
    assert response.errors == [FAILURE_MESSAGE]
    assert FAILURE_MESSAGE == "I'm sorry. Something went wrong and I wasn't able to create a hangout :("


@pytest.mark.asyncio
async def test_handle_hangout_falls_back_to_html_link(plugin):
    response = mention("hangout me Retro")
    event = {"id": "evt1", "htmlLink": "https://www.google.com/calendar/event?eid=x"}

    with patch("hangout_bot.plugins.hangouts.create_event", AsyncMock(return_value=event)):
        await plugin.handle_hangout(response)

    lines = response.said[0].split("\n")
    assert lines[1] == "Primary account: https://www.google.com/calendar/event?eid=x"
    assert lines[2] == "Secondary account: https://www.google.com/calendar/event?eid=x&authuser=1"


@pytest.mark.asyncio
async def test_handle_hangout_without_any_link(plugin):
    response = mention("hangout me Retro")

    with patch("hangout_bot.plugins.hangouts.create_event", AsyncMock(return_value={"id": "evt1"})):
        await plugin.handle_hangout(response)

    assert response.said == []
    assert response.errors == [FAILURE_MESSAGE]


def test_secondary_account_link():
    assert secondary_account_link(LINK) == f"{LINK}?authuser=1"
    assert (
        secondary_account_link("https://meet.google.com/abc-defg-hij?hs=122")
        == "https://meet.google.com/abc-defg-hij?hs=122&authuser=1"
    )


@pytest.mark.asyncio
async def test_registered_listener_end_to_end(options):
    plugin = HangoutPlugin(options)
    robot = FakeRobot()

    with patch("hangout_bot.plugins.hangouts.load_client", AsyncMock(return_value=MagicMock())):
        await plugin.register(robot)

    with patch(
        "hangout_bot.plugins.hangouts.create_event",
        AsyncMock(return_value={"hangoutLink": LINK}),
    ):
        assert await robot.dispatch_mention("hangout me Demo", "Carol") == 1

    assert robot.responses[-1].said == [format_success("Demo", LINK)]


@pytest.mark.asyncio
async def test_register_twice_on_same_robot(options):
    plugin = HangoutPlugin(options)
    robot = FakeRobot()

    with patch(
        "hangout_bot.plugins.hangouts.load_client", AsyncMock(return_value=MagicMock())
    ) as load:
        assert await plugin.register(robot) is True
        assert await plugin.register(robot) is True

    load.assert_awaited_once()
    assert len(robot.get_help()) == 1
    assert len(robot.get_listeners()) == 1

    create = AsyncMock(return_value={"hangoutLink": LINK})
    with patch("hangout_bot.plugins.hangouts.create_event", create):
        assert await robot.dispatch_mention("hangout me Demo", "Carol") == 1

    create.assert_awaited_once()
