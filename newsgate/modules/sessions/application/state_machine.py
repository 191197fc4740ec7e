"""Per-connection session loop.

A session alternates between the headline view and the feed selection view,
one render + input round trip per step, until the user exits or the
connection fails.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum

from loguru import logger

from newsgate.core.infrastructure.logging import SessionEvents
from newsgate.modules.feeds.domain.exceptions import FeedIndexError
from newsgate.modules.feeds.domain.registry import FeedRegistry
from newsgate.modules.screens.application.builder import (
    CHOICE_FIELD,
    CMD_FIELD,
    FEED_URL_FIELD,
    HEADLINE_CURSOR,
    SELECTION_CURSOR,
    build_feed_selection_screen,
    build_headline_screen,
)
from newsgate.modules.screens.domain.entities import CommandSignal, ScreenResponse
from newsgate.modules.screens.domain.exceptions import RenderExchangeError
from newsgate.modules.screens.domain.transport import ScreenTransport
from newsgate.modules.sessions.application.headlines import HeadlineService

EXIT_SIGNALS = frozenset({CommandSignal.EXIT, CommandSignal.CLEAR})
HEADLINE_SIGNALS = frozenset({CommandSignal.CONFIRM, CommandSignal.SWITCH_FEED})
SELECTION_SIGNALS = frozenset({CommandSignal.CONFIRM})


class SessionState(StrEnum):
    VIEWING_HEADLINES = "viewing_headlines"
    SELECTING_FEED = "selecting_feed"
    TERMINATED = "terminated"


def is_quit_command(text: str) -> bool:
    """True when the command field holds a lone ``q`` (any case, any padding)."""
    return text.strip().lower() == "q"


class FeedSession:
    """Interaction state machine for one connected terminal."""

    def __init__(
        self,
        transport: ScreenTransport,
        registry: FeedRegistry,
        headlines: HeadlineService,
        *,
        peer: str = "unknown",
        clock: Callable[[], datetime] | None = None,
    ):
        self.transport = transport
        self.registry = registry
        self.headlines = headlines
        self.peer = peer
        self.state = SessionState.VIEWING_HEADLINES
        self.selection_error = ""
        self._clock = clock or (lambda: datetime.now(UTC))

    async def run(self) -> str:
        """Drive the session until it terminates. Returns the end reason."""
        SessionEvents.session_started(peer=self.peer)
        reason = "user_exit"
        try:
            while self.state != SessionState.TERMINATED:
                self.state = await self.step(self.state)
        except RenderExchangeError as e:
            logger.warning(f"Screen exchange with {self.peer} failed: {e.message}")
            self.state = SessionState.TERMINATED
            reason = "transport_error"
        SessionEvents.session_ended(peer=self.peer, reason=reason)
        return reason

    async def step(self, state: SessionState) -> SessionState:
        if state == SessionState.VIEWING_HEADLINES:
            return await self.view_headlines()
        if state == SessionState.SELECTING_FEED:
            return await self.select_feed()
        return SessionState.TERMINATED

    async def view_headlines(self) -> SessionState:
        url = self.registry.current()
        headlines = await self.headlines.headlines_for(url)
        screen = build_headline_screen(url, headlines, self._clock())
        response = await self.transport.render(
            screen,
            command_signals=HEADLINE_SIGNALS,
            exit_signals=EXIT_SIGNALS,
            cursor=HEADLINE_CURSOR,
        )
        return self.after_headlines(response)

    def after_headlines(self, response: ScreenResponse) -> SessionState:
        """Transition out of the headline view."""
        if response.signal.is_exit:
            return SessionState.TERMINATED
        if is_quit_command(response.value(CMD_FIELD)):
            return SessionState.TERMINATED
        if response.signal == CommandSignal.SWITCH_FEED:
            self.selection_error = ""
            return SessionState.SELECTING_FEED
        return SessionState.VIEWING_HEADLINES

    async def select_feed(self) -> SessionState:
        screen = build_feed_selection_screen(self.registry.urls, self.selection_error)
        response = await self.transport.render(
            screen,
            command_signals=SELECTION_SIGNALS,
            exit_signals=EXIT_SIGNALS,
            cursor=SELECTION_CURSOR,
        )
        return self.after_selection(response)

    def after_selection(self, response: ScreenResponse) -> SessionState:
        """Apply the user's feed choice and transition out of the selection view.

        A literal URL wins over a numeric choice. An invalid choice leaves the
        registry untouched and keeps the selection view open with an error.
        """
        self.selection_error = ""
        if response.signal.is_exit:
            return SessionState.VIEWING_HEADLINES

        literal = response.value(FEED_URL_FIELD).strip()
        if literal:
            url = self.registry.select_by_literal(literal)
            SessionEvents.feed_selected(peer=self.peer, url=url, via="literal")
            return SessionState.VIEWING_HEADLINES

        choice = response.value(CHOICE_FIELD).strip()
        if choice:
            try:
                url = self.registry.select_by_choice(choice)
            except FeedIndexError as e:
                SessionEvents.feed_selection_rejected(peer=self.peer, choice=choice)
                self.selection_error = e.message
                return SessionState.SELECTING_FEED
            SessionEvents.feed_selected(peer=self.peer, url=url, via="index")

        return SessionState.VIEWING_HEADLINES
