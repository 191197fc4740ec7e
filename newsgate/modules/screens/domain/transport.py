"""Screen transport port."""

from collections.abc import Collection, Mapping
from typing import Protocol

from newsgate.modules.screens.domain.entities import (
    CommandSignal,
    Screen,
    ScreenResponse,
)


class ScreenTransport(Protocol):
    """Port for one render + input round trip with a connected terminal."""

    async def render(
        self,
        screen: Screen,
        *,
        command_signals: Collection[CommandSignal],
        exit_signals: Collection[CommandSignal],
        cursor: tuple[int, int],
        values: Mapping[str, str] | None = None,
    ) -> ScreenResponse:
        """Show ``screen`` and wait for an accepted command or exit signal.

        Raises:
            RenderExchangeError: the exchange failed or the peer went away.
        """
        ...
