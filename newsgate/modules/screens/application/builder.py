"""Screen composition for the headline and feed-selection views."""

from collections.abc import Sequence
from datetime import UTC, datetime

from newsgate.modules.screens.application.layout import pad_center, wrap
from newsgate.modules.screens.domain.entities import (
    CONTENT_WIDTH,
    SCREEN_COLS,
    Color,
    Highlighting,
    Screen,
    ScreenField,
)

# Field names read back after a round trip.
CMD_FIELD = "cmd"
FEED_URL_FIELD = "feedURL"
CHOICE_FIELD = "choice"
ERROR_FIELD = "errormsg"

SEPARATOR = "-" * CONTENT_WIDTH

# Headline view: rows 3-20 carry content, 21-22 the footer.
HEADLINE_FIRST_ROW = 3
HEADLINE_ROW_LIMIT = 21
HEADLINE_PROMPT = "Command (Enter=refresh, q+Enter=quit, PF3/Clear=exit, PF4=RSS url):"
HEADLINE_CURSOR = (22, 70)

# Feed selection view: rows 5-19 list feeds, row 20 is the error line.
FEED_LIST_FIRST_ROW = 5
FEED_LIST_ROW_LIMIT = 20
SELECTION_PROMPT = "Press Enter to save, PF3 Exit, # of new url:"
SELECTION_CURSOR = (22, 46)


class ScreenBuilder:
    """Accumulates fields in order and finalises them into a Screen."""

    def __init__(self) -> None:
        self._fields: list[ScreenField] = []
        self._built = False

    def add(self, row: int, col: int, content: str | None = None, **attrs) -> "ScreenBuilder":
        if self._built:
            raise RuntimeError("Screen already built")
        self._fields.append(ScreenField(row=row, col=col, content=content, **attrs))
        return self

    def add_input(
        self,
        row: int,
        col: int,
        name: str,
        length: int,
        content: str = "",
        **attrs,
    ) -> "ScreenBuilder":
        """Add a writable field followed by an autoskip stop after ``length`` chars."""
        self.add(row, col, content, write=True, name=name, **attrs)
        stop = col + length + 1
        if stop < SCREEN_COLS:
            self.add(row, stop, autoskip=True)
        return self

    def add_block(
        self,
        lines: Sequence[str],
        first_row: int,
        row_limit: int,
    ) -> int:
        """Add wrapped entries one row per line, dropping what does not fit.

        Returns the next free row.
        """
        row = first_row
        for entry in lines:
            for line in wrap(entry, CONTENT_WIDTH):
                if row >= row_limit:
                    return row
                self.add(row, 0, line)
                row += 1
        return row

    def build(self) -> Screen:
        self._built = True
        return Screen(fields=tuple(self._fields))


def build_headline_screen(
    current_url: str,
    headlines: Sequence[str],
    now: datetime | None = None,
) -> Screen:
    """Compose the headline view for ``current_url``."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    updated = now.astimezone(UTC).strftime("%H:%M UTC")

    builder = ScreenBuilder()
    builder.add(0, 0, pad_center(" RSS Feed", CONTENT_WIDTH), intense=True)
    builder.add(1, 0, pad_center(f"{current_url}  -  Updated: {updated}", CONTENT_WIDTH))
    builder.add(2, 0, SEPARATOR)

    numbered = [f"{n:2d}. {title.strip()}" for n, title in enumerate(headlines, start=1)]
    builder.add_block(numbered, HEADLINE_FIRST_ROW, HEADLINE_ROW_LIMIT)

    builder.add(21, 0, SEPARATOR)
    builder.add(22, 0, HEADLINE_PROMPT)
    builder.add_input(22, HEADLINE_CURSOR[1] - 1, CMD_FIELD, length=9)
    return builder.build()


def build_feed_selection_screen(
    feed_urls: Sequence[str],
    error_message: str = "",
) -> Screen:
    """Compose the feed selection view listing ``feed_urls`` by 0-based index."""
    builder = ScreenBuilder()
    builder.add(0, 0, pad_center(" Change RSS URL Feed", CONTENT_WIDTH), intense=True)
    builder.add(1, 0, SEPARATOR)
    builder.add(2, 0, "Enter URL:")
    builder.add_input(
        2,
        11,
        FEED_URL_FIELD,
        length=SCREEN_COLS - 13,
        highlighting=Highlighting.UNDERSCORE,
    )
    builder.add(3, 0, "Or select from one of the below URL's")

    numbered = [f"{i:2d}. {url}" for i, url in enumerate(feed_urls)]
    builder.add_block(numbered, FEED_LIST_FIRST_ROW, FEED_LIST_ROW_LIMIT)

    builder.add(
        FEED_LIST_ROW_LIMIT,
        0,
        error_message[:CONTENT_WIDTH],
        intense=True,
        color=Color.RED,
        name=ERROR_FIELD,
    )
    builder.add(21, 0, SEPARATOR)
    builder.add(22, 0, SELECTION_PROMPT)
    builder.add_input(22, SELECTION_CURSOR[1] - 1, CHOICE_FIELD, length=2, numeric=True)
    return builder.build()
