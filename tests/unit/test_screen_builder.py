"""Screen builder tests."""

import re
from datetime import datetime

import pytest

from newsgate.modules.screens.application.builder import (
    CHOICE_FIELD,
    CMD_FIELD,
    ERROR_FIELD,
    FEED_URL_FIELD,
    HEADLINE_ROW_LIMIT,
    SEPARATOR,
    ScreenBuilder,
    build_feed_selection_screen,
    build_headline_screen,
)
from newsgate.modules.screens.domain.entities import (
    CONTENT_WIDTH,
    Color,
    Highlighting,
    ScreenField,
)
from tests.fakes import FIXED_NOW

NUMBERED = re.compile(r"^\s*(\d+)\. ")


def _numbered_entries(screen) -> set[int]:
    entries = set()
    for item in screen.fields:
        match = NUMBERED.match(item.content or "")
        if match and item.row not in (0, 1):
            entries.add(int(match.group(1)))
    return entries


class TestScreenBuilder:
    def test_build_is_final(self):
        builder = ScreenBuilder().add(0, 0, "x")
        screen = builder.build()

        assert len(screen.fields) == 1
        with pytest.raises(RuntimeError):
            builder.add(1, 0, "y")

    def test_add_input_places_stop_field(self):
        screen = ScreenBuilder().add_input(5, 10, "name", length=4).build()

        field, stop = screen.fields
        assert field.write and field.name == "name"
        assert (stop.row, stop.col) == (5, 15)
        assert stop.autoskip and not stop.write

    def test_field_rejects_positions_off_grid(self):
        with pytest.raises(ValueError):
            ScreenField(row=24, col=0)
        with pytest.raises(ValueError):
            ScreenField(row=0, col=80)


class TestHeadlineScreen:
    def test_layout(self):
        screen = build_headline_screen("http://a", ["First", "Second"], FIXED_NOW)
        by_row = {item.row: item for item in screen.fields if item.col == 0}

        assert by_row[0].intense
        assert by_row[0].content.strip() == "RSS Feed"
        assert len(by_row[0].content) == CONTENT_WIDTH
        assert by_row[1].content.strip() == "http://a  -  Updated: 09:30 UTC"
        assert by_row[2].content == SEPARATOR
        assert by_row[3].content.rstrip() == " 1. First"
        assert by_row[4].content.rstrip() == " 2. Second"
        assert by_row[21].content == SEPARATOR
        assert by_row[22].content.startswith("Command (Enter=refresh")

    def test_command_field(self):
        screen = build_headline_screen("http://a", ["First"], FIXED_NOW)

        cmd = screen.field_named(CMD_FIELD)
        assert cmd is not None
        assert cmd.write
        assert (cmd.row, cmd.col) == (22, 69)
        assert [item.name for item in screen.fields if item.write] == [CMD_FIELD]

    def test_naive_timestamp_is_treated_as_utc(self):
        screen = build_headline_screen("http://a", ["x"], datetime(2025, 1, 6, 23, 5))

        assert "Updated: 23:05 UTC" in screen.fields[1].content

    def test_long_headline_wraps(self):
        headline = "word " * 30
        screen = build_headline_screen("http://a", [headline], FIXED_NOW)

        body = [item for item in screen.fields if 3 <= item.row < HEADLINE_ROW_LIMIT]
        assert len(body) == 2
        assert all(len(item.content) == CONTENT_WIDTH for item in body)

    @pytest.mark.parametrize("count", range(0, 24))
    def test_headlines_never_overflow(self, count):
        headlines = [f"Headline number {n}" for n in range(count)]

        screen = build_headline_screen("http://a", headlines, FIXED_NOW)

        entries = _numbered_entries(screen)
        assert len(entries) <= 18
        assert entries == set(range(1, min(count, 18) + 1))
        body_rows = [
            item.row
            for item in screen.fields
            if NUMBERED.match(item.content or "") and item.row > 2
        ]
        assert all(row < HEADLINE_ROW_LIMIT for row in body_rows)
        assert screen.last_row == 22

    def test_wrapped_headlines_truncate_at_row_budget(self):
        headlines = ["long " * 20] * 12

        screen = build_headline_screen("http://a", headlines, FIXED_NOW)

        body = [item for item in screen.fields if 3 <= item.row < HEADLINE_ROW_LIMIT]
        assert len(body) == 18
        assert len(_numbered_entries(screen)) == 9


class TestFeedSelectionScreen:
    def test_layout(self):
        screen = build_feed_selection_screen(["http://a", "http://b"])
        contents = {(item.row, item.col): item.content for item in screen.fields}

        assert contents[(0, 0)].strip() == "Change RSS URL Feed"
        assert contents[(2, 0)] == "Enter URL:"
        assert contents[(5, 0)].rstrip() == " 0. http://a"
        assert contents[(6, 0)].rstrip() == " 1. http://b"
        assert contents[(22, 0)] == "Press Enter to save, PF3 Exit, # of new url:"

    def test_named_fields(self):
        screen = build_feed_selection_screen(["http://a"])

        url_field = screen.field_named(FEED_URL_FIELD)
        choice = screen.field_named(CHOICE_FIELD)
        error = screen.field_named(ERROR_FIELD)

        assert url_field.write and url_field.highlighting == Highlighting.UNDERSCORE
        assert (url_field.row, url_field.col) == (2, 11)
        assert choice.write and choice.numeric
        assert (choice.row, choice.col) == (22, 45)
        assert not error.write
        assert error.color == Color.RED and error.intense
        assert error.row == 20
        assert error.content == ""

    def test_error_message_is_shown(self):
        screen = build_feed_selection_screen(["http://a"], "Feed #5 does not exist")

        assert screen.field_named(ERROR_FIELD).content == "Feed #5 does not exist"

    def test_feed_list_truncates_before_error_row(self):
        urls = [f"http://feeds.test/{n}" for n in range(40)]

        screen = build_feed_selection_screen(urls)

        listed = [
            item
            for item in screen.fields
            if item.content and NUMBERED.match(item.content) and item.row >= 5
        ]
        assert len(listed) == 15
        assert max(item.row for item in listed) == 19
