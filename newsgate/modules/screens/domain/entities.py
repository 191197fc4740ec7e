"""Screen domain model: positioned fields on a fixed 24x80 grid."""

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic import Field as ModelField

SCREEN_ROWS = 24
SCREEN_COLS = 80
# Column 0 of every field holds its attribute byte.
CONTENT_WIDTH = SCREEN_COLS - 1


class Color(StrEnum):
    DEFAULT = "default"
    BLUE = "blue"
    RED = "red"
    PINK = "pink"
    GREEN = "green"
    TURQUOISE = "turquoise"
    YELLOW = "yellow"
    WHITE = "white"


class Highlighting(StrEnum):
    DEFAULT = "default"
    BLINK = "blink"
    REVERSE = "reverse"
    UNDERSCORE = "underscore"


class CommandSignal(StrEnum):
    """Discrete user action returned with each screen round trip."""

    CONFIRM = "confirm"
    SWITCH_FEED = "switch_feed"
    EXIT = "exit"
    CLEAR = "clear"
    UNSUPPORTED = "unsupported"

    @property
    def is_exit(self) -> bool:
        return self in (CommandSignal.EXIT, CommandSignal.CLEAR)


class ScreenField(BaseModel):
    """A positioned, optionally named and writable unit of screen content."""

    model_config = ConfigDict(frozen=True)

    row: int = ModelField(..., ge=0, lt=SCREEN_ROWS)
    col: int = ModelField(..., ge=0, lt=SCREEN_COLS)
    content: str | None = ModelField(default=None, description="Literal text")
    write: bool = ModelField(default=False, description="Unprotected input field")
    autoskip: bool = ModelField(default=False, description="Cursor skips past it")
    numeric: bool = ModelField(default=False, description="Numeric-only input")
    intense: bool = False
    color: Color = Color.DEFAULT
    highlighting: Highlighting = Highlighting.DEFAULT
    name: str | None = ModelField(default=None, description="Key for read-back")


class Screen(BaseModel):
    """An immutable, ordered collection of fields for one round trip."""

    model_config = ConfigDict(frozen=True)

    fields: tuple[ScreenField, ...] = ()

    def field_named(self, name: str) -> ScreenField | None:
        for item in self.fields:
            if item.name == name:
                return item
        return None

    @property
    def names(self) -> list[str]:
        return [item.name for item in self.fields if item.name]

    @property
    def last_row(self) -> int:
        return max((item.row for item in self.fields), default=0)


@dataclass(frozen=True)
class ScreenResponse:
    """The user's answer to a rendered screen."""

    signal: CommandSignal
    values: dict[str, str] = field(default_factory=dict)

    def value(self, name: str) -> str:
        return self.values.get(name, "")
