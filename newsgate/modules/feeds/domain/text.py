"""Headline text sanitising."""

import unicodedata

# Characters the terminal code page cannot show, mapped to ASCII approximations.
TRANSLITERATIONS: dict[str, str] = {
    "å": "aa",
    "ø": "oe",
    "æ": "ae",
    "Å": "AA",
    "Ø": "OE",
    "Æ": "AE",
    "ö": "oe",
    "ä": "ae",
    "ü": "ue",
    "Ö": "OE",
    "Ä": "AE",
    "Ü": "UE",
    "ß": "ss",
    "–": "-",
    "—": "-",
    "‘": "'",
    "’": "'",
    "‚": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "«": '"',
    "»": '"',
    "…": "...",
    "\u00a0": " ",
}

_TABLE = str.maketrans(TRANSLITERATIONS)


def transliterate(text: str) -> str:
    """Replace characters from the transliteration table."""
    return text.translate(_TABLE)


def replace_controls(text: str) -> str:
    """Replace control characters with spaces.

    C0/C1 controls in remote text would reach the terminal as data stream orders.
    """
    return "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in text)


def clean_headline(title: str | None) -> str:
    """Trim and transliterate a raw title. Returns "" for blank titles."""
    if not title:
        return ""
    return transliterate(replace_controls(title)).strip()
