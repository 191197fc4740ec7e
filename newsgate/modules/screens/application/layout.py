"""Fixed-width text layout helpers."""


def pad_right(text: str, width: int) -> str:
    """Space-pad or truncate ``text`` to exactly ``width`` characters."""
    if len(text) >= width:
        return text[:width]
    return text + " " * (width - len(text))


def pad_center(text: str, width: int) -> str:
    """Center ``text`` in ``width`` characters, truncating when too long."""
    if len(text) >= width:
        return text[:width]
    left = (width - len(text)) // 2
    right = width - len(text) - left
    return " " * left + text + " " * right


def wrap(text: str, width: int) -> list[str]:
    """Break ``text`` into lines of exactly ``width`` characters.

    Newlines are folded to spaces. Lines break at the last space at or before
    ``width``; a word longer than the line is cut hard. At least one line is
    always returned.
    """
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")

    lines: list[str] = []
    remaining = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    while len(remaining) > width:
        cut = remaining.rfind(" ", 0, width + 1)
        if cut <= 0:
            cut = width
        lines.append(pad_right(remaining[:cut], width))
        remaining = remaining[cut:].lstrip()
    lines.append(pad_right(remaining, width))
    return lines
