from typing import Iterator, Sequence

# ---------------------------------------------------------------------------
# Progress indicator symbols
# ---------------------------------------------------------------------------

SLEEPING_SYMBOLS = (
    "●     ",
    " ●    ",
    "  ●   ",
    "   ●  ",
    "    ● ",
    "     ●",
    "    ● ",
    "   ●  ",
    "  ●   ",
    " ●    ",
)

LISTENING_SYMBOLS = (
    "👂     ",
    " 👂    ",
    "  👂   ",
    "   👂  ",
    "    👂 ",
    "     👂",
    "    👂 ",
    "   👂  ",
    "  👂   ",
    " 👂    ",
)


class Wait:
    """
    Endless cycle over a fixed sequence of display symbols.

    Each call to next() returns the current symbol and moves the cursor to
    (current + 1) % len(symbols).
    """

    def __init__(self, symbols: Sequence[str]):
        if not symbols:
            raise ValueError("Wait needs at least one symbol")
        self._symbols = tuple(symbols)
        self._current = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        symbol = self._symbols[self._current]
        self._current = (self._current + 1) % len(self._symbols)
        return symbol

    def reset(self) -> None:
        self._current = 0
