"""Shared seed counter for noise streams."""


class Seed:
    """Mutable seed counter.

    Not a source of randomness itself: every stage and noise stream reads the
    current value and advances it so that no two noise queries share a seed.
    """

    def __init__(self, value: int) -> None:
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> None:
        """Advance the counter by one."""
        self._value += 1

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"Seed({self._value})"
