"""Liveness tokens for superseded async operations."""


class CancellationToken:
    """Marks one in-flight request as still wanted.

    A debounced search hands each request its own token. Submitting a newer
    query cancels the previous token; the older request checks
    ``is_cancelled`` before publishing, so a late response never overwrites
    a fresher one.
    """

    __slots__ = ("_cancelled", "label")

    def __init__(self, label: str = "") -> None:
        self._cancelled = False
        self.label = label

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"CancellationToken({self.label!r}, {state})"
