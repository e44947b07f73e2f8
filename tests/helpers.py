"""Shared test doubles."""


class SequenceIdGenerator:
    """Deterministic id tokens.

    Hands out the given tokens in order, or counts up in hex
    (00000001, 00000002, ...) when none are given.
    """

    def __init__(self, tokens=None):
        self._tokens = list(tokens) if tokens is not None else None
        self._counter = 0

    def new_token(self) -> str:
        if self._tokens is not None:
            return self._tokens.pop(0)
        self._counter += 1
        return f"{self._counter:08x}"
