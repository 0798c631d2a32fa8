"""Heading hierarchy tracking for structured HTML."""


class HeadingChain:
    """
    Stack of active headings keyed by level.

    A new heading replaces any sibling or deeper heading and keeps its
    ancestors, so levels in the stack are always strictly increasing.
    """

    def __init__(self) -> None:
        self._stack: list[tuple[int, str]] = []

    def push(self, level: int, text: str) -> None:
        """Record a heading of the given level."""
        while self._stack and self._stack[-1][0] >= level:
            self._stack.pop()
        self._stack.append((level, text))

    def snapshot(self) -> tuple[str, ...]:
        """Current chain of heading texts, root to leaf."""
        return tuple(text for _, text in self._stack)
