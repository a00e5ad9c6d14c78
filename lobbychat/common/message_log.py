# Message Log
# Append-only record of received chat lines; position is identity

from dataclasses import dataclass
from typing import Iterator, List


class MessageNotFound(LookupError):
    """No message exists at the requested position."""


@dataclass(frozen=True)
class ChatMessage:
    """A received chat line. Immutable once logged."""
    sender: str
    body: str

    @property
    def is_image(self) -> bool:
        """Bodies that point at a GIF are shown inline as images."""
        return self.body.endswith(".gif")


class MessageLog:
    """
    Ordered log of messages in receipt order.

    Positions start at 0 and are never reused; there is no removal.
    """

    def __init__(self):
        self._messages: List[ChatMessage] = []

    def append(self, message: ChatMessage) -> int:
        """Add message at the end of the log and return its position."""
        self._messages.append(message)
        return len(self._messages) - 1

    def get(self, position: int) -> ChatMessage:
        """
        Look up a message by position.

        Raises:
            MessageNotFound: If position is negative or past the end
        """
        if not 0 <= position < len(self._messages):
            raise MessageNotFound(f"No message at position {position} (log length {len(self._messages)})")
        return self._messages[position]

    def __contains__(self, position: object) -> bool:
        return isinstance(position, int) and 0 <= position < len(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)
