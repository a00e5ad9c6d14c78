# Display Grouping
# Consecutive messages from one sender render as a single visual group

from typing import Iterable, List

from .message_log import ChatMessage


def group_starts(messages: Iterable[ChatMessage]) -> List[bool]:
    """
    Flag which messages open a new visual group.

    The first message always does; any later one does iff its sender
    differs from the previous message's sender.
    """
    flags = []
    previous = None
    for index, message in enumerate(messages):
        flags.append(index == 0 or message.sender != previous)
        previous = message.sender
    return flags
