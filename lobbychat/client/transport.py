# Transport Interface
# What the session needs from a connection: a way to send one text frame

from typing import Protocol


class SendError(ConnectionError):
    """The transport refused or failed to enqueue an outbound frame."""


class Transport(Protocol):
    """
    Outbound half of a connection.

    Inbound frames do not come through this interface; transports publish
    them to a FrameRelay instead.
    """

    def send(self, text: str) -> None:
        """
        Hand one text frame to the connection.

        Raises:
            SendError: If the frame could not be queued for delivery
        """
        ...
