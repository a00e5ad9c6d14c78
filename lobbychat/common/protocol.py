# Protocol Frame Formats and Validation
# Handles frame serialization, nested message payloads, malformed-frame detection

import json
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union


class ProtocolError(ValueError):
    """Base class for frames that cannot be turned into a Frame."""


class DecodeError(ProtocolError):
    """Frame is not valid JSON, has an unknown type, or a malformed payload."""


class ProtocolViolation(ProtocolError):
    """Frame type is known but the payload field it requires is missing."""


class MessageType(str, Enum):
    """Discriminant values carried in the ``messageType`` field."""
    USERS = "users"
    REGISTER = "register"
    MESSAGE = "message"


@dataclass(frozen=True)
class RosterFrame:
    """Full list of present participants, in server order."""
    names: Tuple[str, ...]


@dataclass(frozen=True)
class RegisterFrame:
    """Announces the local display name to the server."""
    display_name: str


@dataclass(frozen=True)
class ChatFrame:
    """A chat line: who sent it and what it says."""
    sender: str
    body: str


Frame = Union[RosterFrame, RegisterFrame, ChatFrame]


@dataclass
class WireFrame:
    """
    Structural form of a frame as it travels over the connection.

    Fields match the wire record:
    - message_type: ``messageType`` discriminant
    - data_array: ``dataArray``, populated for ``users`` frames
    - data: ``data``, populated for ``register`` and ``message`` frames

    Exactly one payload field is set for a well-formed frame; the other
    is serialized as ``null``.
    """
    message_type: MessageType
    data_array: Optional[List[str]] = None
    data: Optional[str] = None

    def to_json(self) -> str:
        """
        Serialize to the JSON text sent over the transport.

        Format:
        {"messageType": "...", "dataArray": [...] | null, "data": "..." | null}
        """
        return json.dumps({
            "messageType": self.message_type.value,
            "dataArray": self.data_array,
            "data": self.data,
        }, ensure_ascii=False)

    @staticmethod
    def from_json(text: str) -> 'WireFrame':
        """
        Parse the JSON text of one inbound frame.

        Args:
            text: Raw text frame from the transport

        Returns:
            Parsed WireFrame (payload presence is not checked here)

        Raises:
            DecodeError: If the text is not a well-typed frame record
        """
        try:
            record = json.loads(text)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Frame is not valid JSON: {e}") from e

        if not isinstance(record, dict):
            raise DecodeError(f"Frame must be a JSON object, got {type(record).__name__}")

        raw_type = record.get("messageType")
        try:
            message_type = MessageType(raw_type)
        except ValueError:
            raise DecodeError(f"Unknown messageType: {raw_type!r}") from None

        data_array = record.get("dataArray")
        if data_array is not None:
            if not isinstance(data_array, list) or not all(isinstance(n, str) for n in data_array):
                raise DecodeError("dataArray must be a list of strings")

        data = record.get("data")
        if data is not None and not isinstance(data, str):
            raise DecodeError(f"data must be a string, got {type(data).__name__}")

        return WireFrame(message_type=message_type, data_array=data_array, data=data)


def encode_message_payload(sender: str, body: str) -> str:
    """Build the nested ``{"from", "message"}`` record carried in ``data``."""
    return json.dumps({"from": sender, "message": body}, ensure_ascii=False)


def decode_message_payload(data: str) -> ChatFrame:
    """
    Parse the nested record of a ``message`` frame.

    Raises:
        DecodeError: If the nested record is not JSON or lacks string
            ``from``/``message`` fields
    """
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise DecodeError(f"Nested message payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError("Nested message payload must be a JSON object")

    sender = payload.get("from")
    body = payload.get("message")
    if not isinstance(sender, str) or not isinstance(body, str):
        raise DecodeError("Nested message payload needs string 'from' and 'message'")

    return ChatFrame(sender=sender, body=body)


def encode(frame: Frame) -> str:
    """
    Serialize a Frame to wire text.

    Args:
        frame: RosterFrame, RegisterFrame or ChatFrame

    Returns:
        JSON text ready for Transport.send
    """
    if isinstance(frame, RosterFrame):
        wire = WireFrame(MessageType.USERS, data_array=list(frame.names))
    elif isinstance(frame, RegisterFrame):
        wire = WireFrame(MessageType.REGISTER, data=frame.display_name)
    elif isinstance(frame, ChatFrame):
        wire = WireFrame(MessageType.MESSAGE, data=encode_message_payload(frame.sender, frame.body))
    else:
        raise TypeError(f"Cannot encode {type(frame).__name__}")
    return wire.to_json()


def decode(text: str) -> Frame:
    """
    Deserialize wire text to a Frame.

    Args:
        text: Raw text frame from the transport

    Returns:
        RosterFrame, RegisterFrame or ChatFrame

    Raises:
        DecodeError: Malformed JSON, unknown type, or malformed nested payload
        ProtocolViolation: The payload field required by the type is absent
    """
    wire = WireFrame.from_json(text)

    if wire.message_type is MessageType.USERS:
        if wire.data_array is None:
            raise ProtocolViolation("users frame without dataArray")
        return RosterFrame(names=tuple(wire.data_array))

    if wire.data is None:
        raise ProtocolViolation(f"{wire.message_type.value} frame without data")

    if wire.message_type is MessageType.REGISTER:
        return RegisterFrame(display_name=wire.data)

    return decode_message_payload(wire.data)


# Example usage
if __name__ == "__main__":
    print("=== Frame Codec Example ===")

    frame = ChatFrame(sender="alice", body="hello 👋")
    text = encode(frame)
    print(f"Encoded: {text}")
    print(f"Decoded: {decode(text)}")
    assert decode(text) == frame

    print("\n=== Malformed Frame Example ===")
    for bad in ['{"messageType":"bogus"}', '{"messageType":"users"}', 'not json']:
        try:
            decode(bad)
        except ProtocolError as e:
            print(f"{type(e).__name__}: {e}")
