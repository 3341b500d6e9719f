"""
Wire messages exchanged between quorum coordinators.

Every datagram carries exactly one externally tagged JSON object:

    {"Proposal":      {"node_id": "<sender identity>"}}
    {"Confirmation":  {"node_id": "<sender identity>"}}
    {"ScaleComplete": {}}

``node_id`` is advisory. It is never checked against the address the
datagram actually came from.
"""

import msgspec
import orjson

from swarm_quorum.errors import MessageDecodeError


class Message(msgspec.Struct, frozen=True):

    @classmethod
    def load(cls, data: bytes) -> "Message":
        message = decode_message(data)
        if cls is not Message and not isinstance(message, cls):
            raise MessageDecodeError(
                f"Expected {cls.__name__}, got {message.kind}",
            )

        return message

    def dump(self) -> bytes:
        return encode_message(self)

    @property
    def kind(self) -> str:
        return type(self).__name__


class Proposal(Message):
    """I propose we scale."""

    node_id: str


class Confirmation(Message):
    """I agree with that proposal."""

    node_id: str


class ScaleComplete(Message):
    """Quorum was reached and the action proceeds."""


MESSAGE_TYPES: dict[str, type[Message]] = {
    message_type.__name__: message_type
    for message_type in (Proposal, Confirmation, ScaleComplete)
}


def encode_message(message: Message) -> bytes:
    return orjson.dumps(
        {
            message.kind: msgspec.structs.asdict(message),
        }
    )


def decode_message(data: bytes) -> Message:
    try:
        payload = orjson.loads(data)

    except orjson.JSONDecodeError as err:
        raise MessageDecodeError(
            "Datagram is not valid JSON",
            cause=err,
            size=len(data),
        ) from err

    # Unit variant as a bare JSON string
    if payload == ScaleComplete.__name__:
        return ScaleComplete()

    if not isinstance(payload, dict) or len(payload) != 1:
        raise MessageDecodeError(
            "Datagram must be an object with exactly one message tag",
            size=len(data),
        )

    ((tag, body),) = payload.items()

    message_type = MESSAGE_TYPES.get(tag)
    if message_type is None:
        raise MessageDecodeError(
            f"Unknown message tag {tag!r}",
            tag=tag,
        )

    if body is None and message_type is ScaleComplete:
        return ScaleComplete()

    try:
        return msgspec.convert(body, type=message_type)

    except msgspec.ValidationError as err:
        raise MessageDecodeError(
            f"Invalid {tag} payload",
            cause=err,
            tag=tag,
        ) from err
