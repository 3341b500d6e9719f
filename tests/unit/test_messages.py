import orjson
import pytest

from swarm_quorum.errors import ErrorCategory, MessageDecodeError
from swarm_quorum.models import (
    Confirmation,
    Message,
    Proposal,
    ScaleComplete,
    decode_message,
    encode_message,
)


class TestEncoding:
    def test_proposal_wire_form(self):
        encoded = encode_message(Proposal(node_id="10.0.0.1:4000"))

        assert orjson.loads(encoded) == {"Proposal": {"node_id": "10.0.0.1:4000"}}

    def test_confirmation_wire_form(self):
        encoded = Confirmation(node_id="node-b").dump()

        assert orjson.loads(encoded) == {"Confirmation": {"node_id": "node-b"}}

    def test_scale_complete_wire_form(self):
        assert orjson.loads(ScaleComplete().dump()) == {"ScaleComplete": {}}

    @pytest.mark.parametrize(
        "message",
        [
            Proposal(node_id="node-a"),
            Confirmation(node_id="node-b"),
            ScaleComplete(),
        ],
    )
    def test_decode_inverts_encode(self, message: Message):
        assert decode_message(encode_message(message)) == message


class TestDecoding:
    def test_bare_scale_complete_string(self):
        assert decode_message(b'"ScaleComplete"') == ScaleComplete()

    def test_scale_complete_with_null_body(self):
        assert decode_message(b'{"ScaleComplete": null}') == ScaleComplete()

    def test_extra_fields_are_ignored(self):
        message = decode_message(b'{"Proposal": {"node_id": "node-a", "cpu": 5}}')

        assert message == Proposal(node_id="node-a")

    def test_not_json(self):
        with pytest.raises(MessageDecodeError) as exc_info:
            decode_message(b"\xff\x00not json")

        assert exc_info.value.category == ErrorCategory.PROTOCOL
        assert exc_info.value.is_fatal is False

    def test_unknown_tag(self):
        with pytest.raises(MessageDecodeError, match="Unknown message tag"):
            decode_message(b'{"Vote": {"node_id": "node-a"}}')

    def test_more_than_one_tag(self):
        with pytest.raises(MessageDecodeError):
            decode_message(
                b'{"Proposal": {"node_id": "a"}, "Confirmation": {"node_id": "b"}}'
            )

    def test_missing_node_id(self):
        with pytest.raises(MessageDecodeError, match="Invalid Proposal payload"):
            decode_message(b'{"Proposal": {}}')

    def test_wrong_node_id_type(self):
        with pytest.raises(MessageDecodeError):
            decode_message(b'{"Confirmation": {"node_id": 7}}')

    def test_json_array(self):
        with pytest.raises(MessageDecodeError):
            decode_message(b'["Proposal"]')


class TestTypedLoad:
    def test_load_any_message(self):
        assert Message.load(b'{"ScaleComplete": {}}') == ScaleComplete()

    def test_load_expected_type(self):
        proposal = Proposal.load(b'{"Proposal": {"node_id": "node-a"}}')

        assert proposal.node_id == "node-a"
        assert proposal.kind == "Proposal"

    def test_load_rejects_other_type(self):
        with pytest.raises(MessageDecodeError, match="Expected Proposal"):
            Proposal.load(b'{"Confirmation": {"node_id": "node-b"}}')
