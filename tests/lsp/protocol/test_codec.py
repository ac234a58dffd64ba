"""Tests for the JSON-RPC wire codec."""

import pytest

from lsplink.lib import oj
from lsplink.lsp.protocol import (
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    LSPError,
    MalformedMessage,
    MessageCodec,
    PARSE_ERROR,
    RemoteError,
    RequestCancelled,
    RequestTimeout,
    REQUEST_CANCELLED,
    REQUEST_TIMEOUT,
)


@pytest.fixture
def codec():
    return MessageCodec()


class TestEncode:
    """Tests for MessageCodec.encode."""

    def test_request_envelope(self, codec):
        frame = codec.encode(JSONRPCRequest(method="initialize", id=1, params={"a": 1}))
        assert isinstance(frame, str)
        assert oj.loads(frame) == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "initialize",
            "params": {"a": 1},
        }

    def test_notification_has_no_id(self, codec):
        frame = codec.encode(JSONRPCNotification(method="initialized", params={}))
        data = oj.loads(frame)
        assert "id" not in data
        assert data["params"] == {}

    def test_error_response(self, codec):
        response = JSONRPCResponse.error_response(id="srv-1", code=-32601, message="nope")
        data = oj.loads(codec.encode(response))
        assert data["id"] == "srv-1"
        assert data["error"] == {"code": -32601, "message": "nope"}
        assert "result" not in data

    def test_null_result_is_kept(self, codec):
        data = oj.loads(codec.encode(JSONRPCResponse.success(id=3, result=None)))
        assert "result" in data
        assert data["result"] is None

    def test_unencodable_params(self, codec):
        with pytest.raises(MalformedMessage, match="cannot encode"):
            codec.encode(JSONRPCRequest(method="textDocument/hover", id=1, params={"uri": "file:///\ud800.lua"}))

    def test_unserializable_value(self, codec):
        with pytest.raises(MalformedMessage, match="cannot encode"):
            codec.encode({"jsonrpc": "2.0", "method": "x", "params": {"value": object()}})


class TestDecode:
    """Tests for MessageCodec.decode."""

    def test_response(self, codec):
        message = codec.decode('{"jsonrpc":"2.0","id":7,"result":{"ok":true}}')
        assert isinstance(message, JSONRPCResponse)
        assert message.id == 7
        assert message.result == {"ok": True}
        assert not message.is_error

    def test_error_response(self, codec):
        message = codec.decode(
            '{"jsonrpc":"2.0","id":7,"error":{"code":-32603,"message":"boom"}}'
        )
        assert isinstance(message, JSONRPCResponse)
        assert message.is_error
        assert message.error.message == "boom"

    def test_notification(self, codec):
        message = codec.decode(
            '{"jsonrpc":"2.0","method":"window/logMessage","params":{"type":3,"message":"hi"}}'
        )
        assert isinstance(message, JSONRPCNotification)
        assert message.method == "window/logMessage"

    def test_server_request(self, codec):
        message = codec.decode(
            '{"jsonrpc":"2.0","id":"abc","method":"workspace/configuration","params":{}}'
        )
        assert isinstance(message, JSONRPCRequest)
        assert message.id == "abc"

    def test_bytes_frame(self, codec):
        message = codec.decode(b'{"jsonrpc":"2.0","id":1,"result":null}')
        assert isinstance(message, JSONRPCResponse)

    def test_invalid_json(self, codec):
        with pytest.raises(MalformedMessage, match="invalid JSON"):
            codec.decode("{not json")

    def test_non_object(self, codec):
        with pytest.raises(MalformedMessage, match="expected object"):
            codec.decode("[1, 2, 3]")

    def test_wrong_version(self, codec):
        with pytest.raises(MalformedMessage):
            codec.decode('{"jsonrpc":"1.0","id":1,"result":null}')

    def test_unclassifiable(self, codec):
        with pytest.raises(MalformedMessage, match="Cannot determine"):
            codec.decode('{"jsonrpc":"2.0","id":1}')

    def test_non_object_error_is_still_an_error(self, codec):
        message = codec.decode('{"jsonrpc":"2.0","id":4,"error":"boom"}')
        assert message.is_error
        assert message.error.message == "boom"
        assert message.error.code == -32603

    @pytest.mark.parametrize("identifier", ["true", "1.5", "{}"])
    def test_invalid_id_type(self, codec, identifier):
        with pytest.raises(MalformedMessage, match="id must be"):
            codec.decode('{"jsonrpc":"2.0","id":' + identifier + ',"result":null}')

    def test_malformed_is_parse_error(self, codec):
        with pytest.raises(MalformedMessage) as exc_info:
            codec.decode("")
        assert exc_info.value.code == PARSE_ERROR


class TestErrors:
    """Tests for the LSPError taxonomy."""

    def test_remote_error_from_response(self):
        error = RemoteError.from_response({"code": -32602, "message": "bad", "data": [1]})
        assert isinstance(error, LSPError)
        assert error.code == -32602
        assert error.data == [1]
        assert str(error) == "bad"

    def test_timeout(self):
        error = RequestTimeout.after(30.0, "textDocument/hover")
        assert error.code == REQUEST_TIMEOUT
        assert "30.0s" in error.message
        assert "textDocument/hover" in error.message

    def test_cancelled_default_reason(self):
        error = RequestCancelled.because()
        assert error.code == REQUEST_CANCELLED
        assert error.message == "Request cancelled"

    def test_to_dict_round_trip(self):
        error = LSPError(code=-32000, message="custom", data={"x": 1})
        restored = LSPError.from_dict(error.to_dict())
        assert restored == error
