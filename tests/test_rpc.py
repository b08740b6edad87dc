import pytest
import requests

from txproof.rpc import BlockSourceError, EmptyBlock, InvalidBlockNumber, JsonRpcBlockSource, parse_block_number


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def source(response):
    s = FakeSession(response)
    return JsonRpcBlockSource("http://node.test", timeout_seconds=3.0, session=s), s


@pytest.mark.parametrize("value,expected", [("0", 0), ("17", 17), (" 42 ", 42), (19000000, 19000000)])
def test_parse_block_number(value, expected):
    assert parse_block_number(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "-1", "1.5", "12abc", -3, True, "０"])
def test_parse_block_number_rejects(value):
    with pytest.raises(InvalidBlockNumber):
        parse_block_number(value)


def test_transaction_hashes():
    hashes = ["0x" + "11" * 32, "0x" + "22" * 32]
    src, s = source(FakeResponse({"jsonrpc": "2.0", "id": 1, "result": {"number": "0x10", "transactions": hashes}}))
    assert src.transaction_hashes(16) == hashes
    body = s.requests[0]["json"]
    assert body["method"] == "eth_getBlockByNumber"
    assert body["params"] == ["0x10", False]
    assert s.requests[0]["timeout"] == 3.0
    assert s.requests[0]["url"] == "http://node.test"


def test_hydrated_transactions():
    src, _ = source(FakeResponse({"result": {"transactions": [{"hash": "0x" + "33" * 32, "nonce": "0x1"}]}}))
    assert src.transaction_hashes(1) == ["0x" + "33" * 32]


def test_missing_block():
    src, _ = source(FakeResponse({"result": None}))
    with pytest.raises(EmptyBlock):
        src.transaction_hashes(99)


def test_block_without_transactions():
    src, _ = source(FakeResponse({"result": {"transactions": []}}))
    with pytest.raises(EmptyBlock):
        src.transaction_hashes(0)


def test_rpc_error_member():
    src, _ = source(FakeResponse({"error": {"code": -32000, "message": "header not found"}}))
    with pytest.raises(BlockSourceError, match="header not found"):
        src.transaction_hashes(5)


def test_http_error():
    src, _ = source(FakeResponse({}, status=503))
    with pytest.raises(BlockSourceError):
        src.transaction_hashes(5)


def test_connection_error():
    src, _ = source(requests.ConnectionError("refused"))
    with pytest.raises(BlockSourceError):
        src.transaction_hashes(5)


def test_bad_json():
    src, _ = source(FakeResponse(ValueError("not json")))
    with pytest.raises(BlockSourceError):
        src.transaction_hashes(5)


def test_invalid_block_number_skips_network():
    src, s = source(FakeResponse({"result": None}))
    with pytest.raises(InvalidBlockNumber):
        src.transaction_hashes(-1)
    assert s.requests == []


@pytest.mark.parametrize("result", [
    "0xdeadbeef",
    ["0x" + "11" * 32],
    {"transactions": "0x" + "11" * 32},
    {"transactions": [{"nohash": 1}]},
    {"transactions": [{"hash": 7}]},
    {"transactions": [None]},
])
def test_unexpected_block_shape(result):
    src, _ = source(FakeResponse({"result": result}))
    with pytest.raises(BlockSourceError, match="unexpected response shape"):
        src.transaction_hashes(5)
