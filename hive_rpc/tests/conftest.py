"""
Fixtures replacing the HTTP transport of the RPC connections with an in-memory fake.
"""

from typing import Any, Callable, Dict, List

import pytest
import requests

from hive_base_types import Hash

from ..client import HiveRPCEngineClient
from ..rpc import EngineRPC, EthRPC


class RPCErrorResult:
    """Handler return value producing a JSON-RPC error object instead of a result."""

    def __init__(self, code: int, message: str, data: Any = None):
        """Initialize the error object."""
        self.error: Dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            self.error["data"] = data


class FakeResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, payload: Any, status_code: int = 200):
        """Initialize the response with its decoded body."""
        self.payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        """Return the decoded body."""
        return self.payload

    def raise_for_status(self) -> None:
        """Raise `requests.HTTPError` for error status codes."""
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """
    In-memory JSON-RPC server standing in for `requests.Session`.

    `handlers` maps wire method names to either a static result or a callable receiving
    the request params. Returning `RPCErrorResult` produces an error object. Every
    request body and its headers are recorded in `requests`.
    """

    def __init__(self):
        """Initialize an empty server."""
        self.handlers: Dict[str, Any] = {}
        self.requests: List[Dict[str, Any]] = []
        self.status_code = 200
        self.post_exception: Exception | None = None
        self.reverse_batches = False
        self.closed = False

    def on(self, method: str, handler: Any | Callable[[List[Any]], Any]) -> None:
        """Register the result (or result factory) for `method`."""
        self.handlers[method] = handler

    def calls(self, method: str) -> List[Dict[str, Any]]:
        """Return the recorded request bodies for `method`."""
        bodies: List[Dict[str, Any]] = []
        for request in self.requests:
            body = request["json"]
            for item in body if isinstance(body, list) else [body]:
                if item["method"] == method:
                    bodies.append(item)
        return bodies

    def _respond(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if body["method"] not in self.handlers:
            return {
                "jsonrpc": "2.0",
                "id": body["id"],
                "error": {"code": -32601, "message": f"method {body['method']} not found"},
            }
        handler = self.handlers[body["method"]]
        result = handler(body["params"]) if callable(handler) else handler
        if isinstance(result, RPCErrorResult):
            return {"jsonrpc": "2.0", "id": body["id"], "error": result.error}
        return {"jsonrpc": "2.0", "id": body["id"], "result": result}

    def post(self, url: str, json: Any = None, headers: Dict | None = None, timeout=None):
        """Record the request and answer it."""
        if self.closed:
            raise RuntimeError("session closed")
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.post_exception is not None:
            raise self.post_exception
        if self.status_code >= 400:
            return FakeResponse(None, self.status_code)
        if isinstance(json, list):
            responses = [self._respond(item) for item in json]
            if self.reverse_batches:
                responses.reverse()
            return FakeResponse(responses)
        return FakeResponse(self._respond(json))

    def close(self) -> None:
        """Close the session."""
        self.closed = True


def block_json(
    number: int,
    block_hash: Hash | int,
    parent_hash: Hash | int,
    **fields: Any,
) -> Dict[str, Any]:
    """Return a block document as returned by `eth_getBlockByNumber`."""
    block: Dict[str, Any] = {
        "hash": str(Hash(block_hash)),
        "parentHash": str(Hash(parent_hash)),
        "sha3Uncles": "0x" + "1d" * 32,
        "miner": "0x" + "00" * 20,
        "stateRoot": "0x" + "02" * 32,
        "transactionsRoot": "0x" + "03" * 32,
        "receiptsRoot": "0x" + "04" * 32,
        "logsBloom": "0x" + "00" * 256,
        "difficulty": "0x0",
        "number": hex(number),
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x0",
        "timestamp": hex(1_700_000_000 + 12 * number),
        "extraData": "0x",
        "mixHash": "0x" + "05" * 32,
        "nonce": "0x0000000000000000",
        "baseFeePerGas": "0x7",
        "transactions": [],
        "uncles": [],
    }
    block.update(fields)
    return block


def payload_json(number: int = 1, **fields: Any) -> Dict[str, Any]:
    """Return an execution payload document."""
    payload: Dict[str, Any] = {
        "parentHash": "0x" + "01" * 32,
        "feeRecipient": "0x" + "00" * 20,
        "stateRoot": "0x" + "02" * 32,
        "receiptsRoot": "0x" + "04" * 32,
        "logsBloom": "0x" + "00" * 256,
        "prevRandao": "0x" + "06" * 32,
        "blockNumber": hex(number),
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x0",
        "timestamp": "0x6553f100",
        "extraData": "0x",
        "baseFeePerGas": "0x7",
        "blockHash": "0x" + "aa" * 32,
        "transactions": [],
    }
    payload.update(fields)
    return payload


@pytest.fixture
def session() -> FakeSession:
    """Fake transport shared by the connections of a test."""
    return FakeSession()


@pytest.fixture
def engine(session: FakeSession) -> EngineRPC:
    """Engine connection talking to the fake transport."""
    return EngineRPC("http://127.0.0.1:8551/", session=session, label="engine")


@pytest.fixture
def eth(session: FakeSession) -> EthRPC:
    """Eth connection talking to the fake transport."""
    return EthRPC("http://127.0.0.1:8545/", session=session, label="eth")


@pytest.fixture
def client(session: FakeSession) -> HiveRPCEngineClient:
    """Engine API client with both connections routed to the fake transport."""
    client = HiveRPCEngineClient("127.0.0.1", client_id="client-1")
    client.engine.session.close()
    client.eth.session.close()
    client.engine.session = session
    client.eth.session = session
    return client
