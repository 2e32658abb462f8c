"""JSON-RPC connections to the `eth` and `engine` namespaces of a client under test."""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from itertools import count
from threading import RLock
from typing import Any, ClassVar, Dict, List, Literal, Sequence, Tuple, Union

import requests

from hive_base_types import Address, Bytes, Hash, PayloadID, to_json, to_quantity
from pytest_plugins.logging import get_logger

from .auth import DEFAULT_JWT_SECRET, JWTAuth
from .exceptions import BlockNotFoundError, JSONRPCError, SendTransactionExceptionError
from .types import (
    BlobsBundle,
    Block,
    BlockHeader,
    ExecutionPayload,
    ExecutionPayloadBody,
    ForkchoiceState,
    ForkchoiceUpdateResponse,
    GetPayloadResponse,
    PayloadAttributes,
    PayloadStatus,
    TotalDifficultyHeader,
    TransitionConfiguration,
)
from .versions import MethodDescriptor, MethodFamily, ResponseShape, engine_method

logger = get_logger(__name__)

BlockNumberType = Union[int, Literal["latest", "earliest", "pending", "safe", "finalized"], None]


def block_number_arg(block_number: BlockNumberType) -> str:
    """Return the JSON-RPC block parameter, `None` meaning the latest block."""
    if block_number is None:
        return "latest"
    if isinstance(block_number, int):
        return to_quantity(block_number)
    return block_number


@dataclass
class BatchResult:
    """Outcome of a single element of a batch request."""

    method: str
    params: Tuple[Any, ...]
    result: Any = None
    error: Exception | None = None


class BaseRPC:
    """
    A JSON-RPC connection to a single namespace of the client under test.

    Each instance owns its own HTTP session, so the `engine` and `eth` connections of a
    client can be closed independently.
    """

    namespace: ClassVar[str]

    def __init__(
        self,
        url: str,
        extra_headers: Dict | None = None,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
        label: str | None = None,
    ):
        """Initialize BaseRPC class with the given url."""
        if extra_headers is None:
            extra_headers = {}
        self.url = url
        self.request_id_counter = count(1)
        self.extra_headers = extra_headers
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.label = label if label is not None else url
        self.closed = False

    def __init_subclass__(cls) -> None:
        """Set namespace of the RPC class to the lowercase of the class name."""
        namespace = cls.__name__
        if namespace.endswith("RPC"):
            namespace = namespace[:-3]
        cls.namespace = namespace.lower()

    def _request_body(self, method: str, params: Sequence[Any]) -> Dict[str, Any]:
        assert self.namespace, "RPC namespace not set"
        return {
            "jsonrpc": "2.0",
            "method": f"{self.namespace}_{method}",
            "params": [to_json(param) for param in params],
            "id": next(self.request_id_counter),
        }

    def _post(self, body: Any, extra_headers: Dict | None) -> Any:
        if self.closed:
            raise RuntimeError(f"connection to {self.label} is closed")
        headers = {"Content-Type": "application/json"} | self.extra_headers | (extra_headers or {})
        response = self.session.post(self.url, json=body, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def post_request(self, method: str, *params: Any, extra_headers: Dict | None = None) -> Any:
        """Send JSON-RPC POST request to the client RPC server at port defined in the url."""
        body = self._request_body(method, params)
        logger.verbose(f"{self.label}: {body['method']} request id={body['id']}")
        logger.debug(f"{self.label}: request {body}")
        response_json = self._post(body, extra_headers)
        logger.debug(f"{self.label}: response {response_json}")

        if "error" in response_json and response_json["error"] is not None:
            error = JSONRPCError(**response_json["error"])
            logger.verbose(f"{self.label}: {body['method']} failed: {error}")
            raise error

        if "result" not in response_json:
            raise JSONRPCError(-32603, f"{body['method']} response didn't contain a result field")
        return response_json["result"]

    def batch_request(
        self,
        calls: Sequence[Tuple[str, Sequence[Any]]],
        *,
        extra_headers: Dict | None = None,
    ) -> List[BatchResult]:
        """
        Send several calls in a single JSON-RPC batch.

        A failure of the batch request itself raises. Errors reported for individual
        elements are returned in the element's `BatchResult.error`, in the order of `calls`.
        """
        batch = [(method, tuple(params)) for method, params in calls]
        if not batch:
            return []
        bodies = [self._request_body(method, params) for method, params in batch]
        logger.verbose(f"{self.label}: batch of {len(bodies)} requests")
        response_json = self._post(bodies, extra_headers)

        if isinstance(response_json, dict):
            # A single error object is returned when the batch as a whole is rejected
            if response_json.get("error") is not None:
                raise JSONRPCError(**response_json["error"])
            raise JSONRPCError(-32603, "batch response was not a list")

        responses_by_id = {
            item.get("id"): item for item in response_json if isinstance(item, dict)
        }
        results: List[BatchResult] = []
        for (_, params), body in zip(batch, bodies):
            result = BatchResult(method=body["method"], params=params)
            item = responses_by_id.get(body["id"])
            if item is None:
                result.error = JSONRPCError(-32603, f"missing response for request {body['id']}")
            elif item.get("error") is not None:
                result.error = JSONRPCError(**item["error"])
            elif "result" not in item:
                result.error = JSONRPCError(-32603, "response didn't contain a result field")
            else:
                result.result = item["result"]
            results.append(result)
        return results

    def close(self) -> None:
        """Close the underlying HTTP session."""
        if not self.closed:
            self.session.close()
            self.closed = True


class EthRPC(BaseRPC):
    """
    Represents an `eth_X` RPC class for every default ethereum RPC method used by the
    Engine API tests.
    """

    BlockNumberType = BlockNumberType

    def _get_block(self, method: str, block: str, full_txs: bool) -> Dict[str, Any]:
        response = self.post_request(method, block, full_txs)
        if response is None:
            raise BlockNotFoundError(block)
        return response

    def get_block_by_number(
        self, block_number: BlockNumberType = None, full_txs: bool = True
    ) -> Block:
        """`eth_getBlockByNumber`: Returns information about a block by block number."""
        block = block_number_arg(block_number)
        return Block.model_validate(self._get_block("getBlockByNumber", block, full_txs))

    def get_block_by_hash(self, block_hash: Hash, full_txs: bool = True) -> Block:
        """`eth_getBlockByHash`: Returns information about a block by hash."""
        return Block.model_validate(self._get_block("getBlockByHash", f"{block_hash}", full_txs))

    def header_by_number(self, block_number: BlockNumberType = None) -> BlockHeader:
        """Return the header of a block by number, `None` meaning the latest block."""
        block = block_number_arg(block_number)
        return BlockHeader.model_validate(self._get_block("getBlockByNumber", block, False))

    def header_by_hash(self, block_hash: Hash) -> BlockHeader:
        """Return the header of a block by hash."""
        return BlockHeader.model_validate(
            self._get_block("getBlockByHash", f"{block_hash}", False)
        )

    def get_total_difficulty(self, block_number: BlockNumberType = None) -> int:
        """Return the total difficulty of a block, the latest one by default."""
        block = block_number_arg(block_number)
        return TotalDifficultyHeader.model_validate(
            self._get_block("getBlockByNumber", block, False)
        ).total_difficulty

    def chain_id(self) -> int:
        """`eth_chainId`: Returns the chain id of the client."""
        return int(self.post_request("chainId"), 16)

    def get_balance(self, address: Address, block_number: BlockNumberType = None) -> int:
        """`eth_getBalance`: Returns the balance of the account of given address."""
        block = block_number_arg(block_number)
        return int(self.post_request("getBalance", f"{address}", block), 16)

    def get_code(self, address: Address, block_number: BlockNumberType = None) -> Bytes:
        """`eth_getCode`: Returns code at a given address."""
        block = block_number_arg(block_number)
        return Bytes(self.post_request("getCode", f"{address}", block))

    def get_transaction_count(
        self, address: Address, block_number: BlockNumberType = None
    ) -> int:
        """`eth_getTransactionCount`: Returns the number of transactions sent from an address."""
        block = block_number_arg(block_number)
        return int(self.post_request("getTransactionCount", f"{address}", block), 16)

    def get_storage_at(
        self, address: Address, position: Hash, block_number: BlockNumberType = None
    ) -> Hash:
        """`eth_getStorageAt`: Returns the value from a storage position at a given address."""
        block = block_number_arg(block_number)
        return Hash(
            self.post_request("getStorageAt", f"{address}", f"{position}", block),
            left_padding=True,
        )

    def storage_at_keys(
        self, account: Address, keys: Sequence[Hash], block_number: BlockNumberType = None
    ) -> Dict[Hash, Hash | Exception]:
        """
        Retrieve the storage values for the specified keys at a given address and block
        number using a single batch request.

        The returned dictionary has one entry per key, holding either the value or the
        error reported for that key.
        """
        block = block_number_arg(block_number)
        keys = [Hash(key) for key in keys]
        batch = self.batch_request(
            [("getStorageAt", (f"{account}", f"{key}", block)) for key in keys]
        )
        results: Dict[Hash, Hash | Exception] = {}
        for key, element in zip(keys, batch):
            if element.error is not None:
                results[key] = element.error
                continue
            try:
                results[key] = Hash(element.result, left_padding=True)
            except ValueError as e:
                results[key] = e
        return results

    def send_raw_transaction(self, transaction_rlp: Bytes) -> Hash:
        """`eth_sendRawTransaction`: Send a transaction to the client."""
        transaction_rlp = Bytes(transaction_rlp)
        try:
            return Hash(self.post_request("sendRawTransaction", transaction_rlp.hex()))
        except Exception as e:
            raise SendTransactionExceptionError(str(e), tx_rlp=transaction_rlp) from e

    def send_raw_transactions(self, transactions_rlp: Sequence[Bytes]) -> List[Hash | Exception]:
        """
        Use a single batch of `eth_sendRawTransaction` to send a list of transactions.

        Each element of the returned list is either the transaction hash or the error
        reported by the client for that transaction.
        """
        transactions_rlp = [Bytes(tx) for tx in transactions_rlp]
        batch = self.batch_request(
            [("sendRawTransaction", (tx.hex(),)) for tx in transactions_rlp]
        )
        results: List[Hash | Exception] = []
        for element in batch:
            if element.error is not None:
                results.append(element.error)
                continue
            try:
                results.append(Hash(element.result))
            except ValueError as e:
                results.append(e)
        return results


class EngineRPC(BaseRPC):
    """
    Represents an Engine API RPC class for every Engine API method used by the tests.

    The latest forkchoice state, payload attributes and payload sent, and the latest
    responses received, are kept for inspection by the test after each call.
    """

    def __init__(
        self,
        url: str,
        extra_headers: Dict | None = None,
        *,
        jwt_secret: bytes = DEFAULT_JWT_SECRET,
        lock: AbstractContextManager | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        label: str | None = None,
    ):
        """Initialize EngineRPC with the url and the secret shared with the client."""
        super().__init__(url, extra_headers, timeout=timeout, session=session, label=label)
        self.auth = JWTAuth(jwt_secret)
        self.lock = lock if lock is not None else RLock()
        self._latest_forkchoice_state_sent: ForkchoiceState | None = None
        self._latest_payload_attributes_sent: PayloadAttributes | None = None
        self._latest_forkchoice_response: ForkchoiceUpdateResponse | None = None
        self._latest_payload_sent: ExecutionPayload | None = None
        self._latest_payload_status_response: PayloadStatus | None = None
        self._latest_get_payload_response: GetPayloadResponse | None = None

    def call(self, descriptor: MethodDescriptor, *params: Any) -> Any:
        """Dispatch `descriptor` with `params`, authenticating the call when required."""
        assert len(params) == descriptor.arity, (
            f"{descriptor.method} takes {descriptor.arity} params, got {len(params)}"
        )
        extra_headers: Dict[str, str] = {}
        if descriptor.authenticated:
            extra_headers = self.auth.prepare_auth_headers()
        return self.post_request(descriptor.method, *params, extra_headers=extra_headers)

    def forkchoice_updated(
        self,
        forkchoice_state: ForkchoiceState,
        payload_attributes: PayloadAttributes | None = None,
        *,
        version: int,
    ) -> ForkchoiceUpdateResponse:
        """`engine_forkchoiceUpdatedVX`: Updates the forkchoice state of the execution client."""
        descriptor = engine_method(MethodFamily.FORKCHOICE_UPDATED, version)
        auth_headers = self.auth.prepare_auth_headers()
        with self.lock:
            self._latest_forkchoice_state_sent = forkchoice_state
            self._latest_payload_attributes_sent = payload_attributes
        response: ForkchoiceUpdateResponse | None = None
        try:
            response = ForkchoiceUpdateResponse.model_validate(
                self.post_request(
                    descriptor.method,
                    forkchoice_state,
                    payload_attributes,
                    extra_headers=auth_headers,
                )
            )
        finally:
            with self.lock:
                self._latest_forkchoice_response = response
        return response

    def get_payload(self, payload_id: PayloadID, *, version: int) -> GetPayloadResponse:
        """
        `engine_getPayloadVX`: Retrieves a payload that was requested through
        `engine_forkchoiceUpdatedVX`.
        """
        descriptor = engine_method(MethodFamily.GET_PAYLOAD, version)
        response: GetPayloadResponse | None = None
        try:
            result = self.call(descriptor, PayloadID(payload_id))
            if descriptor.response is ResponseShape.ENVELOPE:
                response = GetPayloadResponse.model_validate(result)
            else:
                response = GetPayloadResponse.from_bare_payload(result)
        finally:
            with self.lock:
                self._latest_get_payload_response = response
        return response

    def new_payload(
        self,
        payload: ExecutionPayload,
        versioned_hashes: List[Hash] | None = None,
        parent_beacon_block_root: Hash | None = None,
        *,
        version: int,
    ) -> PayloadStatus:
        """
        `engine_newPayloadVX`: Attempts to execute the given payload on an execution client.

        From version 3 onwards the versioned hashes and the beacon root are always sent,
        as `null` when not given. Older versions only send the payload.
        """
        descriptor = engine_method(MethodFamily.NEW_PAYLOAD, version)
        auth_headers = self.auth.prepare_auth_headers()
        params: Tuple[Any, ...] = (payload,)
        if descriptor.arity == 3:
            params = (payload, versioned_hashes, parent_beacon_block_root)
        with self.lock:
            self._latest_payload_sent = payload
        response: PayloadStatus | None = None
        try:
            response = PayloadStatus.model_validate(
                self.post_request(descriptor.method, *params, extra_headers=auth_headers)
            )
        finally:
            with self.lock:
                self._latest_payload_status_response = response
        return response

    def exchange_capabilities(self, capabilities: List[str]) -> List[str]:
        """`engine_exchangeCapabilities`: Exchanges the list of supported Engine API methods."""
        descriptor = engine_method(MethodFamily.EXCHANGE_CAPABILITIES)
        return list(self.call(descriptor, list(capabilities)))

    def get_payload_bodies_by_range(
        self, start: int, count: int
    ) -> List[ExecutionPayloadBody | None]:
        """`engine_getPayloadBodiesByRangeV1`: Returns the bodies of a range of blocks."""
        descriptor = engine_method(MethodFamily.GET_PAYLOAD_BODIES_BY_RANGE)
        return self._payload_bodies(self.call(descriptor, int(start), int(count)))

    def get_payload_bodies_by_hash(
        self, block_hashes: List[Hash]
    ) -> List[ExecutionPayloadBody | None]:
        """`engine_getPayloadBodiesByHashV1`: Returns the bodies of the given blocks."""
        descriptor = engine_method(MethodFamily.GET_PAYLOAD_BODIES_BY_HASH)
        return self._payload_bodies(
            self.call(descriptor, [Hash(block_hash) for block_hash in block_hashes])
        )

    @staticmethod
    def _payload_bodies(result: List[Any] | None) -> List[ExecutionPayloadBody | None]:
        return [
            ExecutionPayloadBody.model_validate(body) if body is not None else None
            for body in result or []
        ]

    def get_blobs_bundle(self, payload_id: PayloadID) -> BlobsBundle:
        """`engine_getBlobsBundleV1`: Retrieves the blobs bundle of a payload being built."""
        descriptor = engine_method(MethodFamily.GET_BLOBS_BUNDLE)
        return BlobsBundle.model_validate(self.call(descriptor, PayloadID(payload_id)))

    def exchange_transition_configuration(
        self, transition_configuration: TransitionConfiguration
    ) -> TransitionConfiguration:
        """`engine_exchangeTransitionConfigurationV1`: Legacy unauthenticated handshake."""
        descriptor = engine_method(MethodFamily.EXCHANGE_TRANSITION_CONFIGURATION)
        return TransitionConfiguration.model_validate(
            self.call(descriptor, transition_configuration)
        )

    def latest_forkchoice_sent(
        self,
    ) -> Tuple[ForkchoiceState | None, PayloadAttributes | None]:
        """Return the forkchoice state and payload attributes of the latest forkchoice update."""
        with self.lock:
            return self._latest_forkchoice_state_sent, self._latest_payload_attributes_sent

    def latest_forkchoice_response(self) -> ForkchoiceUpdateResponse | None:
        """Return the response to the latest forkchoice update, `None` if it failed."""
        with self.lock:
            return self._latest_forkchoice_response

    def latest_new_payload_sent(self) -> ExecutionPayload | None:
        """Return the payload of the latest new payload call."""
        with self.lock:
            return self._latest_payload_sent

    def latest_new_payload_response(self) -> PayloadStatus | None:
        """Return the status returned by the latest new payload call, `None` if it failed."""
        with self.lock:
            return self._latest_payload_status_response

    def latest_get_payload_response(self) -> GetPayloadResponse | None:
        """Return the response to the latest get payload call, `None` if it failed."""
        with self.lock:
            return self._latest_get_payload_response
