"""
Engine API test client for a single execution client started by hive.

`HiveRPCEngineClient` composes the `engine` and `eth` connections, the nonce tracker
and the caches of the latest Engine API traffic behind one lock.
"""

from threading import RLock
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from hive_base_types import Address, Bytes, Hash, PayloadID
from pytest_plugins.logging import get_logger

from .auth import DEFAULT_JWT_SECRET
from .liveness import DEFAULT_ENGINE_PORT, DEFAULT_ETH_PORT, check_eth_engine_live
from .nonce import NonceTracker
from .rpc import BlockNumberType, EngineRPC, EthRPC
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
    TransitionConfiguration,
)

if TYPE_CHECKING:
    from config import ClientConfig

logger = get_logger(__name__)

DEFAULT_RPC_TIMEOUT = 10.0


class HiveRPCEngineClient:
    """
    Engine API client bound to one execution client under test.

    Every Engine API and `eth` operation used by the tests is available directly on the
    client, and the underlying connections are exposed as `engine` and `eth`. The client
    owns both HTTP sessions; `close` (or leaving the `with` block) tears them down.
    """

    def __init__(
        self,
        host: str,
        *,
        engine_port: int = DEFAULT_ENGINE_PORT,
        eth_port: int = DEFAULT_ETH_PORT,
        jwt_secret: bytes = DEFAULT_JWT_SECRET,
        terminal_total_difficulty: int | None = None,
        client_id: str | None = None,
        timeout: float | None = DEFAULT_RPC_TIMEOUT,
    ):
        """Initialize the connections to `host`; no request is sent until the first call."""
        self.host = host
        self.client_id = client_id if client_id is not None else host
        self._terminal_total_difficulty = terminal_total_difficulty
        self.lock = RLock()
        self.engine = EngineRPC(
            f"http://{host}:{engine_port}/",
            jwt_secret=jwt_secret,
            lock=self.lock,
            timeout=timeout,
            label=f"{self.client_id} engine",
        )
        self.eth = EthRPC(
            f"http://{host}:{eth_port}/",
            timeout=timeout,
            label=f"{self.client_id} eth",
        )
        self.nonces = NonceTracker(self.eth, self.lock)
        logger.verbose(f"created engine client {self.client_id} for {self.engine.url}")

    @classmethod
    def from_config(
        cls, host: str, config: "ClientConfig", *, client_id: str | None = None
    ) -> "HiveRPCEngineClient":
        """Create a client for `host` using the ports, secret and timeout in `config`."""
        return cls(
            host,
            engine_port=config.engine_port,
            eth_port=config.eth_port,
            jwt_secret=config.jwt_secret_bytes(),
            terminal_total_difficulty=config.terminal_total_difficulty,
            client_id=client_id,
            timeout=config.rpc_timeout,
        )

    @classmethod
    def connect(
        cls, host: str, config: "ClientConfig", *, client_id: str | None = None
    ) -> "HiveRPCEngineClient":
        """Wait until both ports of `host` accept connections, then create the client."""
        check_eth_engine_live(
            host,
            (config.eth_port, config.engine_port),
            timeout=config.liveness_timeout,
            interval=config.liveness_interval,
        )
        return cls.from_config(host, config, client_id=client_id)

    @property
    def id(self) -> str:
        """Return the identifier of the client under test."""
        return self.client_id

    @property
    def url(self) -> str:
        """Return the URL of the `eth` endpoint of the client."""
        return self.eth.url

    @property
    def engine_url(self) -> str:
        """Return the URL of the Engine API endpoint."""
        return self.engine.url

    @property
    def terminal_total_difficulty(self) -> int | None:
        """Return the terminal total difficulty configured for the client."""
        return self._terminal_total_difficulty

    def post_run_verifications(self) -> None:
        """Run checks after a test; there are none for a plain Engine API client."""
        pass

    def close(self) -> None:
        """Close the `engine` and `eth` connections."""
        self.engine.close()
        self.eth.close()

    def __enter__(self) -> "HiveRPCEngineClient":
        """Return the client when entering a `with` block."""
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        """Close the connections when leaving a `with` block."""
        self.close()

    # Engine API

    def forkchoice_updated(
        self,
        forkchoice_state: ForkchoiceState,
        payload_attributes: PayloadAttributes | None = None,
        *,
        version: int,
    ) -> ForkchoiceUpdateResponse:
        """Send `engine_forkchoiceUpdatedVX`."""
        return self.engine.forkchoice_updated(forkchoice_state, payload_attributes, version=version)

    def get_payload(self, payload_id: PayloadID, *, version: int) -> GetPayloadResponse:
        """Send `engine_getPayloadVX`."""
        return self.engine.get_payload(payload_id, version=version)

    def new_payload(
        self,
        payload: ExecutionPayload,
        versioned_hashes: List[Hash] | None = None,
        parent_beacon_block_root: Hash | None = None,
        *,
        version: int,
    ) -> PayloadStatus:
        """Send `engine_newPayloadVX`."""
        return self.engine.new_payload(
            payload, versioned_hashes, parent_beacon_block_root, version=version
        )

    def exchange_capabilities(self, capabilities: List[str]) -> List[str]:
        """Send `engine_exchangeCapabilities`."""
        return self.engine.exchange_capabilities(capabilities)

    def get_payload_bodies_by_range(
        self, start: int, count: int
    ) -> List[ExecutionPayloadBody | None]:
        """Send `engine_getPayloadBodiesByRangeV1`."""
        return self.engine.get_payload_bodies_by_range(start, count)

    def get_payload_bodies_by_hash(
        self, block_hashes: List[Hash]
    ) -> List[ExecutionPayloadBody | None]:
        """Send `engine_getPayloadBodiesByHashV1`."""
        return self.engine.get_payload_bodies_by_hash(block_hashes)

    def get_blobs_bundle(self, payload_id: PayloadID) -> BlobsBundle:
        """Send `engine_getBlobsBundleV1`."""
        return self.engine.get_blobs_bundle(payload_id)

    def exchange_transition_configuration(
        self, transition_configuration: TransitionConfiguration
    ) -> TransitionConfiguration:
        """Send the unauthenticated `engine_exchangeTransitionConfigurationV1`."""
        return self.engine.exchange_transition_configuration(transition_configuration)

    def latest_forkchoice_sent(
        self,
    ) -> Tuple[ForkchoiceState | None, PayloadAttributes | None]:
        """Return the forkchoice state and payload attributes of the latest update."""
        return self.engine.latest_forkchoice_sent()

    def latest_forkchoice_response(self) -> ForkchoiceUpdateResponse | None:
        """Return the response to the latest forkchoice update."""
        return self.engine.latest_forkchoice_response()

    def latest_new_payload_sent(self) -> ExecutionPayload | None:
        """Return the payload of the latest new payload call."""
        return self.engine.latest_new_payload_sent()

    def latest_new_payload_response(self) -> PayloadStatus | None:
        """Return the status returned by the latest new payload call."""
        return self.engine.latest_new_payload_response()

    def latest_get_payload_response(self) -> GetPayloadResponse | None:
        """Return the response to the latest get payload call."""
        return self.engine.latest_get_payload_response()

    # eth

    def block_by_number(self, block_number: BlockNumberType = None) -> Block:
        """Return the block with full transactions, the latest one by default."""
        return self.eth.get_block_by_number(block_number)

    def block_by_hash(self, block_hash: Hash) -> Block:
        """Return the block with the given hash, with full transactions."""
        return self.eth.get_block_by_hash(block_hash)

    def header_by_number(self, block_number: BlockNumberType = None) -> BlockHeader:
        """Return the header of a block, the latest one by default."""
        return self.eth.header_by_number(block_number)

    def header_by_hash(self, block_hash: Hash) -> BlockHeader:
        """Return the header of the block with the given hash."""
        return self.eth.header_by_hash(block_hash)

    def get_total_difficulty(self) -> int:
        """Return the total difficulty of the latest block."""
        return self.eth.get_total_difficulty()

    def chain_id(self) -> int:
        """Return the chain id of the client."""
        return self.eth.chain_id()

    def balance_at(self, account: Address, block_number: BlockNumberType = None) -> int:
        """Return the balance of `account`."""
        return self.eth.get_balance(account, block_number)

    def code_at(self, account: Address, block_number: BlockNumberType = None) -> Bytes:
        """Return the code deployed at `account`."""
        return self.eth.get_code(account, block_number)

    def nonce_at(self, account: Address, block_number: BlockNumberType = None) -> int:
        """Return the transaction count of `account` as reported by the client."""
        return self.eth.get_transaction_count(account, block_number)

    def storage_at(
        self, account: Address, key: Hash, block_number: BlockNumberType = None
    ) -> Hash:
        """Return a single storage slot of `account`."""
        return self.eth.get_storage_at(account, key, block_number)

    def storage_at_keys(
        self, account: Address, keys: Sequence[Hash], block_number: BlockNumberType = None
    ) -> Dict[Hash, Hash | Exception]:
        """Return the storage slots of `account` for every key, using a single batch."""
        return self.eth.storage_at_keys(account, keys, block_number)

    def send_raw_transaction(self, transaction_rlp: Bytes) -> Hash:
        """Send a signed transaction to the client."""
        return self.eth.send_raw_transaction(transaction_rlp)

    def send_raw_transactions(self, transactions_rlp: Sequence[Bytes]) -> List[Hash | Exception]:
        """Send several signed transactions to the client using a single batch."""
        return self.eth.send_raw_transactions(transactions_rlp)

    # Nonces

    def get_last_account_nonce(self, account: Address) -> int:
        """Return the last nonce used by `account`, if still valid at the current head."""
        return self.nonces.get_last_account_nonce(account)

    def get_next_account_nonce(self, account: Address) -> int:
        """Return the nonce to use for the next transaction of `account`."""
        return self.nonces.get_next_account_nonce(account)

    def update_nonce(self, account: Address, new_nonce: int) -> None:
        """Record `new_nonce` as the last nonce used by `account`."""
        self.nonces.update_nonce(account, new_nonce)
