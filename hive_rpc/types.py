"""Types used in the RPC module for `eth` and `engine` namespaces' requests."""

from enum import Enum, IntEnum
from hashlib import sha256
from typing import Annotated, Any, Dict, List

from pydantic import Field, model_validator

from hive_base_types import (
    Address,
    Bloom,
    Bytes,
    CamelModel,
    Hash,
    HexNumber,
    PayloadID,
)


class EngineAPIErrorCode(IntEnum):
    """JSON-RPC error codes returned by Engine API servers."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_ERROR = -32000
    UNKNOWN_PAYLOAD = -38001
    INVALID_FORKCHOICE_STATE = -38002
    INVALID_PAYLOAD_ATTRIBUTES = -38003
    TOO_LARGE_REQUEST = -38004
    UNSUPPORTED_FORK = -38005


class ForkchoiceState(CamelModel):
    """Represents the forkchoice state of the beacon chain."""

    head_block_hash: Hash = Field(Hash(0))
    safe_block_hash: Hash = Field(Hash(0))
    finalized_block_hash: Hash = Field(Hash(0))


class PayloadStatusEnum(str, Enum):
    """Represents the status of a payload after execution."""

    VALID = "VALID"
    INVALID = "INVALID"
    SYNCING = "SYNCING"
    ACCEPTED = "ACCEPTED"
    INVALID_BLOCK_HASH = "INVALID_BLOCK_HASH"


class PayloadStatus(CamelModel):
    """Represents the status of a payload after execution."""

    status: PayloadStatusEnum
    latest_valid_hash: Hash | None = None
    validation_error: str | None = None


class ForkchoiceUpdateResponse(CamelModel):
    """Represents the response of a forkchoice update."""

    payload_status: PayloadStatus
    payload_id: PayloadID | None = None


class Withdrawal(CamelModel):
    """Withdrawal included in payload attributes, payloads and bodies."""

    index: HexNumber
    validator_index: HexNumber
    address: Address
    amount: HexNumber


class PayloadAttributes(CamelModel):
    """Represents the attributes of a payload."""

    timestamp: HexNumber
    prev_randao: Hash
    suggested_fee_recipient: Address
    withdrawals: List[Withdrawal] | None = None
    parent_beacon_block_root: Hash | None = None


class ExecutionPayload(CamelModel):
    """Executable data exchanged through `engine_getPayloadVX` and `engine_newPayloadVX`."""

    parent_hash: Hash
    fee_recipient: Address
    state_root: Hash
    receipts_root: Hash
    logs_bloom: Bloom
    prev_randao: Hash

    number: HexNumber = Field(..., alias="blockNumber")
    gas_limit: HexNumber
    gas_used: HexNumber
    timestamp: HexNumber
    extra_data: Bytes
    base_fee_per_gas: HexNumber

    block_hash: Hash

    transactions: List[Bytes]
    withdrawals: List[Withdrawal] | None = None
    blob_gas_used: HexNumber | None = None
    excess_blob_gas: HexNumber | None = None


class BlobsBundle(CamelModel):
    """Represents the bundle of blobs."""

    commitments: List[Bytes]
    proofs: List[Bytes]
    blobs: List[Bytes]

    def blob_versioned_hashes(self, versioned_hash_version: int = 1) -> List[Hash]:
        """Return versioned hashes of the blobs."""
        return [
            Hash(bytes([versioned_hash_version]) + sha256(commitment).digest()[1:])
            for commitment in self.commitments
        ]


class GetPayloadResponse(CamelModel):
    """
    Represents the response of a get payload request.

    Only envelope responses (version 2 onwards) carry the block value, the blobs bundle
    and the builder override flag; they are `None` for a version 1 response.
    """

    execution_payload: ExecutionPayload
    block_value: HexNumber | None = None
    blobs_bundle: BlobsBundle | None = None
    should_override_builder: bool | None = None

    @classmethod
    def from_bare_payload(cls, data: Any) -> "GetPayloadResponse":
        """Wrap a version 1 response, which is the execution payload itself."""
        return cls(execution_payload=ExecutionPayload.model_validate(data))


class ExecutionPayloadBody(CamelModel):
    """Body of a payload returned by `engine_getPayloadBodiesByXV1`."""

    transactions: List[Bytes]
    withdrawals: List[Withdrawal] | None = None


class TransitionConfiguration(CamelModel):
    """Configuration exchanged through `engine_exchangeTransitionConfigurationV1`."""

    terminal_total_difficulty: HexNumber
    terminal_block_hash: Hash
    terminal_block_number: HexNumber


class BlockHeader(CamelModel):
    """Header fields of a block returned by `eth_getBlockByHash`/`eth_getBlockByNumber`."""

    hash: Hash
    parent_hash: Hash
    sha3_uncles: Hash
    fee_recipient: Address = Field(..., alias="miner")
    state_root: Hash
    transactions_root: Hash
    receipts_root: Hash
    logs_bloom: Bloom
    difficulty: HexNumber
    number: HexNumber
    gas_limit: HexNumber
    gas_used: HexNumber
    timestamp: HexNumber
    extra_data: Bytes
    mix_hash: Hash
    nonce: Bytes
    base_fee_per_gas: HexNumber | None = None
    withdrawals_root: Hash | None = None
    blob_gas_used: HexNumber | None = None
    excess_blob_gas: HexNumber | None = None
    parent_beacon_block_root: Hash | None = None


TransactionOrHash = Annotated[Dict[str, Any] | Hash, Field(union_mode="left_to_right")]


class Block(CamelModel):
    """
    Block returned by `eth_getBlockByHash`/`eth_getBlockByNumber`.

    The header and the body are decoded from the same response document, so the block
    hash always belongs to the returned block.
    """

    header: BlockHeader
    transactions: List[TransactionOrHash] = Field(default_factory=list)
    uncles: List[Hash] = Field(default_factory=list)
    withdrawals: List[Withdrawal] | None = None

    @model_validator(mode="before")
    @classmethod
    def split_header(cls, data: Any) -> Any:
        """Decode the flat JSON-RPC block document as a header plus body fields."""
        if isinstance(data, dict) and "header" not in data:
            return {
                "header": data,
                "transactions": data.get("transactions", []),
                "uncles": data.get("uncles", []),
                "withdrawals": data.get("withdrawals"),
            }
        return data

    @property
    def hash(self) -> Hash:
        """Return the block hash."""
        return self.header.hash

    @property
    def parent_hash(self) -> Hash:
        """Return the parent block hash."""
        return self.header.parent_hash

    @property
    def number(self) -> HexNumber:
        """Return the block number."""
        return self.header.number

    def transaction_hashes(self) -> List[Hash]:
        """Return the hashes of the transactions regardless of how they were requested."""
        return [
            Hash(tx["hash"]) if isinstance(tx, dict) else tx for tx in self.transactions
        ]


class TotalDifficulty(CamelModel):
    """Holder of the total difficulty field some clients add to block documents."""

    total_difficulty: HexNumber


class TotalDifficultyHeader(CamelModel):
    """
    Block header enriched with its total difficulty.

    The same block document is decoded independently as a header and as a total
    difficulty holder; a missing `totalDifficulty` fails decoding.
    """

    header: BlockHeader
    td: TotalDifficulty

    @model_validator(mode="before")
    @classmethod
    def decode_twice(cls, data: Any) -> Any:
        """Feed the same document to both fields."""
        if isinstance(data, dict) and "header" not in data:
            return {"header": data, "td": data}
        return data

    @property
    def total_difficulty(self) -> HexNumber:
        """Return the total difficulty of the block."""
        return self.td.total_difficulty
