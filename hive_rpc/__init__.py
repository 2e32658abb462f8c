"""
Engine API test client for execution clients started by hive.
"""

from .auth import DEFAULT_JWT_SECRET, JWTAuth, decode_token, get_new_token
from .client import HiveRPCEngineClient
from .exceptions import (
    BlockNotFoundError,
    JSONRPCError,
    LivenessTimeoutError,
    NoKnownNonceError,
    SendTransactionExceptionError,
    TokenSigningError,
    UnsupportedVersionError,
)
from .liveness import check_eth_engine_live
from .nonce import AccountTransactionInfo, NonceTracker
from .rpc import BaseRPC, BatchResult, EngineRPC, EthRPC
from .types import (
    BlobsBundle,
    Block,
    BlockHeader,
    EngineAPIErrorCode,
    ExecutionPayload,
    ExecutionPayloadBody,
    ForkchoiceState,
    ForkchoiceUpdateResponse,
    GetPayloadResponse,
    PayloadAttributes,
    PayloadStatus,
    PayloadStatusEnum,
    TotalDifficultyHeader,
    TransitionConfiguration,
    Withdrawal,
)
from .versions import ENGINE_METHODS, MethodDescriptor, MethodFamily, engine_method

__all__ = (
    "DEFAULT_JWT_SECRET",
    "ENGINE_METHODS",
    "AccountTransactionInfo",
    "BaseRPC",
    "BatchResult",
    "BlobsBundle",
    "Block",
    "BlockHeader",
    "BlockNotFoundError",
    "EngineAPIErrorCode",
    "EngineRPC",
    "EthRPC",
    "ExecutionPayload",
    "ExecutionPayloadBody",
    "ForkchoiceState",
    "ForkchoiceUpdateResponse",
    "GetPayloadResponse",
    "HiveRPCEngineClient",
    "JSONRPCError",
    "JWTAuth",
    "LivenessTimeoutError",
    "MethodDescriptor",
    "MethodFamily",
    "NoKnownNonceError",
    "NonceTracker",
    "PayloadAttributes",
    "PayloadStatus",
    "PayloadStatusEnum",
    "SendTransactionExceptionError",
    "TokenSigningError",
    "TotalDifficultyHeader",
    "TransitionConfiguration",
    "UnsupportedVersionError",
    "Withdrawal",
    "check_eth_engine_live",
    "decode_token",
    "engine_method",
    "get_new_token",
)
