"""
Supported Engine API methods and versions.

Every wire method the client can dispatch is listed explicitly, together with the
positional parameters it takes and the shape of its response. Requesting a version
that is not listed fails before any state is recorded or any request is sent.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

from .exceptions import UnsupportedVersionError


class MethodFamily(str, Enum):
    """Engine API method families, named after the wire method without its version."""

    FORKCHOICE_UPDATED = "forkchoiceUpdated"
    GET_PAYLOAD = "getPayload"
    NEW_PAYLOAD = "newPayload"
    EXCHANGE_CAPABILITIES = "exchangeCapabilities"
    GET_PAYLOAD_BODIES_BY_RANGE = "getPayloadBodiesByRange"
    GET_PAYLOAD_BODIES_BY_HASH = "getPayloadBodiesByHash"
    GET_BLOBS_BUNDLE = "getBlobsBundle"
    EXCHANGE_TRANSITION_CONFIGURATION = "exchangeTransitionConfiguration"


class ResponseShape(Enum):
    """How the result of a method is decoded."""

    VALUE = "value"
    """The result is decoded directly into the method's response type."""

    PAYLOAD = "payload"
    """The result is a bare execution payload, without block value or blobs."""

    ENVELOPE = "envelope"
    """The result is an envelope wrapping the execution payload and auxiliary fields."""


@dataclass(frozen=True)
class MethodDescriptor:
    """Fixed wire description of a single versioned Engine API method."""

    family: MethodFamily
    version: int
    method: str
    params: Tuple[str, ...]
    response: ResponseShape = ResponseShape.VALUE
    authenticated: bool = True

    @property
    def arity(self) -> int:
        """Return the number of positional parameters sent on the wire."""
        return len(self.params)


def _descriptors(*descriptors: MethodDescriptor) -> Mapping[int, MethodDescriptor]:
    return MappingProxyType({d.version: d for d in descriptors})


ENGINE_METHODS: Mapping[MethodFamily, Mapping[int, MethodDescriptor]] = MappingProxyType(
    {
        MethodFamily.FORKCHOICE_UPDATED: _descriptors(
            *(
                MethodDescriptor(
                    MethodFamily.FORKCHOICE_UPDATED,
                    version,
                    f"forkchoiceUpdatedV{version}",
                    ("forkchoiceState", "payloadAttributes"),
                )
                for version in (1, 2, 3)
            )
        ),
        MethodFamily.GET_PAYLOAD: _descriptors(
            MethodDescriptor(
                MethodFamily.GET_PAYLOAD,
                1,
                "getPayloadV1",
                ("payloadId",),
                ResponseShape.PAYLOAD,
            ),
            MethodDescriptor(
                MethodFamily.GET_PAYLOAD,
                2,
                "getPayloadV2",
                ("payloadId",),
                ResponseShape.ENVELOPE,
            ),
            MethodDescriptor(
                MethodFamily.GET_PAYLOAD,
                3,
                "getPayloadV3",
                ("payloadId",),
                ResponseShape.ENVELOPE,
            ),
        ),
        MethodFamily.NEW_PAYLOAD: _descriptors(
            MethodDescriptor(MethodFamily.NEW_PAYLOAD, 1, "newPayloadV1", ("executionPayload",)),
            MethodDescriptor(MethodFamily.NEW_PAYLOAD, 2, "newPayloadV2", ("executionPayload",)),
            MethodDescriptor(
                MethodFamily.NEW_PAYLOAD,
                3,
                "newPayloadV3",
                ("executionPayload", "expectedBlobVersionedHashes", "parentBeaconBlockRoot"),
            ),
        ),
        MethodFamily.EXCHANGE_CAPABILITIES: _descriptors(
            MethodDescriptor(
                MethodFamily.EXCHANGE_CAPABILITIES,
                1,
                "exchangeCapabilities",
                ("consensusClientMethods",),
            ),
        ),
        MethodFamily.GET_PAYLOAD_BODIES_BY_RANGE: _descriptors(
            MethodDescriptor(
                MethodFamily.GET_PAYLOAD_BODIES_BY_RANGE,
                1,
                "getPayloadBodiesByRangeV1",
                ("start", "count"),
            ),
        ),
        MethodFamily.GET_PAYLOAD_BODIES_BY_HASH: _descriptors(
            MethodDescriptor(
                MethodFamily.GET_PAYLOAD_BODIES_BY_HASH,
                1,
                "getPayloadBodiesByHashV1",
                ("blockHashes",),
            ),
        ),
        MethodFamily.GET_BLOBS_BUNDLE: _descriptors(
            MethodDescriptor(
                MethodFamily.GET_BLOBS_BUNDLE,
                1,
                "getBlobsBundleV1",
                ("payloadId",),
            ),
        ),
        MethodFamily.EXCHANGE_TRANSITION_CONFIGURATION: _descriptors(
            MethodDescriptor(
                MethodFamily.EXCHANGE_TRANSITION_CONFIGURATION,
                1,
                "exchangeTransitionConfigurationV1",
                ("transitionConfiguration",),
                authenticated=False,
            ),
        ),
    }
)


def supported_versions(family: MethodFamily) -> Tuple[int, ...]:
    """Return the supported versions of a method family in ascending order."""
    return tuple(sorted(ENGINE_METHODS[family]))


def engine_method(family: MethodFamily, version: int = 1) -> MethodDescriptor:
    """Return the descriptor for `family` at `version`, rejecting unsupported versions."""
    if type(version) is not int or version not in ENGINE_METHODS[family]:
        raise UnsupportedVersionError(family.value, version, supported_versions(family))
    return ENGINE_METHODS[family][version]
