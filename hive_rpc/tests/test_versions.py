"""
Test suite for the Engine API method table.
"""

import pytest

from ..exceptions import UnsupportedVersionError
from ..versions import (
    ENGINE_METHODS,
    MethodFamily,
    ResponseShape,
    engine_method,
    supported_versions,
)


@pytest.mark.parametrize(
    "family, version, method, arity",
    [
        (MethodFamily.FORKCHOICE_UPDATED, 1, "forkchoiceUpdatedV1", 2),
        (MethodFamily.FORKCHOICE_UPDATED, 3, "forkchoiceUpdatedV3", 2),
        (MethodFamily.GET_PAYLOAD, 1, "getPayloadV1", 1),
        (MethodFamily.GET_PAYLOAD, 3, "getPayloadV3", 1),
        (MethodFamily.NEW_PAYLOAD, 1, "newPayloadV1", 1),
        (MethodFamily.NEW_PAYLOAD, 2, "newPayloadV2", 1),
        (MethodFamily.NEW_PAYLOAD, 3, "newPayloadV3", 3),
        (MethodFamily.EXCHANGE_CAPABILITIES, 1, "exchangeCapabilities", 1),
        (MethodFamily.GET_PAYLOAD_BODIES_BY_RANGE, 1, "getPayloadBodiesByRangeV1", 2),
        (MethodFamily.GET_PAYLOAD_BODIES_BY_HASH, 1, "getPayloadBodiesByHashV1", 1),
        (MethodFamily.GET_BLOBS_BUNDLE, 1, "getBlobsBundleV1", 1),
    ],
)
def test_engine_method(family: MethodFamily, version: int, method: str, arity: int):
    """Each supported version maps to a fixed wire method and parameter count."""
    descriptor = engine_method(family, version)
    assert descriptor.method == method
    assert descriptor.arity == arity
    assert descriptor.authenticated


def test_get_payload_response_shapes():
    """Version 1 returns a bare payload, later versions an envelope."""
    assert engine_method(MethodFamily.GET_PAYLOAD, 1).response is ResponseShape.PAYLOAD
    assert engine_method(MethodFamily.GET_PAYLOAD, 2).response is ResponseShape.ENVELOPE
    assert engine_method(MethodFamily.GET_PAYLOAD, 3).response is ResponseShape.ENVELOPE


def test_transition_configuration_unauthenticated():
    """The legacy transition configuration exchange is the only unauthenticated method."""
    unauthenticated = [
        descriptor.method
        for versions in ENGINE_METHODS.values()
        for descriptor in versions.values()
        if not descriptor.authenticated
    ]
    assert unauthenticated == ["exchangeTransitionConfigurationV1"]


@pytest.mark.parametrize(
    "family, version",
    [
        (MethodFamily.FORKCHOICE_UPDATED, 0),
        (MethodFamily.FORKCHOICE_UPDATED, 4),
        (MethodFamily.NEW_PAYLOAD, 4),
        (MethodFamily.GET_PAYLOAD, -1),
        (MethodFamily.GET_BLOBS_BUNDLE, 2),
        (MethodFamily.GET_PAYLOAD, True),
        (MethodFamily.NEW_PAYLOAD, 3.0),
        (MethodFamily.FORKCHOICE_UPDATED, "2"),
    ],
)
def test_unsupported_version(family: MethodFamily, version: int):
    """Versions outside the table are rejected."""
    with pytest.raises(UnsupportedVersionError) as e:
        engine_method(family, version)
    assert e.value.supported == supported_versions(family)
    assert isinstance(e.value, ValueError)


def test_table_is_read_only():
    """The method table cannot be modified at runtime."""
    with pytest.raises(TypeError):
        ENGINE_METHODS[MethodFamily.NEW_PAYLOAD][4] = engine_method(  # type: ignore
            MethodFamily.NEW_PAYLOAD, 3
        )
