"""Cancun fork configuration of a genesis document."""

from hive_base_types import Address, HexNumber
from pytest_plugins.logging import get_logger

from .constants import (
    BEACON_ROOTS_ADDRESS,
    BEACON_ROOTS_CODE,
    DATAHASH_ADDRESS_COUNT,
    DATAHASH_CODE,
    DATAHASH_START_ADDRESS,
)
from .exceptions import GenesisConfigurationError, ReusedAddressError
from .types import Genesis, GenesisAccount

logger = get_logger(__name__)


def configure_genesis(genesis: Genesis, fork_timestamp: int) -> None:
    """
    Schedule Cancun at `fork_timestamp` and pre-deploy the beacon block root contract.

    Shanghai must be scheduled at or before `fork_timestamp`; otherwise
    `GenesisConfigurationError` is raised and the genesis is left untouched. When the
    genesis block itself is a Cancun block, the blob gas fields of the header are
    initialized to zero unless already set.
    """
    shanghai_time = genesis.config.shanghai_time
    if shanghai_time is None:
        raise GenesisConfigurationError("cancun fork requires shanghai fork")
    if shanghai_time > fork_timestamp:
        raise GenesisConfigurationError(
            f"cancun fork ({fork_timestamp}) must be after shanghai fork ({shanghai_time})"
        )

    genesis.config.cancun_time = fork_timestamp
    if genesis.timestamp >= fork_timestamp:
        if genesis.blob_gas_used is None:
            genesis.blob_gas_used = HexNumber(0)
        if genesis.excess_blob_gas is None:
            genesis.excess_blob_gas = HexNumber(0)

    genesis.alloc[BEACON_ROOTS_ADDRESS] = GenesisAccount(
        balance=HexNumber(0),
        nonce=HexNumber(1),
        code=BEACON_ROOTS_CODE,
    )
    logger.verbose(f"cancun scheduled at {fork_timestamp}")


def configure_test_accounts(genesis: Genesis) -> None:
    """
    Pre-deploy the accounts that store the blob versioned hashes of the calling transaction.

    `DATAHASH_ADDRESS_COUNT` consecutive addresses starting at `DATAHASH_START_ADDRESS`
    are allocated. An address that is already allocated raises `ReusedAddressError`.
    """
    addresses = [
        Address(DATAHASH_START_ADDRESS + i) for i in range(DATAHASH_ADDRESS_COUNT)
    ]
    for address in addresses:
        if address in genesis.alloc:
            raise ReusedAddressError(address, "cancun")
    for address in addresses:
        genesis.alloc[address] = GenesisAccount(code=DATAHASH_CODE, balance=HexNumber(1))
    logger.verbose(f"allocated {len(addresses)} blob hash test accounts")
