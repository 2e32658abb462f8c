"""
Genesis construction for Engine API test networks.
"""

from .cancun import configure_genesis, configure_test_accounts
from .constants import (
    BEACON_ROOTS_ADDRESS,
    BEACON_ROOTS_CODE,
    DATAHASH_ADDRESS_COUNT,
    DATAHASH_CODE,
    DATAHASH_START_ADDRESS,
)
from .exceptions import GenesisConfigurationError, ReusedAddressError
from .types import ChainConfig, Genesis, GenesisAccount

__all__ = (
    "BEACON_ROOTS_ADDRESS",
    "BEACON_ROOTS_CODE",
    "DATAHASH_ADDRESS_COUNT",
    "DATAHASH_CODE",
    "DATAHASH_START_ADDRESS",
    "ChainConfig",
    "Genesis",
    "GenesisAccount",
    "GenesisConfigurationError",
    "ReusedAddressError",
    "configure_genesis",
    "configure_test_accounts",
)
