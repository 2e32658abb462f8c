"""Exceptions raised while configuring a genesis document."""

from hive_base_types import Address


class GenesisConfigurationError(Exception):
    """Raised when the fork schedule of a genesis document cannot be configured."""

    pass


class ReusedAddressError(GenesisConfigurationError):
    """Raised when a test account would overwrite an account already in the genesis alloc."""

    def __init__(self, address: Address, fork: str):
        """Initialize the error with the address that is already allocated."""
        super().__init__(f"reused address {address} during genesis configuration for {fork}")
        self.address = address
        self.fork = fork
