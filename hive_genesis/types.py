"""Genesis document models consumed by the client under test."""

import json
from pathlib import Path
from typing import Dict

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from hive_base_types import Address, Bytes, Hash, HexNumber, HiveBaseModel


class GenesisModel(HiveBaseModel):
    """
    Base of the genesis models.

    Genesis documents are edited in place while a test network is configured, so unlike
    the RPC models these are mutable and validated on assignment.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class ChainConfig(GenesisModel):
    """
    Chain configuration section of a genesis document.

    Only the fields the Engine API tests configure are modelled; every other fork
    setting is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    chain_id: int = 1
    terminal_total_difficulty: int | None = None
    shanghai_time: int | None = None
    cancun_time: int | None = None


class GenesisAccount(GenesisModel):
    """Account pre-allocated in the genesis state."""

    balance: HexNumber = HexNumber(0)
    nonce: HexNumber | None = None
    code: Bytes | None = None
    storage: Dict[Hash, Hash] | None = None


class Genesis(GenesisModel):
    """Genesis document of a test network."""

    model_config = ConfigDict(extra="allow")

    config: ChainConfig = Field(default_factory=ChainConfig)
    nonce: HexNumber = HexNumber(0)
    timestamp: HexNumber = HexNumber(0)
    extra_data: Bytes = Bytes(b"")
    gas_limit: HexNumber = HexNumber(30_000_000)
    difficulty: HexNumber = HexNumber(0)
    mix_hash: Hash = Hash(0)
    coinbase: Address = Address(0)
    alloc: Dict[Address, GenesisAccount] = Field(default_factory=dict)
    base_fee_per_gas: HexNumber | None = None
    blob_gas_used: HexNumber | None = None
    excess_blob_gas: HexNumber | None = None

    @classmethod
    def from_file(cls, path: Path | str) -> "Genesis":
        """Load a genesis document from a JSON file."""
        with Path(path).open("r") as file:
            return cls.model_validate(json.load(file))

    def to_json(self) -> Dict:
        """Return the genesis document as it is written for the client."""
        return self.serialize(mode="json", by_alias=True)
