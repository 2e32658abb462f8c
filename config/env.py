"""
A module for exposing the configuration of the client under test.

This module is responsible for loading, parsing, and validating the client
configuration from a YAML file. It uses Pydantic to ensure that the configuration
adheres to expected formats and types.

Classes:
- ClientConfig: Ports, shared secret and timeouts used to reach one client.
- EnvConfig: Loads a ClientConfig from disk.

Usage:
- Initialize an instance of EnvConfig to load the configuration.
- Pass it to `HiveRPCEngineClient.from_config` together with the client's host.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from hive_rpc.auth import DEFAULT_JWT_SECRET

ENV_PATH = Path(__file__).resolve().parent.parent / "env.yaml"


class ClientConfig(BaseModel):
    """
    Represents the configuration used to reach one execution client.

    Attributes:
    - engine_port (int): Port of the authenticated Engine API endpoint.
    - eth_port (int): Port of the `eth` JSON-RPC endpoint.
    - jwt_secret (str): Shared secret, either 0x-prefixed hex or raw text.
    - rpc_timeout (float): Timeout in seconds of every HTTP request.
    - liveness_timeout (float): Deadline in seconds of the startup port probe.
    - liveness_interval (float): Interval in seconds between port probes.
    - terminal_total_difficulty (int | None): Terminal total difficulty of the client.

    """

    engine_port: int = Field(8551, gt=0, lt=65536)
    eth_port: int = Field(8545, gt=0, lt=65536)
    jwt_secret: str = DEFAULT_JWT_SECRET.decode()
    rpc_timeout: float = Field(10.0, gt=0)
    liveness_timeout: float = Field(5.0, gt=0)
    liveness_interval: float = Field(0.1, gt=0)
    terminal_total_difficulty: int | None = None

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, value: str) -> str:
        """Reject empty secrets and malformed hex secrets."""
        if not value:
            raise ValueError("jwt_secret must not be empty")
        if value.startswith("0x"):
            bytes.fromhex(value[2:])
        return value

    def jwt_secret_bytes(self) -> bytes:
        """Return the secret as bytes, decoding it from hex when 0x-prefixed."""
        if self.jwt_secret.startswith("0x"):
            return bytes.fromhex(self.jwt_secret[2:])
        return self.jwt_secret.encode()


class EnvConfig(ClientConfig):
    """
    Loads and validates the client configuration from a YAML file.

    This is a wrapper class for the ClientConfig model. It reads a config file
    from disk into a ClientConfig model and then exposes it.
    """

    def __init__(self, path: Path | str = ENV_PATH):
        """Init for the EnvConfig class."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"The configuration file '{path}' does not exist.")

        with path.open("r") as file:
            config_data = yaml.safe_load(file) or {}
            if not isinstance(config_data, dict):
                raise ValueError(f"Invalid configuration: expected a mapping in '{path}'")
            try:
                super().__init__(**config_data)
            except ValidationError as e:
                raise ValueError(f"Invalid configuration: {e}") from e
