"""Exceptions raised by the Engine API test client."""

from typing import Any

from hive_base_types import Address, Bytes


class JSONRPCError(Exception):
    """Model to parse a JSON RPC error response."""

    code: int
    message: str
    data: Any

    def __init__(self, code: int | str, message: str = "", data: Any = None, **kwargs):
        """Initialize the JSONRPCError."""
        super().__init__(code, message)
        self.code = int(code)
        self.message = message
        self.data = data

    def __str__(self) -> str:
        """Return string representation of the JSONRPCError."""
        if self.data is not None:
            return f"JSONRPCError(code={self.code}, message={self.message}, data={self.data})"
        return f"JSONRPCError(code={self.code}, message={self.message})"


class TokenSigningError(Exception):
    """Raised when an authentication token cannot be minted; the call is never dispatched."""

    pass


class UnsupportedVersionError(ValueError):
    """Raised when an Engine API method is requested with a version that is not supported."""

    def __init__(self, family: str, version: int, supported: tuple[int, ...]):
        """Initialize the error with the requested and supported versions."""
        super().__init__(
            f"unsupported version {version} for engine_{family}, "
            f"supported versions: {', '.join(str(v) for v in supported)}"
        )
        self.family = family
        self.version = version
        self.supported = supported


class NoKnownNonceError(Exception):
    """Raised when there is no nonce cached for an account that is valid at the current head."""

    def __init__(self, account: Address):
        """Initialize the error with the account that has no known nonce."""
        super().__init__(f"no previous nonce for account {account}")
        self.account = account


class BlockNotFoundError(Exception):
    """Raised when the client returns `null` for a requested block."""

    def __init__(self, block: str):
        """Initialize the error with the requested block identifier."""
        super().__init__(f"block {block} not found")
        self.block = block


class LivenessTimeoutError(TimeoutError):
    """Raised when the client ports do not accept connections before the deadline."""

    def __init__(self, host: str, port: int, timeout: float):
        """Initialize the error with the port that never opened."""
        super().__init__(f"port {host}:{port} did not open after {timeout} seconds")
        self.host = host
        self.port = port
        self.timeout = timeout


class SendTransactionExceptionError(Exception):
    """Represent an exception that is raised when a transaction fails to be sent."""

    tx_rlp: Bytes | None = None

    def __init__(self, *args, tx_rlp: Bytes | None = None):
        """Initialize SendTransactionExceptionError class with the given transaction."""
        super().__init__(*args)
        self.tx_rlp = tx_rlp

    def __str__(self):
        """Return string representation of the exception."""
        if self.tx_rlp is not None:
            return f"{super().__str__()} Transaction RLP={self.tx_rlp.hex()}"
        return super().__str__()
