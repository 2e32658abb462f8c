"""
Per-account nonce tracking against a moving chain head.

A cached nonce is only trusted while the block it was recorded at is the current head
or the parent of the current head. Anything older is treated as unknown and, when a
new nonce is needed, re-fetched from the client.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass, replace
from threading import RLock
from typing import Dict

from hive_base_types import Address, Hash
from pytest_plugins.logging import get_logger

from .exceptions import NoKnownNonceError
from .rpc import EthRPC
from .types import BlockHeader

logger = get_logger(__name__)


@dataclass
class AccountTransactionInfo:
    """Nonce last observed or assigned for an account, and the head it was recorded at."""

    previous_block_hash: Hash
    previous_nonce: int

    def valid_at(self, head: BlockHeader) -> bool:
        """Return whether the cached nonce can still be used with `head` as the chain head."""
        return self.previous_block_hash in (head.hash, head.parent_hash)


class NonceTracker:
    """
    Tracks the nonces of the accounts sending transactions to one client.

    Every operation holds the lock from the head query to the cache update, so two
    callers advancing the same account never receive the same nonce.
    """

    def __init__(self, eth: EthRPC, lock: AbstractContextManager | None = None):
        """Initialize the tracker on top of the client's `eth` connection."""
        self.eth = eth
        self.lock = lock if lock is not None else RLock()
        self.accounts: Dict[Address, AccountTransactionInfo] = {}

    def account_info(self, account: Address) -> AccountTransactionInfo | None:
        """Return a copy of the cached information for `account`, if any."""
        with self.lock:
            info = self.accounts.get(Address(account))
            return replace(info) if info is not None else None

    def get_last_account_nonce(self, account: Address) -> int:
        """
        Return the nonce last used by `account`.

        Raises `NoKnownNonceError` if there is no cached nonce valid at the current head.
        The client is never asked for the nonce.
        """
        account = Address(account)
        with self.lock:
            head = self.eth.header_by_number(None)
            info = self.accounts.get(account)
            if info is not None and info.valid_at(head):
                return info.previous_nonce
        raise NoKnownNonceError(account)

    def get_next_account_nonce(self, account: Address) -> int:
        """
        Return the nonce to use for the next transaction sent by `account`.

        The cached nonce is incremented while it is valid at the current head; otherwise
        the nonce is requested from the client at the current head.
        """
        account = Address(account)
        with self.lock:
            head = self.eth.header_by_number(None)
            info = self.accounts.get(account)
            if info is not None and info.valid_at(head):
                info.previous_block_hash = head.hash
                info.previous_nonce += 1
                return info.previous_nonce

            logger.debug(
                f"no valid nonce cached for {account} at head {head.hash} "
                f"(block {int(head.number)}), requesting it from the client"
            )
            nonce = self.eth.get_transaction_count(account, int(head.number))
            self.accounts[account] = AccountTransactionInfo(
                previous_block_hash=head.hash,
                previous_nonce=nonce,
            )
            return nonce

    def update_nonce(self, account: Address, new_nonce: int) -> None:
        """Record `new_nonce` as the last nonce used by `account` at the current head."""
        account = Address(account)
        with self.lock:
            head = self.eth.header_by_number(None)
            self.accounts[account] = AccountTransactionInfo(
                previous_block_hash=head.hash,
                previous_nonce=new_nonce,
            )
