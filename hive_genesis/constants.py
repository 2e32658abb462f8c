"""Addresses and bytecode pre-deployed in Cancun test networks."""

from hive_base_types import Address, Bytes

BEACON_ROOTS_ADDRESS = Address("0x000F3df6D732807Ef1319fB7B8bB8522d0Beac02")
"""Address of the EIP-4788 beacon block root contract."""

BEACON_ROOTS_CODE = Bytes(
    "0x3373fffffffffffffffffffffffffffffffffffffffe14604d57602036146024575f5ffd5b5f3580156049"
    "5762001fff810690815414603c575f5ffd5b62001fff01545f5260205ff35b5f5ffd5b62001fff42064281"
    "555f359062001fff015500"
)

DATAHASH_START_ADDRESS = 0x20000
DATAHASH_ADDRESS_COUNT = 1000

# Stores BLOBHASH(i) at slot i for the first four blobs of the transaction
DATAHASH_CODE = Bytes(
    bytes(
        [
            0x5F,  # PUSH0
            0x80,  # DUP1
            0x49,  # BLOBHASH
            0x55,  # SSTORE
            0x60,  # PUSH1(0x01)
            0x01,
            0x80,  # DUP1
            0x49,  # BLOBHASH
            0x55,  # SSTORE
            0x60,  # PUSH1(0x02)
            0x02,
            0x80,  # DUP1
            0x49,  # BLOBHASH
            0x55,  # SSTORE
            0x60,  # PUSH1(0x03)
            0x03,
            0x80,  # DUP1
            0x49,  # BLOBHASH
            0x55,  # SSTORE
        ]
    )
)
