"""Error taxonomy for Merkle root and path construction.

All errors are input-validation failures: they are raised before any
partial result is produced and retrying with the same input is pointless.
"""


class MerkleTreeError(Exception):
    """Base class for errors raised while building a Merkle root or path."""


class EmptyTreeError(MerkleTreeError, ValueError):
    """Raised when the leaf sequence is empty."""

    def __init__(self, message: str = "cannot build a Merkle tree from an empty leaf sequence"):
        super().__init__(message)


class InvalidLeafError(MerkleTreeError, ValueError):
    """Raised when the record a path is requested for is empty."""

    def __init__(self, message: str = "cannot build a Merkle path for an empty leaf"):
        super().__init__(message)
