"""Block containers and their list types."""

from .block import Block, BlockBody, BlockHeader
from .types import Attestations, Deposits

__all__ = [
    "Attestations",
    "Block",
    "BlockBody",
    "BlockHeader",
    "Deposits",
]
