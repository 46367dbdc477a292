"""Resolution - contact between players."""

from .blocking import BlockOutcome, BlockResolver, BlockResult
from .tackle import TackleOutcome, TackleResolver, TackleResult, WrapStatus

__all__ = [
    "BlockOutcome",
    "BlockResolver",
    "BlockResult",
    "TackleOutcome",
    "TackleResolver",
    "TackleResult",
    "WrapStatus",
]
