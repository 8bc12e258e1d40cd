"""
어댑터 레이어

외부 서비스(Sui Full Node, 키 서명 등)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    ICheckpointFetcher,
    ICoinInventory,
    ISigner,
    ISubmitter,
)
from adapters.models import (
    Checkpoint,
    Coin,
    ExecutionResult,
)

__all__ = [
    # Interfaces
    "ICheckpointFetcher",
    "ICoinInventory",
    "ISigner",
    "ISubmitter",
    # Models
    "Checkpoint",
    "Coin",
    "ExecutionResult",
]
