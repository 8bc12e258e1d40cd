"""
어댑터 공통 데이터 모델

Full Node JSON-RPC 응답을 표준화한 도메인 모델.
모든 수량은 기본 단위(MIST 등) int 사용.
"""

from dataclasses import dataclass, field

from core.balance.types import BalanceChange
from core.types import ExecutionStatus


@dataclass(frozen=True)
class Coin:
    """코인 오브젝트

    Attributes:
        coin_id: 코인 오브젝트 ID
        coin_type: 자산 타입 (예: 0x2::sui::SUI)
        balance: 잔고 (기본 단위)
        version: 오브젝트 버전
        digest: 오브젝트 digest
    """

    coin_id: str
    coin_type: str
    balance: int
    version: str | None = None
    digest: str | None = None


@dataclass(frozen=True)
class Checkpoint:
    """체크포인트

    Sui에서 체크포인트 ID는 시퀀스 번호와 같다.

    Attributes:
        sequence_number: 체크포인트 시퀀스 번호
        transaction_digests: 포함된 트랜잭션 digest (순서 유지)
    """

    sequence_number: int
    transaction_digests: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecutionResult:
    """트랜잭션 실행 결과

    실패 사유(잔고 부족 등)는 원장이 보고한 문자열 그대로 보존.

    Attributes:
        digest: 트랜잭션 digest
        status: success / failure
        error: 실패 사유 (성공이면 None)
        balance_changes: 적용된 잔고 변경 (성공 시)
    """

    digest: str
    status: str
    error: str | None = None
    balance_changes: tuple[BalanceChange, ...] = field(default_factory=tuple)

    @property
    def is_success(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS.value
