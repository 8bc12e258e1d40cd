"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from collections.abc import Sequence
from typing import Protocol, TYPE_CHECKING, runtime_checkable

from core.types import ExecutionMode

if TYPE_CHECKING:
    from adapters.models import Coin, ExecutionResult
    from core.balance.types import TransactionBalanceChanges


@runtime_checkable
class ICheckpointFetcher(Protocol):
    """체크포인트 조회 인터페이스

    구현체는 노드의 요청당 응답 크기 제한을 내부에서 분할 처리할 수 있음.
    재시도/속도 제한은 구현체 책임.
    """

    async def get_latest_checkpoint_id(self) -> int:
        """최신 체크포인트 시퀀스 번호"""
        ...

    async def get_checkpoint_transactions(
        self,
        checkpoint_id: int,
    ) -> list["TransactionBalanceChanges"]:
        """체크포인트의 트랜잭션 목록 (balanceChanges 포함)

        Args:
            checkpoint_id: 체크포인트 시퀀스 번호

        Returns:
            체크포인트 내 순서를 유지한 트랜잭션 목록
        """
        ...


@runtime_checkable
class ICoinInventory(Protocol):
    """코인 목록 조회 인터페이스"""

    async def get_coins(self, owner: str, coin_type: str) -> list["Coin"]:
        """소유 코인 목록 조회

        Args:
            owner: 소유자 주소
            coin_type: 자산 타입

        Returns:
            노드가 반환한 순서의 코인 목록
        """
        ...


@runtime_checkable
class ISigner(Protocol):
    """트랜잭션 서명자 인터페이스"""

    @property
    def address(self) -> str:
        """서명자 주소"""
        ...

    def sign(self, payload: bytes) -> str:
        """페이로드 서명

        Args:
            payload: 미서명 트랜잭션 바이트

        Returns:
            직렬화된 서명 (base64)
        """
        ...


@runtime_checkable
class ISubmitter(Protocol):
    """트랜잭션 제출 인터페이스"""

    async def execute(
        self,
        payload: bytes,
        signatures: Sequence[str],
        mode: ExecutionMode = ExecutionMode.WAIT_FOR_LOCAL_EXECUTION,
    ) -> "ExecutionResult":
        """서명된 트랜잭션 제출

        Args:
            payload: 미서명 트랜잭션 바이트 (서명 대상과 동일)
            signatures: 송신자/스폰서 서명 (함께 전달)
            mode: 실행 대기 방식

        Returns:
            실행 결과 (원장측 실패도 예외가 아닌 결과로 반환)
        """
        ...
