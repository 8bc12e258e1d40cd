"""
잔고 변경 타입 정의

트랜잭션 effects에 첨부되는 balanceChanges 레코드의 도메인 모델.
소유자(owner)는 세 가지 경우만 존재하는 닫힌 합 타입으로 표현.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AddressOwner:
    """주소 소유 (지갑 잔고)"""

    address: str


@dataclass(frozen=True)
class ObjectOwner:
    """다른 오브젝트가 소유 (동적 필드 등, 지갑 잔고 아님)"""

    object_id: str


@dataclass(frozen=True)
class Immutable:
    """불변 오브젝트"""


ChangeOwner = AddressOwner | ObjectOwner | Immutable


@dataclass(frozen=True)
class BalanceChange:
    """잔고 변경 레코드

    Attributes:
        owner: 소유자
        coin_type: 자산 타입 (예: 0x2::sui::SUI)
        amount: 부호 있는 정수 문자열 (예: "-1000", "50")
    """

    owner: ChangeOwner
    coin_type: str
    amount: str


@dataclass(frozen=True)
class TransactionBalanceChanges:
    """트랜잭션 하나의 잔고 변경 목록

    Attributes:
        digest: 트랜잭션 digest
        balance_changes: 잔고 변경 레코드 (None이면 레코드 없음)
        checkpoint: 포함된 체크포인트 번호 (알 수 없으면 None)
    """

    digest: str
    balance_changes: tuple[BalanceChange, ...] | None = None
    checkpoint: int | None = None
