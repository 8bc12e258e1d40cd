"""
잔고 변경 파서

트랜잭션의 balanceChanges 레코드를 주소/자산 타입별 누적 테이블로 접는다.

주의: 단순 송금 트랜잭션에서도 지불자 주소의 변화량이 양수일 수 있음.
스토리지가 해제되면 해당 스토리지에 지불했던 가스의 일부(99%)가
리베이트로 반환되므로, 여러 코인을 병합하면 순 가스 비용이 음수가 된다.
양수 변화량은 이상치가 아니라 (가스 - 리베이트)의 순값으로 취급.
"""

import logging
import re
from dataclasses import dataclass, field

from core.balance.table import IBalanceStore
from core.balance.types import AddressOwner, BalanceChange, TransactionBalanceChanges

logger = logging.getLogger(__name__)


_MAGNITUDE_PATTERN = re.compile(r"[0-9]+")


class MalformedAmountError(ValueError):
    """잔고 변경 수량 파싱 실패

    수량 문자열이 부호 있는 정수가 아닐 때 발생.
    해당 레코드만 건너뛰고 나머지 처리는 계속하는 것이 기본 정책.
    """

    def __init__(self, amount: str, message: str = "Malformed amount"):
        self.amount = amount
        self.message = message
        super().__init__(f"{message}: {amount!r}")


def parse_signed_amount(text: str) -> int:
    """부호 있는 수량 문자열 → int

    선행 '-'는 감소, 부호가 없으면 증가.
    부동소수점을 거치지 않으므로 큰 MIST 값도 정밀도 손실 없음.

    Args:
        text: 수량 문자열 (예: "-1000", "50")

    Returns:
        부호가 적용된 정수

    Raises:
        MalformedAmountError: 부호 제거 후 크기가 음이 아닌 정수 문자열이 아닌 경우
    """
    if not isinstance(text, str):
        raise MalformedAmountError(repr(text), "Amount is not a string")

    is_negative = text.startswith("-")
    magnitude = text[1:] if is_negative else text

    if not _MAGNITUDE_PATTERN.fullmatch(magnitude):
        raise MalformedAmountError(text)

    value = int(magnitude)
    return -value if is_negative else value


@dataclass
class ParseReport:
    """파싱 결과 요약

    Attributes:
        applied: 테이블에 반영된 레코드 수
        ignored: 주소 소유가 아니어서 무시된 레코드 수
        skipped: 파싱 실패로 건너뛴 레코드 (digest, 레코드)
    """

    applied: int = 0
    ignored: int = 0
    skipped: list[tuple[str, BalanceChange]] = field(default_factory=list)

    def merge(self, other: "ParseReport") -> None:
        self.applied += other.applied
        self.ignored += other.ignored
        self.skipped.extend(other.skipped)


class BalanceChangeParser:
    """잔고 변경 레코드 → 누적 테이블

    상태를 갖지 않음. 결과는 호출자가 넘긴 저장소에만 반영.

    Args:
        strict: True면 파싱 실패 시 예외 전파 (패스 전체 중단),
            False면 경고 로그 후 해당 레코드만 건너뜀
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def apply_change(self, change: BalanceChange, store: IBalanceStore) -> bool:
        """레코드 하나를 저장소에 반영

        Returns:
            반영 여부 (주소 소유가 아니면 False)

        Raises:
            MalformedAmountError: 수량 파싱 실패 시 (저장소는 변경되지 않음)
        """
        # 오브젝트가 보유한 잔고는 지갑 잔고가 아니므로 제외
        if not isinstance(change.owner, AddressOwner):
            return False

        delta = parse_signed_amount(change.amount)
        store.add(change.owner.address, change.coin_type, delta)
        return True

    def apply(
        self,
        tx: TransactionBalanceChanges,
        store: IBalanceStore,
        report: ParseReport | None = None,
    ) -> None:
        """트랜잭션 하나의 레코드를 순서대로 반영

        Args:
            tx: 트랜잭션 잔고 변경 목록
            store: 누적 저장소 (in-place 변경)
            report: 결과 요약을 채울 객체 (선택)
        """
        # 잔고 변경이 없는 트랜잭션도 정상
        if not tx.balance_changes:
            return

        for change in tx.balance_changes:
            try:
                applied = self.apply_change(change, store)
            except MalformedAmountError as e:
                if self.strict:
                    raise
                logger.warning(
                    "Malformed balance change skipped",
                    extra={
                        "digest": tx.digest,
                        "coin_type": change.coin_type,
                        "amount": e.amount,
                    },
                )
                if report is not None:
                    report.skipped.append((tx.digest, change))
                continue

            if report is not None:
                if applied:
                    report.applied += 1
                else:
                    report.ignored += 1
