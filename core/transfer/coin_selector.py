"""
코인 선택기

Sui의 모든 코인은 개별 오브젝트이며 각자 잔고를 가짐.
보낼 수량이 단일 코인 잔고보다 크면 먼저 병합해야 하므로,
부분합 최적화 대신 "첫 코인을 Primary로, 나머지가 많으면 전부 병합" 정책 사용.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from core.constants import TransferLimits
from core.transfer.errors import EmptyCoinSetError


@dataclass(frozen=True)
class CoinSelection:
    """코인 선택 결과

    Attributes:
        primary: split 대상 코인 ID
        merge_sources: primary로 병합할 코인 ID (없으면 빈 tuple)
    """

    primary: str
    merge_sources: tuple[str, ...] = ()

    @property
    def has_merge(self) -> bool:
        return len(self.merge_sources) > 0


class CoinSelector:
    """송신자 코인 후보 → 병합 계획

    잔고 충분 여부는 확인하지 않음. 병합된 코인 잔고가 부족하면
    실행 시 split 단계에서 원장이 거부한다.
    최소 병합이 필요한 호출자는 후보 목록을 미리 걸러서 전달해야 함.

    Args:
        merge_threshold: primary 제외 나머지 코인 수가 이 값을 초과하면 병합
    """

    def __init__(self, merge_threshold: int = TransferLimits.MERGE_THRESHOLD):
        self.merge_threshold = merge_threshold

    def select(self, coin_ids: Sequence[str]) -> CoinSelection:
        """코인 선택

        Args:
            coin_ids: 후보 코인 ID (순서 유지, 첫 번째가 primary)

        Returns:
            CoinSelection

        Raises:
            EmptyCoinSetError: 후보가 없는 경우
        """
        if not coin_ids:
            raise EmptyCoinSetError()

        primary, *remaining = coin_ids

        # 나머지가 임계값 이하면 병합 없이 primary만 사용 (외부에 보이는 트랜잭션 형태 유지)
        if len(remaining) > self.merge_threshold:
            return CoinSelection(primary=primary, merge_sources=tuple(remaining))

        return CoinSelection(primary=primary)
