"""
잔고 변경 집계 테이블

주소 → 자산 타입 → 누적 변화량(int).
파서가 변경하는 결과 저장소이며 생명주기는 호출자가 소유.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class IBalanceStore(Protocol):
    """잔고 누적 저장소 인터페이스

    메모리 테이블 외에 영속 저장소로 교체 가능.
    add는 가산만 수행 (덮어쓰기 금지).
    """

    def add(self, address: str, coin_type: str, delta: int) -> None:
        """(address, coin_type) 누적값에 delta 가산"""
        ...


class BalanceTable:
    """메모리 내 잔고 변경 테이블

    처음 보는 (address, coin_type) 쌍은 0에서 시작.
    덧셈은 교환/결합 법칙이 성립하므로 분할 집계 후 merge 가능.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, int]] = {}

    def add(self, address: str, coin_type: str, delta: int) -> None:
        coins = self._data.setdefault(address, {})
        coins[coin_type] = coins.get(coin_type, 0) + delta

    def get(self, address: str, coin_type: str) -> int:
        """누적값 조회 (없으면 0)"""
        return self._data.get(address, {}).get(coin_type, 0)

    def addresses(self) -> list[str]:
        return list(self._data)

    def items(self) -> Iterator[tuple[str, str, int]]:
        """(address, coin_type, total) 순회"""
        for address, coins in self._data.items():
            for coin_type, total in coins.items():
                yield address, coin_type, total

    def merge(self, other: "BalanceTable") -> None:
        """다른 테이블의 누적값을 가산 병합"""
        for address, coin_type, total in other.items():
            self.add(address, coin_type, total)

    def to_dict(self) -> dict[str, dict[str, int]]:
        """중첩 dict 사본 반환 (직렬화/영속화용)"""
        return {address: dict(coins) for address, coins in self._data.items()}

    def __getitem__(self, address: str) -> dict[str, int]:
        return dict(self._data[address])

    def __contains__(self, address: object) -> bool:
        return address in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BalanceTable):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"BalanceTable({self._data!r})"
