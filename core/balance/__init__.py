"""
체크포인트 잔고 변경 집계

트랜잭션의 balanceChanges를 주소/자산 타입별 누적 변화량으로 집계.

사용 예시:
```python
from core.balance import BalanceTable, BalanceChangeParser

table = BalanceTable()
parser = BalanceChangeParser()
for tx in transactions:
    parser.apply(tx, table)

table.get("0xA", "0x2::sui::SUI")
```
"""

from core.balance.parser import (
    BalanceChangeParser,
    MalformedAmountError,
    ParseReport,
    parse_signed_amount,
)
from core.balance.table import BalanceTable, IBalanceStore
from core.balance.types import (
    AddressOwner,
    BalanceChange,
    ChangeOwner,
    Immutable,
    ObjectOwner,
    TransactionBalanceChanges,
)

__all__ = [
    # 핵심 클래스
    "BalanceChangeParser",
    "BalanceTable",
    "IBalanceStore",
    "ParseReport",
    # 타입
    "AddressOwner",
    "ObjectOwner",
    "Immutable",
    "ChangeOwner",
    "BalanceChange",
    "TransactionBalanceChanges",
    # 함수/에러
    "parse_signed_amount",
    "MalformedAmountError",
]
