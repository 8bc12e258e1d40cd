"""
스폰서 이체 조립

송신자 코인 선택/병합/분할 후 수신자에게 이전하고,
가스는 스폰서가 지불하는 미서명 트랜잭션 페이로드 생성.

사용 예시:
```python
from core.transfer import TransferAssembler, TransferRequest

payload = TransferAssembler().assemble(
    TransferRequest(
        sender=sender_address,
        coin_ids=("0xc1", "0xc2"),
        sponsor=sponsor_address,
        recipient=recipient_address,
        amount="1_000_000_000",  # 1 SUI = 10^9 MIST
    )
)
tx_bytes = payload.to_bytes()
```
"""

from core.transfer.assembler import (
    MergeCoins,
    ObjectArg,
    Operation,
    ResultArg,
    SetGasOwner,
    SetSender,
    SplitCoins,
    TransferAssembler,
    TransferObjects,
    TransferRequest,
    UnsignedTransactionPayload,
    build_transfer,
    parse_transfer_amount,
)
from core.transfer.coin_selector import CoinSelection, CoinSelector
from core.transfer.errors import EmptyCoinSetError, InvalidAmountError, TransferError

__all__ = [
    # 핵심 클래스
    "CoinSelector",
    "CoinSelection",
    "TransferAssembler",
    "TransferRequest",
    "UnsignedTransactionPayload",
    # 연산
    "Operation",
    "MergeCoins",
    "SplitCoins",
    "TransferObjects",
    "SetSender",
    "SetGasOwner",
    "ObjectArg",
    "ResultArg",
    # 함수
    "build_transfer",
    "parse_transfer_amount",
    # 에러
    "TransferError",
    "EmptyCoinSetError",
    "InvalidAmountError",
]
