"""
스폰서 이체 트랜잭션 조립기

송신자의 코인에서 정확한 수량을 분할하여 수신자에게 보내고,
가스는 스폰서가 지불하는 미서명 트랜잭션을 생성.

연산 순서 (고정):
    merge (필요 시) → split → transfer → set-sender → set-gas-owner

출력은 입력에만 의존 (난수/시간 없음). 송신자와 스폰서가 각자
동일한 바이트를 재생성하여 검증한 뒤 서명할 수 있어야 함.
"""

import hashlib
import json
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from core.constants import TransferLimits
from core.transfer.coin_selector import CoinSelector
from core.transfer.errors import InvalidAmountError

PAYLOAD_VERSION = 1

# "1_000_000_000" 형식의 자릿수 구분자 허용
_AMOUNT_PATTERN = re.compile(r"[0-9]+(?:_[0-9]+)*")


# =========================================================================
# 인자 참조
# =========================================================================


@dataclass(frozen=True)
class ObjectArg:
    """입력 오브젝트 참조"""

    object_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"Object": self.object_id}


@dataclass(frozen=True)
class ResultArg:
    """앞선 명령 결과 참조 (명령 인덱스)"""

    index: int

    def to_dict(self) -> dict[str, Any]:
        return {"Result": self.index}


Argument = ObjectArg | ResultArg


def argument_from_dict(data: dict[str, Any]) -> Argument:
    if "Object" in data:
        return ObjectArg(data["Object"])
    if "Result" in data:
        return ResultArg(int(data["Result"]))
    raise ValueError(f"Unknown argument: {data!r}")


# =========================================================================
# 연산
# =========================================================================


@dataclass(frozen=True)
class MergeCoins:
    """sources 코인을 destination 코인으로 병합 (잔고 합산, sources 소멸)"""

    destination: Argument
    sources: tuple[Argument, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "MergeCoins",
            "destination": self.destination.to_dict(),
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass(frozen=True)
class SplitCoins:
    """coin에서 amounts만큼 분할하여 새 코인 생성"""

    coin: Argument
    amounts: tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "SplitCoins",
            "coin": self.coin.to_dict(),
            # JSON 숫자 정밀도 문제를 피하기 위해 u64는 문자열로 직렬화
            "amounts": [str(a) for a in self.amounts],
        }


@dataclass(frozen=True)
class TransferObjects:
    """objects 소유권을 recipient로 이전"""

    objects: tuple[Argument, ...]
    recipient: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "TransferObjects",
            "objects": [o.to_dict() for o in self.objects],
            "recipient": self.recipient,
        }


@dataclass(frozen=True)
class SetSender:
    address: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "SetSender", "address": self.address}


@dataclass(frozen=True)
class SetGasOwner:
    address: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "SetGasOwner", "address": self.address}


Operation = MergeCoins | SplitCoins | TransferObjects | SetSender | SetGasOwner


def operation_from_dict(data: dict[str, Any]) -> Operation:
    """직렬화된 연산 → Operation"""
    kind = data.get("kind")
    if kind == "MergeCoins":
        return MergeCoins(
            destination=argument_from_dict(data["destination"]),
            sources=tuple(argument_from_dict(s) for s in data["sources"]),
        )
    if kind == "SplitCoins":
        return SplitCoins(
            coin=argument_from_dict(data["coin"]),
            amounts=tuple(int(a) for a in data["amounts"]),
        )
    if kind == "TransferObjects":
        return TransferObjects(
            objects=tuple(argument_from_dict(o) for o in data["objects"]),
            recipient=data["recipient"],
        )
    if kind == "SetSender":
        return SetSender(data["address"])
    if kind == "SetGasOwner":
        return SetGasOwner(data["address"])
    raise ValueError(f"Unknown operation kind: {kind!r}")


# =========================================================================
# 요청 / 페이로드
# =========================================================================


@dataclass(frozen=True)
class TransferRequest:
    """스폰서 이체 요청

    Attributes:
        sender: 송신자 주소
        coin_ids: 송신자 코인 ID (순서 유지, 비어 있으면 안 됨)
        sponsor: 가스 지불자 주소
        recipient: 수신자 주소
        amount: 이체 수량 (기본 단위, 양의 정수 또는 정수 문자열)
    """

    sender: str
    coin_ids: tuple[str, ...]
    sponsor: str
    recipient: str
    amount: int | str


@dataclass(frozen=True)
class UnsignedTransactionPayload:
    """미서명 트랜잭션 페이로드 (불변)

    Attributes:
        operations: 순서가 고정된 연산 목록
        sender: 송신자 주소 (공동 서명자)
        sponsor: 가스 지불자 주소 (공동 서명자)
    """

    operations: tuple[Operation, ...]
    sender: str
    sponsor: str

    @property
    def signers(self) -> tuple[str, str]:
        """서명이 필요한 주소 (송신자, 스폰서)"""
        return (self.sender, self.sponsor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": PAYLOAD_VERSION,
            "sender": self.sender,
            "sponsor": self.sponsor,
            "operations": [op.to_dict() for op in self.operations],
        }

    def to_bytes(self) -> bytes:
        """정규화된 직렬화 바이트 (키 정렬, 공백 없음)

        두 서명자가 같은 입력으로 항상 같은 바이트를 얻는다.
        """
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=True,
        ).encode("utf-8")

    def digest(self) -> str:
        """페이로드 바이트의 blake2b-256 hex"""
        return hashlib.blake2b(self.to_bytes(), digest_size=32).hexdigest()

    @classmethod
    def from_bytes(cls, data: bytes) -> "UnsignedTransactionPayload":
        decoded = json.loads(data.decode("utf-8"))
        if decoded.get("version") != PAYLOAD_VERSION:
            raise ValueError(f"Unsupported payload version: {decoded.get('version')!r}")
        return cls(
            operations=tuple(operation_from_dict(op) for op in decoded["operations"]),
            sender=decoded["sender"],
            sponsor=decoded["sponsor"],
        )


def parse_transfer_amount(value: int | str) -> int:
    """이체 수량 검증 및 변환

    Args:
        value: 양의 정수 또는 정수 문자열 ("1_000_000_000" 형식 허용)

    Returns:
        기본 단위 정수

    Raises:
        InvalidAmountError: 양의 정수가 아니거나 u64 범위를 벗어난 경우
    """
    # bool은 int의 하위 타입이므로 명시적으로 제외
    if isinstance(value, bool):
        raise InvalidAmountError(value)

    if isinstance(value, int):
        amount = value
    elif isinstance(value, str) and _AMOUNT_PATTERN.fullmatch(value):
        amount = int(value.replace("_", ""))
    else:
        raise InvalidAmountError(value)

    if amount <= 0:
        raise InvalidAmountError(value, "Transfer amount must be positive")
    if amount > TransferLimits.U64_MAX:
        raise InvalidAmountError(value, "Transfer amount exceeds u64")

    return amount


class TransferAssembler:
    """TransferRequest → UnsignedTransactionPayload

    Args:
        coin_selector: 코인 선택기 (None이면 기본 정책)
    """

    def __init__(self, coin_selector: CoinSelector | None = None):
        self.coin_selector = coin_selector or CoinSelector()

    def assemble(self, request: TransferRequest) -> UnsignedTransactionPayload:
        """미서명 페이로드 생성

        검증이 모두 끝난 뒤에만 연산을 생성하므로 실패 시 부분 결과는 없음.

        Raises:
            EmptyCoinSetError: 코인 ID가 없는 경우
            InvalidAmountError: 수량이 유효하지 않은 경우
        """
        amount = parse_transfer_amount(request.amount)
        selection = self.coin_selector.select(request.coin_ids)

        primary = ObjectArg(selection.primary)
        operations: list[Operation] = []

        if selection.has_merge:
            operations.append(
                MergeCoins(
                    destination=primary,
                    sources=tuple(ObjectArg(c) for c in selection.merge_sources),
                )
            )

        # split 결과는 지금까지의 명령 수가 곧 인덱스
        split_index = len(operations)
        operations.append(SplitCoins(coin=primary, amounts=(amount,)))
        operations.append(
            TransferObjects(
                objects=(ResultArg(split_index),),
                recipient=request.recipient,
            )
        )
        operations.append(SetSender(request.sender))
        operations.append(SetGasOwner(request.sponsor))

        return UnsignedTransactionPayload(
            operations=tuple(operations),
            sender=request.sender,
            sponsor=request.sponsor,
        )


def build_transfer(
    sender: str,
    coin_ids: Sequence[str],
    sponsor: str,
    recipient: str,
    amount: int | str,
) -> UnsignedTransactionPayload:
    """TransferAssembler 단축 함수"""
    request = TransferRequest(
        sender=sender,
        coin_ids=tuple(coin_ids),
        sponsor=sponsor,
        recipient=recipient,
        amount=amount,
    )
    return TransferAssembler().assemble(request)
