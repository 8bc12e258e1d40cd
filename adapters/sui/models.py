"""
Sui JSON-RPC 응답 -> 공통 모델 변환

수량은 문자열로 오므로 잔고 변경 수량은 문자열 그대로 보존하고
(파싱은 core.balance.parser 책임), 코인 잔고는 int로 변환.
"""

import logging
from typing import Any

from adapters.models import Checkpoint, Coin, ExecutionResult
from core.balance.types import (
    AddressOwner,
    BalanceChange,
    ChangeOwner,
    Immutable,
    ObjectOwner,
    TransactionBalanceChanges,
)
from core.types import ExecutionStatus

logger = logging.getLogger(__name__)


def parse_owner(data: Any) -> ChangeOwner | None:
    """owner 필드 -> ChangeOwner

    응답 예시:
        {"AddressOwner": "0x..."} / {"ObjectOwner": "0x..."} / "Immutable"

    Returns:
        ChangeOwner 또는 None (Shared 등 지원하지 않는 형태)
    """
    if data == "Immutable":
        return Immutable()
    if isinstance(data, dict):
        if "AddressOwner" in data:
            return AddressOwner(data["AddressOwner"])
        if "ObjectOwner" in data:
            return ObjectOwner(data["ObjectOwner"])
    return None


def parse_balance_change(data: dict[str, Any]) -> BalanceChange | None:
    """balanceChanges 항목 -> BalanceChange

    응답 예시:
    {
        "owner": {"AddressOwner": "0x7d20..."},
        "coinType": "0x2::sui::SUI",
        "amount": "-1997880"
    }

    amount가 없으면 빈 문자열로 두어 파서가 해당 레코드만 건너뛰게 함.

    Returns:
        BalanceChange 또는 None (지원하지 않는 owner 형태, coinType 누락)
    """
    owner = parse_owner(data.get("owner"))
    if owner is None:
        logger.debug(
            "Unsupported balance change owner ignored",
            extra={"owner": data.get("owner"), "coin_type": data.get("coinType")},
        )
        return None

    coin_type = data.get("coinType")
    if not isinstance(coin_type, str) or not coin_type:
        logger.warning(
            "coinType 없는 잔고 변경 레코드 건너뜀",
            extra={"owner": data.get("owner"), "amount": data.get("amount")},
        )
        return None

    amount = data.get("amount")
    return BalanceChange(
        owner=owner,
        coin_type=coin_type,
        # 수량은 문자열 그대로 (숫자 JSON으로 와도 문자열화)
        amount="" if amount is None else str(amount),
    )


def parse_balance_changes(items: list[dict[str, Any]] | None) -> tuple[BalanceChange, ...] | None:
    if items is None:
        return None
    changes = (parse_balance_change(item) for item in items)
    return tuple(c for c in changes if c is not None)


def parse_transaction(data: dict[str, Any]) -> TransactionBalanceChanges:
    """트랜잭션 블록 응답 -> TransactionBalanceChanges

    sui_multiGetTransactionBlocks (showBalanceChanges) 응답 항목 예시:
    {
        "digest": "8Ts9...",
        "balanceChanges": [...],
        "checkpoint": "23834122"
    }
    """
    checkpoint = data.get("checkpoint")
    return TransactionBalanceChanges(
        digest=data["digest"],
        balance_changes=parse_balance_changes(data.get("balanceChanges")),
        checkpoint=int(checkpoint) if checkpoint is not None else None,
    )


def parse_checkpoint(data: dict[str, Any]) -> Checkpoint:
    """sui_getCheckpoint 응답 -> Checkpoint

    응답 예시:
    {
        "epoch": "300",
        "sequenceNumber": "23834122",
        "digest": "...",
        "transactions": ["8Ts9...", "2Fk1..."],
        ...
    }
    """
    return Checkpoint(
        sequence_number=int(data["sequenceNumber"]),
        transaction_digests=tuple(data.get("transactions", [])),
    )


def parse_coin(data: dict[str, Any]) -> Coin:
    """suix_getCoins 응답 항목 -> Coin

    응답 예시:
    {
        "coinType": "0x2::sui::SUI",
        "coinObjectId": "0x1a2b...",
        "version": "1234",
        "digest": "...",
        "balance": "1000000000",
        "previousTransaction": "..."
    }
    """
    return Coin(
        coin_id=data["coinObjectId"],
        coin_type=data["coinType"],
        balance=int(data["balance"]),
        version=data.get("version"),
        digest=data.get("digest"),
    )


def parse_execution_result(data: dict[str, Any]) -> ExecutionResult:
    """sui_executeTransactionBlock 응답 -> ExecutionResult

    상태는 effects.status 기준. effects가 없으면 실패로 간주.

    응답 예시:
    {
        "digest": "...",
        "effects": {"status": {"status": "failure", "error": "InsufficientCoinBalance ..."}},
        "balanceChanges": [...]
    }
    """
    status_data = (data.get("effects") or {}).get("status") or {}
    status = status_data.get("status", ExecutionStatus.FAILURE.value)
    error = status_data.get("error")
    if status != ExecutionStatus.SUCCESS.value and error is None:
        error = "No execution effects returned"

    changes = parse_balance_changes(data.get("balanceChanges")) or ()

    return ExecutionResult(
        digest=data.get("digest", ""),
        status=status,
        error=error,
        balance_changes=changes if status == ExecutionStatus.SUCCESS.value else (),
    )
