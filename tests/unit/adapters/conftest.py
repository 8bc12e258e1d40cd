"""
어댑터 테스트 픽스처

Full Node JSON-RPC 샘플 응답 및 Mock 원장 제공.
"""

from typing import Any
from unittest.mock import MagicMock

import pytest

from adapters.mock.ledger_client import MockLedgerClient

SUI = "0x2::sui::SUI"


def make_response(result: Any = None, status_code: int = 200, error: dict | None = None,
                  headers: dict | None = None) -> MagicMock:
    """httpx 응답 모킹"""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.text = "error body"
    body: dict[str, Any] = {"jsonrpc": "2.0", "id": 1}
    if error is not None:
        body["error"] = error
    else:
        body["result"] = result
    response.json.return_value = body
    return response


@pytest.fixture
def sample_checkpoint_response() -> dict:
    """sui_getCheckpoint 샘플 응답"""
    return {
        "epoch": "300",
        "sequenceNumber": "23834122",
        "digest": "CkptDigest111",
        "networkTotalTransactions": "1000",
        "timestampMs": "1700000000000",
        "transactions": ["tx_a", "tx_b"],
    }


@pytest.fixture
def sample_transaction_response() -> dict:
    """sui_multiGetTransactionBlocks 샘플 항목 (showBalanceChanges)"""
    return {
        "digest": "tx_a",
        "checkpoint": "23834122",
        "balanceChanges": [
            {"owner": {"AddressOwner": "0xaaa"}, "coinType": SUI, "amount": "-1000"},
            {"owner": {"AddressOwner": "0xaaa"}, "coinType": SUI, "amount": "50"},
            {"owner": {"ObjectOwner": "0xobj"}, "coinType": SUI, "amount": "10"},
            {"owner": "Immutable", "coinType": SUI, "amount": "5"},
            {"owner": {"Shared": {"initial_shared_version": 1}}, "coinType": SUI, "amount": "7"},
        ],
    }


@pytest.fixture
def sample_coin_response() -> dict:
    """suix_getCoins 샘플 항목"""
    return {
        "coinType": SUI,
        "coinObjectId": "0xc1",
        "version": "1234",
        "digest": "CoinDigest",
        "balance": "1000000000",
        "previousTransaction": "prev_tx",
    }


@pytest.fixture
def sample_execution_response() -> dict:
    """sui_executeTransactionBlock 샘플 응답 (성공)"""
    return {
        "digest": "exec_digest",
        "effects": {"status": {"status": "success"}},
        "balanceChanges": [
            {"owner": {"AddressOwner": "0xsender"}, "coinType": SUI, "amount": "-100"},
            {"owner": {"AddressOwner": "0xrecipient"}, "coinType": SUI, "amount": "100"},
        ],
    }


@pytest.fixture
def mock_ledger() -> MockLedgerClient:
    """빈 Mock 원장"""
    return MockLedgerClient()


@pytest.fixture
def rpc_response():
    """JSON-RPC 응답 팩토리"""
    return make_response
