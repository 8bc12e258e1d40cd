"""
Sui 응답 변환 테스트
"""

import pytest

from adapters.models import Checkpoint
from adapters.sui.models import (
    parse_balance_change,
    parse_balance_changes,
    parse_checkpoint,
    parse_coin,
    parse_execution_result,
    parse_owner,
    parse_transaction,
)
from core.balance.types import AddressOwner, BalanceChange, Immutable, ObjectOwner

SUI = "0x2::sui::SUI"


class TestParseOwner:
    """owner 필드 변환 테스트"""

    def test_address_owner(self) -> None:
        assert parse_owner({"AddressOwner": "0xaaa"}) == AddressOwner("0xaaa")

    def test_object_owner(self) -> None:
        assert parse_owner({"ObjectOwner": "0xobj"}) == ObjectOwner("0xobj")

    def test_immutable(self) -> None:
        assert parse_owner("Immutable") == Immutable()

    @pytest.mark.parametrize("data", [{"Shared": {"initial_shared_version": 1}}, None, "Unknown", 1])
    def test_unsupported(self, data) -> None:
        """지원하지 않는 형태 → None"""
        assert parse_owner(data) is None


class TestParseBalanceChange:
    """balanceChanges 항목 변환 테스트"""

    def test_amount_kept_as_string(self) -> None:
        change = parse_balance_change(
            {"owner": {"AddressOwner": "0xaaa"}, "coinType": SUI, "amount": "-1997880"}
        )

        assert change == BalanceChange(owner=AddressOwner("0xaaa"), coin_type=SUI, amount="-1997880")

    def test_numeric_amount_stringified(self) -> None:
        change = parse_balance_change({"owner": {"AddressOwner": "0xaaa"}, "coinType": SUI, "amount": 5})

        assert change is not None
        assert change.amount == "5"

    def test_unsupported_owner_dropped(self) -> None:
        assert parse_balance_change({"owner": {"Shared": {}}, "coinType": SUI, "amount": "1"}) is None

    def test_parse_balance_changes_none(self) -> None:
        """필드 없음과 빈 목록 구분"""
        assert parse_balance_changes(None) is None
        assert parse_balance_changes([]) == ()


class TestParseTransaction:
    """트랜잭션 응답 변환 테스트"""

    def test_parse(self, sample_transaction_response: dict) -> None:
        tx = parse_transaction(sample_transaction_response)

        assert tx.digest == "tx_a"
        assert tx.checkpoint == 23834122
        # Shared 레코드만 제외, ObjectOwner/Immutable은 파서가 무시하도록 유지
        assert tx.balance_changes is not None
        assert len(tx.balance_changes) == 4
        assert tx.balance_changes[2].owner == ObjectOwner("0xobj")
        assert tx.balance_changes[3].owner == Immutable()

    def test_without_balance_changes(self) -> None:
        tx = parse_transaction({"digest": "tx"})

        assert tx.balance_changes is None
        assert tx.checkpoint is None


class TestParseCheckpoint:
    """체크포인트 응답 변환 테스트"""

    def test_parse(self, sample_checkpoint_response: dict) -> None:
        assert parse_checkpoint(sample_checkpoint_response) == Checkpoint(
            sequence_number=23834122,
            transaction_digests=("tx_a", "tx_b"),
        )

    def test_empty_checkpoint(self) -> None:
        assert parse_checkpoint({"sequenceNumber": "0"}).transaction_digests == ()


class TestParseCoin:
    """코인 응답 변환 테스트"""

    def test_parse(self, sample_coin_response: dict) -> None:
        coin = parse_coin(sample_coin_response)

        assert coin.coin_id == "0xc1"
        assert coin.coin_type == SUI
        assert coin.balance == 1_000_000_000
        assert isinstance(coin.balance, int)
        assert coin.version == "1234"


class TestParseExecutionResult:
    """실행 결과 변환 테스트"""

    def test_success(self, sample_execution_response: dict) -> None:
        result = parse_execution_result(sample_execution_response)

        assert result.is_success
        assert result.digest == "exec_digest"
        assert result.error is None
        assert [c.amount for c in result.balance_changes] == ["-100", "100"]

    def test_failure_keeps_ledger_error(self) -> None:
        """원장 실패 사유 그대로 보존"""
        result = parse_execution_result(
            {
                "digest": "d",
                "effects": {
                    "status": {
                        "status": "failure",
                        "error": "InsufficientCoinBalance in command 0",
                    }
                },
                "balanceChanges": [
                    {"owner": {"AddressOwner": "0xsponsor"}, "coinType": SUI, "amount": "-10"},
                ],
            }
        )

        assert not result.is_success
        assert result.error == "InsufficientCoinBalance in command 0"
        assert result.balance_changes == ()

    def test_missing_effects(self) -> None:
        """effects 없음 → 실패"""
        result = parse_execution_result({"digest": "d"})

        assert result.status == "failure"
        assert result.error == "No execution effects returned"


class TestParseIncompleteRecords:
    """필드가 빠진 레코드 변환 테스트"""

    def test_missing_coin_type_dropped(self, caplog) -> None:
        """coinType 없음 → None, 경고 로그"""
        with caplog.at_level("WARNING"):
            change = parse_balance_change({"owner": {"AddressOwner": "0xB"}, "amount": "5"})

        assert change is None
        assert any("coinType" in r.message for r in caplog.records)

    def test_missing_amount_becomes_empty(self) -> None:
        """amount 없음 → 빈 문자열 (파서가 건너뜀)"""
        change = parse_balance_change({"owner": {"AddressOwner": "0xB"}, "coinType": SUI})

        assert change == BalanceChange(owner=AddressOwner("0xB"), coin_type=SUI, amount="")

    def test_transaction_keeps_good_records(self) -> None:
        """잘못된 레코드가 있어도 나머지 레코드 유지"""
        tx = parse_transaction(
            {
                "digest": "d2",
                "balanceChanges": [
                    {"owner": {"AddressOwner": "0xB"}, "amount": "5"},
                    {"owner": {"AddressOwner": "0xA"}, "coinType": SUI, "amount": "-1000"},
                ],
            }
        )

        assert tx.balance_changes == (
            BalanceChange(owner=AddressOwner("0xA"), coin_type=SUI, amount="-1000"),
        )
