"""
Mock 원장 클라이언트 테스트
"""

import pytest

from adapters.mock.ledger_client import MockLedgerClient
from adapters.sui.errors import SuiRpcError
from adapters.sui.keypair import SuiKeypair
from core.balance.types import AddressOwner, BalanceChange, TransactionBalanceChanges
from core.transfer.assembler import (
    ObjectArg,
    ResultArg,
    SetGasOwner,
    SetSender,
    SplitCoins,
    TransferObjects,
    UnsignedTransactionPayload,
    build_transfer,
)

SUI = "0x2::sui::SUI"
RECIPIENT = "0xrecipient"


def _signed(payload: UnsignedTransactionPayload, *signers: SuiKeypair) -> tuple[bytes, list[str]]:
    data = payload.to_bytes()
    return data, [s.sign(data) for s in signers]


class TestMockLedgerCheckpoints:
    """체크포인트 조회 테스트"""

    @pytest.mark.asyncio
    async def test_no_checkpoints(self, mock_ledger: MockLedgerClient) -> None:
        with pytest.raises(SuiRpcError):
            await mock_ledger.get_latest_checkpoint_id()

    @pytest.mark.asyncio
    async def test_add_and_fetch(self, mock_ledger: MockLedgerClient) -> None:
        tx = TransactionBalanceChanges(digest="tx1", balance_changes=())
        mock_ledger.add_checkpoint(5, [tx])
        mock_ledger.add_checkpoint(3, [])

        assert await mock_ledger.get_latest_checkpoint_id() == 5
        assert await mock_ledger.get_checkpoint_transactions(5) == [tx]

    @pytest.mark.asyncio
    async def test_missing_checkpoint(self, mock_ledger: MockLedgerClient) -> None:
        with pytest.raises(SuiRpcError, match="not found"):
            await mock_ledger.get_checkpoint_transactions(99)

    def test_seal_empty(self, mock_ledger: MockLedgerClient) -> None:
        """실행 없이 확정 → 빈 체크포인트, 번호 증가"""
        assert mock_ledger.seal_checkpoint() == 0
        assert mock_ledger.seal_checkpoint() == 1
        assert mock_ledger.state.checkpoints[1] == []


class TestMockLedgerCoins:
    """코인 조회 테스트"""

    @pytest.mark.asyncio
    async def test_get_coins_filters_owner_and_type(self, mock_ledger: MockLedgerClient) -> None:
        mock_ledger.set_coin("0xa", "0xc1", 10)
        mock_ledger.set_coin("0xa", "0xc2", 20, coin_type="0xusdc::usdc::USDC")
        mock_ledger.set_coin("0xb", "0xc3", 30)

        coins = await mock_ledger.get_coins("0xa", SUI)

        assert [c.coin_id for c in coins] == ["0xc1"]
        assert mock_ledger.balance_of("0xa") == 10
        assert mock_ledger.owner_of("0xc3") == "0xb"


class TestMockLedgerExecute:
    """트랜잭션 재생 테스트"""

    @pytest.mark.asyncio
    async def test_merge_split_transfer(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """코인 4개 병합 후 분할 이체"""
        sender = sender_keypair.address
        for i, balance in enumerate([100, 200, 300, 400], start=1):
            mock_ledger.set_coin(sender, f"0xc{i}", balance)

        payload = build_transfer(
            sender, ["0xc1", "0xc2", "0xc3", "0xc4"], sponsor_keypair.address, RECIPIENT, 650
        )
        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert result.is_success
        assert result.digest == payload.digest()
        assert mock_ledger.balance_of(sender) == 350
        assert mock_ledger.balance_of(RECIPIENT) == 650
        # 병합된 코인은 소멸, primary만 남음
        assert [c.coin_id for c in await mock_ledger.get_coins(sender, SUI)] == ["0xc1"]
        assert set(result.balance_changes) == {
            BalanceChange(owner=AddressOwner(sender), coin_type=SUI, amount="-650"),
            BalanceChange(owner=AddressOwner(RECIPIENT), coin_type=SUI, amount="650"),
        }

    @pytest.mark.asyncio
    async def test_gas_charged_to_sponsor(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """가스는 스폰서만 부담, 송신자 감소분은 정확히 이체 수량"""
        sender = sender_keypair.address
        sponsor = sponsor_keypair.address
        mock_ledger.set_coin(sender, "0xc1", 1000)
        mock_ledger.set_gas_fee(12)

        payload = build_transfer(sender, ["0xc1"], sponsor, RECIPIENT, 100)
        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        amounts = {c.owner.address: c.amount for c in result.balance_changes}
        assert amounts == {sender: "-100", RECIPIENT: "100", sponsor: "-12"}

    @pytest.mark.asyncio
    async def test_insufficient_balance_fails_and_rolls_back(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """두 코인 중 첫 코인만 split → 잔고 부족 실패, 상태 유지"""
        sender = sender_keypair.address
        mock_ledger.set_coin(sender, "0xc1", 10)
        mock_ledger.set_coin(sender, "0xc2", 1000)
        mock_ledger.set_gas_fee(5)

        payload = build_transfer(sender, ["0xc1", "0xc2"], sponsor_keypair.address, RECIPIENT, 500)
        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert not result.is_success
        assert result.error == "InsufficientCoinBalance in command 0"
        assert result.balance_changes == ()
        assert mock_ledger.balance_of(sender) == 1010
        assert mock_ledger.balance_of(RECIPIENT) == 0
        # 실패해도 가스 차감은 체크포인트에 기록
        pending = mock_ledger.state.pending[-1]
        assert pending.balance_changes == (
            BalanceChange(owner=AddressOwner(sponsor_keypair.address), coin_type=SUI, amount="-5"),
        )

    @pytest.mark.asyncio
    async def test_missing_sponsor_signature_rejected(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """두 서명이 모두 있어야 함"""
        mock_ledger.set_coin(sender_keypair.address, "0xc1", 1000)
        payload = build_transfer(sender_keypair.address, ["0xc1"], sponsor_keypair.address, RECIPIENT, 1)

        with pytest.raises(SuiRpcError, match="do not match"):
            await mock_ledger.execute(*_signed(payload, sender_keypair))

        assert mock_ledger.state.pending == []

    @pytest.mark.asyncio
    async def test_signature_over_other_bytes_rejected(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        mock_ledger.set_coin(sender_keypair.address, "0xc1", 1000)
        payload = build_transfer(sender_keypair.address, ["0xc1"], sponsor_keypair.address, RECIPIENT, 1)
        other = build_transfer(sender_keypair.address, ["0xc1"], sponsor_keypair.address, RECIPIENT, 2)
        _, signatures = _signed(other, sender_keypair, sponsor_keypair)

        with pytest.raises(SuiRpcError):
            await mock_ledger.execute(payload.to_bytes(), signatures)

    @pytest.mark.asyncio
    async def test_invalid_bytes(self, mock_ledger: MockLedgerClient) -> None:
        with pytest.raises(SuiRpcError, match="Invalid transaction bytes"):
            await mock_ledger.execute(b"not json", [])

    @pytest.mark.asyncio
    async def test_coin_not_owned_by_sender(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        mock_ledger.set_coin("0xsomeone_else", "0xc1", 1000)
        payload = build_transfer(sender_keypair.address, ["0xc1"], sponsor_keypair.address, RECIPIENT, 1)

        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert not result.is_success
        assert "ObjectNotOwnedBySender" in result.error

    @pytest.mark.asyncio
    async def test_unknown_coin(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        payload = build_transfer(sender_keypair.address, ["0xnope"], sponsor_keypair.address, RECIPIENT, 1)

        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert "ObjectNotFound" in result.error

    @pytest.mark.asyncio
    async def test_invalid_result_reference(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """아직 없는 명령 결과 참조 → 실패"""
        sender = sender_keypair.address
        sponsor = sponsor_keypair.address
        mock_ledger.set_coin(sender, "0xc1", 1000)
        payload = UnsignedTransactionPayload(
            operations=(
                TransferObjects(objects=(ResultArg(0),), recipient=RECIPIENT),
                SplitCoins(coin=ObjectArg("0xc1"), amounts=(1,)),
                SetSender(sender),
                SetGasOwner(sponsor),
            ),
            sender=sender,
            sponsor=sponsor,
        )

        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert "InvalidResultArity" in result.error
        assert mock_ledger.balance_of(sender) == 1000

    @pytest.mark.asyncio
    async def test_seal_moves_pending(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """실행된 트랜잭션이 다음 체크포인트에 포함"""
        mock_ledger.set_coin(sender_keypair.address, "0xc1", 1000)
        payload = build_transfer(sender_keypair.address, ["0xc1"], sponsor_keypair.address, RECIPIENT, 1)
        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        checkpoint_id = mock_ledger.seal_checkpoint()
        transactions = await mock_ledger.get_checkpoint_transactions(checkpoint_id)

        assert [tx.digest for tx in transactions] == [result.digest]
        assert transactions[0].checkpoint == checkpoint_id
        assert mock_ledger.state.pending == []


class TestMockLedgerGas:
    """가스 차감 / 롤백 테스트"""

    @pytest.mark.asyncio
    async def test_gas_debited_from_sponsor_coin(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """스폰서 코인 잔고와 잔고 변경 레코드가 일치"""
        sponsor = sponsor_keypair.address
        mock_ledger.set_coin(sender_keypair.address, "0xc1", 1000)
        mock_ledger.set_coin(sponsor, "0xgas", 500)
        mock_ledger.set_gas_fee(30)

        payload = build_transfer(sender_keypair.address, ["0xc1"], sponsor, RECIPIENT, 100)
        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert mock_ledger.balance_of(sponsor) == 470
        amounts = {c.owner.address: c.amount for c in result.balance_changes}
        assert amounts[sponsor] == "-30"

    @pytest.mark.asyncio
    async def test_gas_debited_on_failure(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """실패해도 스폰서 코인에서 가스 차감, 송신자 코인은 유지"""
        sponsor = sponsor_keypair.address
        mock_ledger.set_coin(sender_keypair.address, "0xc1", 10)
        mock_ledger.set_coin(sponsor, "0xgas", 500)
        mock_ledger.set_gas_fee(30)

        payload = build_transfer(sender_keypair.address, ["0xc1"], sponsor, RECIPIENT, 100)
        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert not result.is_success
        assert mock_ledger.balance_of(sponsor) == 470
        assert mock_ledger.balance_of(sender_keypair.address) == 10
        assert mock_ledger.state.pending[-1].balance_changes == (
            BalanceChange(owner=AddressOwner(sponsor), coin_type=SUI, amount="-30"),
        )

    @pytest.mark.asyncio
    async def test_coin_counter_unchanged_on_rollback(
        self,
        mock_ledger: MockLedgerClient,
        sender_keypair: SuiKeypair,
        sponsor_keypair: SuiKeypair,
    ) -> None:
        """롤백된 split은 새 코인 번호를 소비하지 않음"""
        sender = sender_keypair.address
        sponsor = sponsor_keypair.address
        mock_ledger.set_coin(sender, "0xc1", 1000)
        payload = UnsignedTransactionPayload(
            operations=(
                SplitCoins(coin=ObjectArg("0xc1"), amounts=(1, 2000)),
                TransferObjects(objects=(ResultArg(0),), recipient=RECIPIENT),
                SetSender(sender),
                SetGasOwner(sponsor),
            ),
            sender=sender,
            sponsor=sponsor,
        )

        result = await mock_ledger.execute(*_signed(payload, sender_keypair, sponsor_keypair))

        assert not result.is_success
        assert mock_ledger.state.coin_counter == 0

        ok = build_transfer(sender, ["0xc1"], sponsor, RECIPIENT, 5)
        await mock_ledger.execute(*_signed(ok, sender_keypair, sponsor_keypair))

        assert mock_ledger.owner_of("0xmock_coin_1") == RECIPIENT
