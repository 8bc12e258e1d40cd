"""
Mock 원장 클라이언트

테스트용 메모리 내 Sui 원장.
ICheckpointFetcher, ICoinInventory, ISubmitter Protocol 준수.

execute는 서명을 검증한 뒤 페이로드의 merge/split/transfer를
코인 원장에 재생하고, 결과 잔고 변경을 다음 체크포인트에 쌓는다.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from adapters.models import Coin, ExecutionResult
from adapters.sui.errors import KeypairError, SuiRpcError
from adapters.sui.keypair import verify_signature
from core.balance.types import AddressOwner, BalanceChange, TransactionBalanceChanges
from core.constants import Defaults
from core.transfer.assembler import (
    Argument,
    MergeCoins,
    ObjectArg,
    ResultArg,
    SetGasOwner,
    SetSender,
    SplitCoins,
    TransferObjects,
    UnsignedTransactionPayload,
)
from core.types import ExecutionMode, ExecutionStatus


class _ExecutionAborted(Exception):
    """재생 중 원장측 실패 (상태는 롤백)"""

    pass


@dataclass
class MockLedgerState:
    """Mock 상태 (메모리 내 저장)"""

    # 코인 (coin_id -> Coin)
    coins: dict[str, Coin] = field(default_factory=dict)

    # 코인 소유자 (coin_id -> address)
    owners: dict[str, str] = field(default_factory=dict)

    # 확정된 체크포인트 (sequence_number -> 트랜잭션 목록)
    checkpoints: dict[int, list[TransactionBalanceChanges]] = field(default_factory=dict)

    # 다음 체크포인트에 들어갈 실행된 트랜잭션
    pending: list[TransactionBalanceChanges] = field(default_factory=list)

    # 제출된 트랜잭션 (digest -> payload)
    executed: dict[str, bytes] = field(default_factory=dict)

    # 스폰서에게 부과할 순 가스 비용 (음수면 리베이트가 더 큰 경우)
    # 스폰서의 첫 SUI 코인에서 차감, 코인이 없으면 잔고 변경 레코드로만 기록
    gas_fee: int = 0

    coin_counter: int = 0


class MockLedgerClient:
    """Mock 원장 클라이언트

    사용 예시:
    ```python
    ledger = MockLedgerClient()
    ledger.set_coin(sender, "0xc1", 600)
    ledger.set_coin(sender, "0xc2", 400)

    result = await ledger.execute(payload.to_bytes(), [sender_sig, sponsor_sig])
    checkpoint_id = ledger.seal_checkpoint()
    ```
    """

    def __init__(self, state: MockLedgerState | None = None):
        self.state = state or MockLedgerState()

    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------

    def set_coin(
        self,
        owner: str,
        coin_id: str,
        balance: int,
        coin_type: str = Defaults.COIN_TYPE,
    ) -> Coin:
        """코인 설정"""
        coin = Coin(coin_id=coin_id, coin_type=coin_type, balance=balance)
        self.state.coins[coin_id] = coin
        self.state.owners[coin_id] = owner
        return coin

    def set_gas_fee(self, gas_fee: int) -> None:
        """스폰서 순 가스 비용 설정"""
        self.state.gas_fee = gas_fee

    def add_checkpoint(
        self,
        sequence_number: int,
        transactions: Sequence[TransactionBalanceChanges],
    ) -> None:
        """체크포인트 직접 추가"""
        self.state.checkpoints[sequence_number] = list(transactions)

    def seal_checkpoint(self) -> int:
        """실행된 트랜잭션으로 새 체크포인트 확정

        Returns:
            새 체크포인트 시퀀스 번호
        """
        sequence_number = max(self.state.checkpoints, default=-1) + 1
        self.state.checkpoints[sequence_number] = [
            TransactionBalanceChanges(
                digest=tx.digest,
                balance_changes=tx.balance_changes,
                checkpoint=sequence_number,
            )
            for tx in self.state.pending
        ]
        self.state.pending = []
        return sequence_number

    def owner_of(self, coin_id: str) -> str | None:
        return self.state.owners.get(coin_id)

    def balance_of(self, owner: str, coin_type: str = Defaults.COIN_TYPE) -> int:
        """주소의 코인 잔고 합계"""
        return sum(
            coin.balance
            for coin_id, coin in self.state.coins.items()
            if self.state.owners[coin_id] == owner and coin.coin_type == coin_type
        )

    # -------------------------------------------------------------------------
    # ICheckpointFetcher
    # -------------------------------------------------------------------------

    async def get_latest_checkpoint_id(self) -> int:
        if not self.state.checkpoints:
            raise SuiRpcError(code=-32602, message="No checkpoints")
        return max(self.state.checkpoints)

    async def get_checkpoint_transactions(
        self,
        checkpoint_id: int,
    ) -> list[TransactionBalanceChanges]:
        if checkpoint_id not in self.state.checkpoints:
            raise SuiRpcError(code=-32602, message=f"Checkpoint {checkpoint_id} not found")
        return list(self.state.checkpoints[checkpoint_id])

    # -------------------------------------------------------------------------
    # ICoinInventory
    # -------------------------------------------------------------------------

    async def get_coins(self, owner: str, coin_type: str = Defaults.COIN_TYPE) -> list[Coin]:
        return [
            coin
            for coin_id, coin in self.state.coins.items()
            if self.state.owners[coin_id] == owner and coin.coin_type == coin_type
        ]

    # -------------------------------------------------------------------------
    # ISubmitter
    # -------------------------------------------------------------------------

    async def execute(
        self,
        payload: bytes,
        signatures: Sequence[str],
        mode: ExecutionMode = ExecutionMode.WAIT_FOR_LOCAL_EXECUTION,
    ) -> ExecutionResult:
        """서명 검증 후 페이로드 재생

        Raises:
            SuiRpcError: 페이로드/서명이 유효하지 않은 경우 (노드가 거부)
        """
        try:
            tx = UnsignedTransactionPayload.from_bytes(payload)
        except (ValueError, KeyError) as e:
            raise SuiRpcError(code=-32602, message=f"Invalid transaction bytes: {e}") from e

        self._verify_signers(tx, payload, signatures)

        digest = tx.digest()
        coins = dict(self.state.coins)
        owners = dict(self.state.owners)
        before = self._holdings(coins, owners)

        try:
            coin_counter = self._replay(tx, coins, owners)
        except _ExecutionAborted as e:
            status = ExecutionStatus.FAILURE.value
            error: str | None = str(e)
            # 롤백: 재생 전 상태에서 가스만 부과
            coins = dict(self.state.coins)
            owners = dict(self.state.owners)
        else:
            status = ExecutionStatus.SUCCESS.value
            error = None
            self.state.coin_counter = coin_counter

        # 가스는 성공/실패와 무관하게 스폰서에게 부과
        gas_debited = self._charge_gas(tx.sponsor, coins, owners)

        after = self._holdings(coins, owners)
        deltas = {
            key: after.get(key, 0) - before.get(key, 0)
            for key in set(before) | set(after)
        }
        if self.state.gas_fee and not gas_debited:
            # 스폰서 SUI 코인이 없으면 잔고 변경 레코드로만 기록
            gas_key = (tx.sponsor, Defaults.COIN_TYPE)
            deltas[gas_key] = deltas.get(gas_key, 0) - self.state.gas_fee

        self.state.coins = coins
        self.state.owners = owners

        changes = tuple(
            BalanceChange(owner=AddressOwner(owner), coin_type=coin_type, amount=str(delta))
            for (owner, coin_type), delta in sorted(deltas.items())
            if delta != 0
        )

        self.state.executed[digest] = payload
        self.state.pending.append(
            TransactionBalanceChanges(digest=digest, balance_changes=changes)
        )

        return ExecutionResult(
            digest=digest,
            status=status,
            error=error,
            balance_changes=changes if status == ExecutionStatus.SUCCESS.value else (),
        )

    # -------------------------------------------------------------------------
    # 내부 구현
    # -------------------------------------------------------------------------

    @staticmethod
    def _verify_signers(
        tx: UnsignedTransactionPayload,
        payload: bytes,
        signatures: Sequence[str],
    ) -> None:
        try:
            signers = {verify_signature(payload, sig) for sig in signatures}
        except KeypairError as e:
            raise SuiRpcError(code=-32002, message=str(e)) from e

        required = set(tx.signers)
        if signers != required:
            raise SuiRpcError(
                code=-32002,
                message=f"Signers {sorted(signers)} do not match required {sorted(required)}",
            )

    def _charge_gas(
        self,
        sponsor: str,
        coins: dict[str, Coin],
        owners: dict[str, str],
    ) -> bool:
        """스폰서의 첫 SUI 코인에서 가스 차감

        Returns:
            코인에서 차감했으면 True (부과할 가스가 없거나 코인이 없으면 False)
        """
        if not self.state.gas_fee:
            return False

        for coin_id, coin in coins.items():
            if owners[coin_id] == sponsor and coin.coin_type == Defaults.COIN_TYPE:
                coins[coin_id] = Coin(
                    coin_id=coin_id,
                    coin_type=coin.coin_type,
                    balance=coin.balance - self.state.gas_fee,
                )
                return True
        return False

    @staticmethod
    def _holdings(
        coins: dict[str, Coin],
        owners: dict[str, str],
    ) -> dict[tuple[str, str], int]:
        holdings: dict[tuple[str, str], int] = {}
        for coin_id, coin in coins.items():
            key = (owners[coin_id], coin.coin_type)
            holdings[key] = holdings.get(key, 0) + coin.balance
        return holdings

    def _replay(
        self,
        tx: UnsignedTransactionPayload,
        coins: dict[str, Coin],
        owners: dict[str, str],
    ) -> int:
        """페이로드 재생 (coins/owners in-place 변경)

        Returns:
            커밋 시 반영할 다음 coin_counter 값
        """
        results: list[list[str]] = []
        coin_counter = self.state.coin_counter

        def resolve(arg: Argument) -> list[str]:
            if isinstance(arg, ObjectArg):
                if arg.object_id not in coins:
                    raise _ExecutionAborted(f"ObjectNotFound: {arg.object_id}")
                if owners[arg.object_id] != tx.sender:
                    raise _ExecutionAborted(f"ObjectNotOwnedBySender: {arg.object_id}")
                return [arg.object_id]
            if isinstance(arg, ResultArg):
                if arg.index >= len(results):
                    raise _ExecutionAborted(f"InvalidResultArity: Result({arg.index})")
                return results[arg.index]
            raise _ExecutionAborted(f"Unknown argument: {arg!r}")

        def resolve_one(arg: Argument) -> str:
            ids = resolve(arg)
            if len(ids) != 1:
                raise _ExecutionAborted(f"InvalidResultArity: {arg!r}")
            return ids[0]

        for command_index, op in enumerate(
            o for o in tx.operations if not isinstance(o, (SetSender, SetGasOwner))
        ):
            if isinstance(op, MergeCoins):
                destination_id = resolve_one(op.destination)
                destination = coins[destination_id]
                total = destination.balance
                for source in op.sources:
                    source_id = resolve_one(source)
                    if source_id == destination_id:
                        raise _ExecutionAborted(f"InvalidMerge: {source_id} into itself")
                    if coins[source_id].coin_type != destination.coin_type:
                        raise _ExecutionAborted(f"CoinTypeMismatch: {source_id}")
                    total += coins.pop(source_id).balance
                    owners.pop(source_id)
                coins[destination_id] = Coin(
                    coin_id=destination_id,
                    coin_type=destination.coin_type,
                    balance=total,
                )
                results.append([destination_id])

            elif isinstance(op, SplitCoins):
                coin_id = resolve_one(op.coin)
                coin = coins[coin_id]
                remaining = coin.balance
                created: list[str] = []
                for amount in op.amounts:
                    if amount > remaining:
                        raise _ExecutionAborted(
                            f"InsufficientCoinBalance in command {command_index}"
                        )
                    remaining -= amount
                    coin_counter += 1
                    new_id = f"0xmock_coin_{coin_counter}"
                    coins[new_id] = Coin(coin_id=new_id, coin_type=coin.coin_type, balance=amount)
                    owners[new_id] = owners[coin_id]
                    created.append(new_id)
                coins[coin_id] = Coin(coin_id=coin_id, coin_type=coin.coin_type, balance=remaining)
                results.append(created)

            elif isinstance(op, TransferObjects):
                for arg in op.objects:
                    for object_id in resolve(arg):
                        owners[object_id] = op.recipient
                results.append([])

        return coin_counter
