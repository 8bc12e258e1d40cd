"""
스폰서 이체 서비스

송신자 코인 조회 → 페이로드 조립 → 송신자/스폰서 이중 서명 → 함께 제출.

조립 실패(EmptyCoinSet/InvalidAmount)는 서명 전에 전파되므로
부분 서명된 페이로드가 제출되는 일은 없다.
원장측 실행 실패(잔고 부족 등)는 해석하지 않고 결과 그대로 반환.
"""

import asyncio
import logging
from collections.abc import Sequence

from adapters.interfaces import ICoinInventory, ISigner, ISubmitter
from adapters.models import ExecutionResult
from core.constants import Defaults
from core.transfer.assembler import (
    TransferAssembler,
    TransferRequest,
    UnsignedTransactionPayload,
)
from core.types import ExecutionMode

logger = logging.getLogger(__name__)


class SponsoredTransferService:
    """스폰서 이체 서비스

    Args:
        inventory: 코인 조회 클라이언트
        submitter: 트랜잭션 제출 클라이언트
        sender: 송신자 서명자
        sponsor: 가스 지불자 서명자
        assembler: 트랜잭션 조립기 (None이면 기본)
    """

    def __init__(
        self,
        inventory: ICoinInventory,
        submitter: ISubmitter,
        sender: ISigner,
        sponsor: ISigner,
        assembler: TransferAssembler | None = None,
    ):
        self.inventory = inventory
        self.submitter = submitter
        self.sender = sender
        self.sponsor = sponsor
        self.assembler = assembler or TransferAssembler()

    def build(self, request: TransferRequest) -> UnsignedTransactionPayload:
        """미서명 페이로드 조립"""
        return self.assembler.assemble(request)

    async def sign(self, payload: UnsignedTransactionPayload) -> list[str]:
        """송신자/스폰서 서명 수집

        같은 불변 바이트에 서명하므로 순서 무관, 동시 수행.

        Returns:
            [송신자 서명, 스폰서 서명]
        """
        tx_bytes = payload.to_bytes()
        sender_sig, sponsor_sig = await asyncio.gather(
            asyncio.to_thread(self.sender.sign, tx_bytes),
            asyncio.to_thread(self.sponsor.sign, tx_bytes),
        )
        return [sender_sig, sponsor_sig]

    async def transfer(
        self,
        recipient: str,
        amount: int | str,
        coin_type: str = Defaults.COIN_TYPE,
        coin_ids: Sequence[str] | None = None,
        mode: ExecutionMode = ExecutionMode(Defaults.EXECUTION_MODE),
    ) -> ExecutionResult:
        """스폰서 이체 실행

        Args:
            recipient: 수신자 주소
            amount: 이체 수량 (기본 단위)
            coin_type: 자산 타입
            coin_ids: 사용할 송신자 코인 (None이면 노드에서 조회)
            mode: 실행 대기 방식

        Returns:
            실행 결과

        Raises:
            EmptyCoinSetError: 사용할 코인이 없는 경우
            InvalidAmountError: 수량이 유효하지 않은 경우
        """
        if coin_ids is None:
            coins = await self.inventory.get_coins(self.sender.address, coin_type)
            coin_ids = [coin.coin_id for coin in coins]

        request = TransferRequest(
            sender=self.sender.address,
            coin_ids=tuple(coin_ids),
            sponsor=self.sponsor.address,
            recipient=recipient,
            amount=amount,
        )
        payload = self.build(request)
        signatures = await self.sign(payload)

        logger.info(
            "스폰서 이체 제출",
            extra={
                "payload_digest": payload.digest(),
                "sender": request.sender,
                "sponsor": request.sponsor,
                "recipient": recipient,
                "coins": len(request.coin_ids),
                "mode": ExecutionMode(mode).value,
            },
        )

        result = await self.submitter.execute(payload.to_bytes(), signatures, mode)

        if result.is_success:
            logger.info(
                f"스폰서 이체 성공: {result.digest}",
                extra={"digest": result.digest},
            )
        else:
            logger.warning(
                f"스폰서 이체 실패: {result.digest}",
                extra={"digest": result.digest, "error": result.error},
            )

        return result
