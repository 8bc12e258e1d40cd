"""
체크포인트 잔고 집계기

최신(또는 지정) 체크포인트의 트랜잭션을 가져와
BalanceChangeParser로 순차 접기(fold)하여 BalanceTable 생성.

테이블은 레코드를 정확히 한 번씩 반영해야 하므로 단일 패스, 순차 처리.
"""

import logging
from dataclasses import dataclass, field

from adapters.interfaces import ICheckpointFetcher
from core.balance.parser import BalanceChangeParser, ParseReport
from core.balance.table import BalanceTable

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """집계 결과

    Attributes:
        checkpoint_id: 체크포인트 시퀀스 번호
        table: 잔고 변경 테이블 (패스 종료 후 변경 금지)
        transactions: 처리한 트랜잭션 수
        report: 레코드 반영/무시/건너뜀 요약
    """

    checkpoint_id: int
    table: BalanceTable
    transactions: int = 0
    report: ParseReport = field(default_factory=ParseReport)

    @property
    def skipped(self) -> int:
        return len(self.report.skipped)


class CheckpointAggregator:
    """체크포인트 잔고 집계기

    Args:
        fetcher: 체크포인트 조회 클라이언트
        parser: 잔고 변경 파서 (None이면 skip-and-continue 기본 파서)
    """

    def __init__(
        self,
        fetcher: ICheckpointFetcher,
        parser: BalanceChangeParser | None = None,
    ):
        self.fetcher = fetcher
        self.parser = parser or BalanceChangeParser()

    async def aggregate_latest(self, table: BalanceTable | None = None) -> AggregationResult:
        """최신 체크포인트 집계"""
        checkpoint_id = await self.fetcher.get_latest_checkpoint_id()
        return await self.aggregate(checkpoint_id, table)

    async def aggregate(
        self,
        checkpoint_id: int,
        table: BalanceTable | None = None,
    ) -> AggregationResult:
        """지정 체크포인트 집계

        Args:
            checkpoint_id: 체크포인트 시퀀스 번호
            table: 누적할 테이블 (None이면 새 테이블). 호출자가 생명주기 소유.

        Returns:
            AggregationResult
        """
        if table is None:
            table = BalanceTable()

        transactions = await self.fetcher.get_checkpoint_transactions(checkpoint_id)
        result = AggregationResult(checkpoint_id=checkpoint_id, table=table)

        for tx in transactions:
            self.parser.apply(tx, table, result.report)
            result.transactions += 1

        if result.skipped:
            logger.warning(
                f"체크포인트 {checkpoint_id}: 잘못된 레코드 {result.skipped}건 건너뜀",
                extra={"checkpoint": checkpoint_id, "skipped": result.skipped},
            )

        logger.info(
            f"체크포인트 {checkpoint_id} 집계 완료",
            extra={
                "checkpoint": checkpoint_id,
                "transactions": result.transactions,
                "applied": result.report.applied,
                "ignored": result.report.ignored,
                "addresses": len(table),
            },
        )

        return result
