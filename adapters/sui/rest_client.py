"""
Sui Full Node JSON-RPC 클라이언트

JSON-RPC 2.0 over HTTP, 재시도, 요청당 digest 제한 분할 처리.
ICheckpointFetcher, ICoinInventory, ISubmitter Protocol 준수.
"""

import asyncio
import base64
import itertools
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from adapters.models import Checkpoint, Coin, ExecutionResult
from adapters.sui.errors import SuiRpcError
from adapters.sui.models import (
    parse_checkpoint,
    parse_coin,
    parse_execution_result,
    parse_transaction,
)
from core.balance.types import TransactionBalanceChanges
from core.constants import Defaults
from core.types import ExecutionMode

logger = logging.getLogger(__name__)


class SuiRpcClient:
    """Sui Full Node JSON-RPC 클라이언트

    공개 노드는 요청 제한이 있으므로 전용 노드 사용 권장.

    Args:
        base_url: Full Node RPC URL
        timeout: 요청 타임아웃 (초)
        max_retries: 최대 재시도 횟수 (타임아웃/연결 오류/429)
        multi_get_batch_size: sui_multiGetTransactionBlocks 요청당 최대 digest 수
        coin_page_limit: suix_getCoins 페이지 크기
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = Defaults.REQUEST_TIMEOUT_SEC,
        max_retries: int = Defaults.MAX_RETRIES,
        multi_get_batch_size: int = Defaults.MULTI_GET_BATCH_SIZE,
        coin_page_limit: int = Defaults.COIN_PAGE_LIMIT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.multi_get_batch_size = multi_get_batch_size
        self.coin_page_limit = coin_page_limit

        self._client: httpx.AsyncClient | None = None
        self._request_ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _call(self, method: str, params: list[Any]) -> Any:
        """JSON-RPC 호출

        Args:
            method: RPC 메서드 (예: sui_getCheckpoint)
            params: 위치 인자 목록

        Returns:
            result 필드

        Raises:
            SuiRpcError: JSON-RPC 에러 또는 HTTP 에러 응답 시
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        client = await self._get_client()

        for attempt in range(self.max_retries):
            try:
                response = await client.post(self.base_url, json=payload)

                # 429 처리
                if response.status_code == 429:
                    retry_after = int(response.headers.get("Retry-After", 1))
                    logger.warning(
                        "Rate limited by full node",
                        extra={"method": method, "retry_after": retry_after, "attempt": attempt + 1},
                    )
                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(retry_after)
                        continue
                    raise SuiRpcError(code=429, message="Too many requests")

                if response.status_code >= 400:
                    raise SuiRpcError(code=response.status_code, message=response.text)

                data = response.json()

            except httpx.TimeoutException:
                logger.warning(
                    "Request timeout",
                    extra={"method": method, "attempt": attempt + 1},
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(1 * (attempt + 1))
                    continue
                raise

            except httpx.RequestError as e:
                logger.error(
                    "Request error",
                    extra={"method": method, "error": str(e), "attempt": attempt + 1},
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(1 * (attempt + 1))
                    continue
                raise

            error = data.get("error")
            if error is not None:
                raise SuiRpcError(
                    code=error.get("code", -1),
                    message=error.get("message", str(error)),
                )

            return data.get("result")

        # 모든 재시도 실패
        raise SuiRpcError(code=-1, message="All retries failed")

    # -------------------------------------------------------------------------
    # 체크포인트 조회
    # -------------------------------------------------------------------------

    async def get_latest_checkpoint_id(self) -> int:
        """최신 체크포인트 시퀀스 번호"""
        result = await self._call("sui_getLatestCheckpointSequenceNumber", [])
        return int(result)

    async def get_checkpoint(self, checkpoint_id: int) -> Checkpoint:
        """체크포인트 조회 (ID = 시퀀스 번호)"""
        result = await self._call("sui_getCheckpoint", [str(checkpoint_id)])
        return parse_checkpoint(result)

    async def multi_get_transactions(
        self,
        digests: Sequence[str],
    ) -> list[TransactionBalanceChanges]:
        """digest 목록의 트랜잭션 조회 (balanceChanges 포함)

        노드의 요청당 digest 제한에 맞춰 분할 요청 후 순서대로 합침.
        """
        transactions: list[TransactionBalanceChanges] = []
        for start in range(0, len(digests), self.multi_get_batch_size):
            chunk = list(digests[start:start + self.multi_get_batch_size])
            result = await self._call(
                "sui_multiGetTransactionBlocks",
                [chunk, {"showBalanceChanges": True}],
            )
            transactions.extend(parse_transaction(item) for item in result)
        return transactions

    async def get_checkpoint_transactions(
        self,
        checkpoint_id: int,
    ) -> list[TransactionBalanceChanges]:
        """체크포인트의 트랜잭션 목록 (balanceChanges 포함)"""
        checkpoint = await self.get_checkpoint(checkpoint_id)
        logger.debug(
            "Checkpoint fetched",
            extra={
                "checkpoint": checkpoint.sequence_number,
                "transactions": len(checkpoint.transaction_digests),
            },
        )
        return await self.multi_get_transactions(checkpoint.transaction_digests)

    # -------------------------------------------------------------------------
    # 코인 조회
    # -------------------------------------------------------------------------

    async def get_coins(self, owner: str, coin_type: str = Defaults.COIN_TYPE) -> list[Coin]:
        """소유 코인 전체 조회 (nextCursor 페이지 순회)"""
        coins: list[Coin] = []
        cursor: str | None = None

        while True:
            result = await self._call(
                "suix_getCoins",
                [owner, coin_type, cursor, self.coin_page_limit],
            )
            coins.extend(parse_coin(item) for item in result.get("data", []))

            if not result.get("hasNextPage"):
                break
            cursor = result.get("nextCursor")
            if cursor is None:
                break

        return coins

    # -------------------------------------------------------------------------
    # 트랜잭션 실행
    # -------------------------------------------------------------------------

    async def execute(
        self,
        payload: bytes,
        signatures: Sequence[str],
        mode: ExecutionMode = ExecutionMode(Defaults.EXECUTION_MODE),
    ) -> ExecutionResult:
        """서명된 트랜잭션 제출

        원장측 실행 실패(잔고 부족 등)는 예외가 아닌 실패 결과로 반환.
        RPC 자체 오류는 SuiRpcError로 전파.
        """
        result = await self._call(
            "sui_executeTransactionBlock",
            [
                base64.b64encode(payload).decode("ascii"),
                list(signatures),
                {"showBalanceChanges": True, "showEffects": True},
                ExecutionMode(mode).value,
            ],
        )
        return parse_execution_result(result)
