"""
Indexer Bootstrap

설정 로드, 의존성 주입, 명령 실행.

명령:
    balances  최신(또는 지정) 체크포인트의 주소별 잔고 변경 출력 (JSON)
    transfer  스폰서 이체 실행 (secrets.yaml의 sender/sponsor 키 필요)
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import httpx

from adapters.sui.errors import KeypairError, SuiRpcError
from adapters.sui.keypair import SuiKeypair
from adapters.sui.rest_client import SuiRpcClient
from core.balance.types import AddressOwner, ChangeOwner, ObjectOwner
from core.config.loader import Settings, get_settings
from core.constants import Defaults
from core.logging import setup_logging
from core.transfer.errors import TransferError
from core.types import ExecutionMode
from indexer.aggregator import CheckpointAggregator
from indexer.sponsor import SponsoredTransferService

logger = logging.getLogger("indexer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="indexer",
        description="Sui 체크포인트 잔고 집계 / 스폰서 이체",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="secrets.yaml 경로 (기본: config/secrets.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    balances = subparsers.add_parser("balances", help="체크포인트 잔고 변경 집계")
    balances.add_argument(
        "--checkpoint",
        type=int,
        default=None,
        help="체크포인트 시퀀스 번호 (기본: 최신)",
    )

    transfer = subparsers.add_parser("transfer", help="스폰서 이체 실행")
    transfer.add_argument("--to", required=True, help="수신자 주소")
    transfer.add_argument("--amount", required=True, help="이체 수량 (기본 단위, 예: 1_000_000_000)")
    transfer.add_argument("--coin-type", default=None, help="자산 타입 (기본: 설정값)")
    transfer.add_argument(
        "--coin",
        action="append",
        dest="coins",
        default=None,
        help="사용할 송신자 코인 ID (반복 가능, 기본: 전체 조회)",
    )
    transfer.add_argument(
        "--mode",
        choices=[m.value for m in ExecutionMode],
        default=Defaults.EXECUTION_MODE,
        help="실행 대기 방식",
    )

    return parser


def _owner_label(owner: ChangeOwner) -> str:
    if isinstance(owner, AddressOwner):
        return owner.address
    if isinstance(owner, ObjectOwner):
        return owner.object_id
    return "Immutable"


async def run_balances(client: SuiRpcClient, checkpoint: int | None) -> int:
    aggregator = CheckpointAggregator(client)
    if checkpoint is None:
        result = await aggregator.aggregate_latest()
    else:
        result = await aggregator.aggregate(checkpoint)

    output = {
        "checkpoint": result.checkpoint_id,
        "transactions": result.transactions,
        "skipped": result.skipped,
        # 큰 정수 정밀도 보존을 위해 문자열로 출력
        "balances": {
            address: {coin_type: str(total) for coin_type, total in coins.items()}
            for address, coins in result.table.to_dict().items()
        },
    }
    print(json.dumps(output, indent=2))
    return 0


async def run_transfer(client: SuiRpcClient, settings: Settings, args: argparse.Namespace) -> int:
    secrets = settings.secrets
    if not secrets.has_signing_keys:
        logger.error("secrets.yaml에 sender/sponsor private_key가 필요합니다")
        return 1

    try:
        service = SponsoredTransferService(
            inventory=client,
            submitter=client,
            sender=SuiKeypair.from_keystore_entry(secrets.sender_private_key),
            sponsor=SuiKeypair.from_keystore_entry(secrets.sponsor_private_key),
        )
        result = await service.transfer(
            recipient=args.to,
            amount=args.amount,
            coin_type=args.coin_type or settings.coin_type,
            coin_ids=args.coins,
            mode=ExecutionMode(args.mode),
        )
    except (KeypairError, TransferError) as e:
        # 서명/제출 전에 중단됨
        logger.error(f"이체 중단: {e}")
        return 1

    print(json.dumps(
        {
            "digest": result.digest,
            "status": result.status,
            "error": result.error,
            "balance_changes": [
                {
                    "owner": _owner_label(change.owner),
                    "coin_type": change.coin_type,
                    "amount": change.amount,
                }
                for change in result.balance_changes
            ],
        },
        indent=2,
    ))
    return 0 if result.is_success else 1


async def main(argv: Sequence[str] | None = None) -> int:
    """Indexer 메인 함수"""
    args = build_parser().parse_args(argv)

    setup_logging("indexer")

    # 1. 설정 로드
    try:
        settings = get_settings(args.config)
    except Exception as e:
        logger.error(f"설정 로드 실패: {e}")
        return 1

    logger.info(f"Network: {settings.network.value}")

    # 2. RPC 클라이언트 생성
    rpc = settings.rpc_config
    client = SuiRpcClient(
        base_url=rpc.url,
        timeout=rpc.timeout,
        max_retries=rpc.max_retries,
        multi_get_batch_size=rpc.multi_get_batch_size,
    )

    # 3. 명령 실행
    try:
        if args.command == "balances":
            return await run_balances(client, args.checkpoint)
        return await run_transfer(client, settings, args)
    except (SuiRpcError, httpx.HTTPError) as e:
        logger.error(f"Full Node 요청 실패: {e}")
        return 1
    finally:
        await client.close()


def run() -> None:
    sys.exit(asyncio.run(main()))
