"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class SuiEndpoints:
    """Sui 공개 Full Node JSON-RPC 엔드포인트 (고정값)

    공개 노드는 요청 제한이 있으므로 운영 환경에서는 전용 노드 사용 권장.
    전용 노드는 secrets.yaml의 rpc_url로 지정.
    """

    MAINNET_URL: str = "https://fullnode.mainnet.sui.io:443"
    TESTNET_URL: str = "https://fullnode.testnet.sui.io:443"
    DEVNET_URL: str = "https://fullnode.devnet.sui.io:443"
    LOCALNET_URL: str = "http://127.0.0.1:9000"


class Defaults:
    """기본값 상수"""

    # SUI 코인 타입 (1 SUI = 10^9 MIST)
    COIN_TYPE: str = "0x2::sui::SUI"

    # Mysten 공개 노드의 sui_multiGetTransactionBlocks 요청당 최대 digest 수
    # (fullnode.yaml에서 조정 가능)
    MULTI_GET_BATCH_SIZE: int = 50

    # suix_getCoins 페이지 크기
    COIN_PAGE_LIMIT: int = 50

    REQUEST_TIMEOUT_SEC: float = 30.0
    MAX_RETRIES: int = 3

    EXECUTION_MODE: str = "WaitForLocalExecution"



class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SECRETS_FILE: Path = CONFIG_DIR / "secrets.yaml"


class TransferLimits:
    """이체 조립 제한값"""

    # Primary 코인을 제외한 나머지 코인 수가 이 값을 초과할 때만 병합
    MERGE_THRESHOLD: int = 2

    # Move u64 최대값 (split 수량 상한)
    U64_MAX: int = 2**64 - 1
