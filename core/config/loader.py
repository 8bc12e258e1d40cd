"""
설정 로더

secrets.yaml 로드 및 RPC 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

from core.constants import Defaults, Paths, SuiEndpoints
from core.types import SuiNetwork


@dataclass(frozen=True)
class Secrets:
    """보안 설정 (secrets.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지.
    키는 Sui CLI 키스토어(~/.sui/sui_config/sui.keystore)의 base64 항목.
    잔고 집계만 할 때는 키가 없어도 됨.
    """

    network: SuiNetwork
    rpc_url: str | None = None
    coin_type: str = Defaults.COIN_TYPE
    sender_private_key: str | None = None
    sponsor_private_key: str | None = None

    @property
    def has_signing_keys(self) -> bool:
        """송신자/스폰서 키가 모두 있는지 여부"""
        return bool(self.sender_private_key and self.sponsor_private_key)


@dataclass(frozen=True)
class RpcConfig:
    """Full Node 연결 설정"""

    url: str
    timeout: float = Defaults.REQUEST_TIMEOUT_SEC
    max_retries: int = Defaults.MAX_RETRIES
    multi_get_batch_size: int = Defaults.MULTI_GET_BATCH_SIZE


class SecretsLoadError(Exception):
    """Secrets 로드 실패 예외"""

    pass


_NETWORK_URLS: dict[SuiNetwork, str] = {
    SuiNetwork.MAINNET: SuiEndpoints.MAINNET_URL,
    SuiNetwork.TESTNET: SuiEndpoints.TESTNET_URL,
    SuiNetwork.DEVNET: SuiEndpoints.DEVNET_URL,
    SuiNetwork.LOCALNET: SuiEndpoints.LOCALNET_URL,
}


def _read_private_key(data: dict, section: str) -> str | None:
    section_data = data.get(section)
    if section_data is None:
        return None
    if not isinstance(section_data, dict):
        raise SecretsLoadError(f"secrets.yaml의 '{section}' 섹션 형식이 잘못되었습니다")
    key = section_data.get("private_key")
    return key or None


def load_secrets(path: Path | None = None) -> Secrets:
    """secrets.yaml 파일 로드

    Args:
        path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Secrets 인스턴스

    Raises:
        SecretsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 network인 경우
    """
    if path is None:
        path = Paths.SECRETS_FILE

    if not path.exists():
        raise SecretsLoadError(f"secrets.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SecretsLoadError(f"secrets.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SecretsLoadError("secrets.yaml이 비어 있습니다")

    if not isinstance(data, dict):
        raise SecretsLoadError("secrets.yaml 최상위는 매핑이어야 합니다")

    # network 검증
    network_str = data.get("network")
    if network_str is None:
        raise SecretsLoadError("secrets.yaml에 'network' 필드가 없습니다")

    try:
        network = SuiNetwork(network_str)
    except ValueError as e:
        valid_networks = [n.value for n in SuiNetwork]
        raise ValueError(
            f"유효하지 않은 network입니다: '{network_str}'. "
            f"유효한 값: {valid_networks}"
        ) from e

    return Secrets(
        network=network,
        rpc_url=data.get("rpc_url") or None,
        coin_type=data.get("coin_type") or Defaults.COIN_TYPE,
        sender_private_key=_read_private_key(data, "sender"),
        sponsor_private_key=_read_private_key(data, "sponsor"),
    )


def get_rpc_config(secrets: Secrets) -> RpcConfig:
    """네트워크에 따른 RPC 설정 반환

    rpc_url이 지정되어 있으면 전용 노드를 우선 사용.

    Args:
        secrets: Secrets 인스턴스

    Returns:
        RpcConfig 인스턴스
    """
    url = secrets.rpc_url or _NETWORK_URLS[secrets.network]
    return RpcConfig(url=url)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    secrets.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _secrets: Secrets | None = None

    def __new__(cls, secrets_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, secrets_path: Path | None = None) -> None:
        if self._secrets is None:
            self._secrets = load_secrets(secrets_path)

    @property
    def secrets(self) -> Secrets:
        assert self._secrets is not None
        return self._secrets

    @property
    def network(self) -> SuiNetwork:
        """접속 네트워크"""
        return self.secrets.network

    @property
    def coin_type(self) -> str:
        """기본 코인 타입"""
        return self.secrets.coin_type

    @property
    def rpc_config(self) -> RpcConfig:
        """현재 네트워크의 RPC 설정"""
        return get_rpc_config(self.secrets)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._secrets = None


def get_settings(secrets_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        secrets_path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(secrets_path)
