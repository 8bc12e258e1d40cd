"""
pytest 공통 fixture 정의
"""

import tempfile
from pathlib import Path

import pytest

from adapters.sui.keypair import SuiKeypair
from core.config.loader import Settings


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """테스트 간 Settings 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def sender_keypair() -> SuiKeypair:
    """고정 송신자 키페어 (비밀키 0x01 * 32)"""
    return SuiKeypair.from_secret_key(bytes([1] * 32))


@pytest.fixture
def sponsor_keypair() -> SuiKeypair:
    """고정 스폰서 키페어 (비밀키 0x02 * 32)"""
    return SuiKeypair.from_secret_key(bytes([2] * 32))


@pytest.fixture
def temp_secrets_file(temp_dir: Path, sender_keypair: SuiKeypair, sponsor_keypair: SuiKeypair) -> Path:
    """테스트용 secrets.yaml 파일 생성"""
    secrets_content = f"""# 테스트용 secrets.yaml
network: testnet

rpc_url: ""

sender:
  private_key: "{sender_keypair.to_keystore_entry()}"

sponsor:
  private_key: "{sponsor_keypair.to_keystore_entry()}"
"""
    secrets_path = temp_dir / "secrets.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_read_only(temp_dir: Path) -> Path:
    """키 없이 전용 노드만 지정한 secrets.yaml (잔고 집계 전용)"""
    secrets_content = """network: mainnet
rpc_url: "https://sui-rpc.example.com"
"""
    secrets_path = temp_dir / "secrets_read_only.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_invalid_network(temp_dir: Path) -> Path:
    """잘못된 네트워크의 secrets.yaml 파일 생성"""
    secrets_content = """network: invalid_network
"""
    secrets_path = temp_dir / "secrets_invalid.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path
