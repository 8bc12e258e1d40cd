"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class SuiNetwork(str, Enum):
    """접속 네트워크"""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    LOCALNET = "localnet"


class ExecutionMode(str, Enum):
    """트랜잭션 실행 대기 방식

    WAIT_FOR_LOCAL_EXECUTION: Full Node가 직접 실행할 때까지 대기.
        응답에 실행 결과(잔고 변경 포함)가 담기지만 지연이 더 큼.
    WAIT_FOR_EFFECTS_CERT: 검증자 실행 인증서만 대기.
        빠르지만 성공 여부를 응답만으로 확신할 수 없음.
    """

    WAIT_FOR_LOCAL_EXECUTION = "WaitForLocalExecution"
    WAIT_FOR_EFFECTS_CERT = "WaitForEffectsCert"


class ExecutionStatus(str, Enum):
    """트랜잭션 실행 결과 상태"""

    SUCCESS = "success"
    FAILURE = "failure"


class SignatureScheme(int, Enum):
    """서명 스킴 플래그 (키스토어/서명/주소 앞 1바이트)"""

    ED25519 = 0x00
