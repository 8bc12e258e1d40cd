"""
Sui 어댑터 에러
"""


class SuiRpcError(Exception):
    """Sui JSON-RPC 에러

    JSON-RPC error 객체 또는 HTTP 에러 응답을 받았을 때 발생.
    """

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"Sui RPC Error [{code}]: {message}")


class KeypairError(Exception):
    """키 디코딩/서명 검증 실패"""

    pass
