"""
이체 조립 에러

조립 전제조건 위반 시 발생. 해당 이체 시도 전체가 중단되며
부분 트랜잭션은 생성/서명/제출되지 않음.
"""


class TransferError(Exception):
    """이체 조립 에러 베이스"""

    pass


class EmptyCoinSetError(TransferError):
    """송신자 코인 ID 목록이 비어 있음"""

    def __init__(self, message: str = "No sender coin ids supplied"):
        self.message = message
        super().__init__(message)


class InvalidAmountError(TransferError):
    """이체 수량이 유효한 양의 정수가 아님"""

    def __init__(self, amount: object, message: str = "Invalid transfer amount"):
        self.amount = amount
        self.message = message
        super().__init__(f"{message}: {amount!r}")
