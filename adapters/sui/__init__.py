"""
Sui 어댑터

Sui Full Node JSON-RPC 연동과 Ed25519 키 서명을 담당.
"""

from adapters.sui.errors import KeypairError, SuiRpcError
from adapters.sui.keypair import SuiKeypair, address_from_public_key, verify_signature
from adapters.sui.models import (
    parse_balance_change,
    parse_checkpoint,
    parse_coin,
    parse_execution_result,
    parse_owner,
    parse_transaction,
)
from adapters.sui.rest_client import SuiRpcClient

__all__ = [
    "SuiRpcClient",
    "SuiKeypair",
    "SuiRpcError",
    "KeypairError",
    "address_from_public_key",
    "verify_signature",
    "parse_owner",
    "parse_balance_change",
    "parse_transaction",
    "parse_checkpoint",
    "parse_coin",
    "parse_execution_result",
]
