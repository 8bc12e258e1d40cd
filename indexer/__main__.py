"""
Indexer 진입점

실행 방법:
    python -m indexer balances
    python -m indexer transfer --to 0x... --amount 1_000_000_000
"""

from indexer.bootstrap import run

if __name__ == "__main__":
    run()
