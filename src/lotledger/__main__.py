"""Entry point for running LotLedger as a module: python -m lotledger."""

from __future__ import annotations

from lotledger.cli import main

if __name__ == "__main__":
    main()
