"""
forge-extract: build a Foundry contract and export its ABI and bytecode
"""

__version__ = "0.1.0"
