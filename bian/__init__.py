"""
bian - Binance REST and WebSocket client

Authenticated REST access and streaming market/account data for the
Binance spot, USD-margined futures and coin-margined futures markets.
"""

__version__ = "0.1.0"
__author__ = "bian-py contributors"
