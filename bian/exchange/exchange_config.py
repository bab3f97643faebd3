"""
Market segment configuration.

This module contains segment-specific settings:
- REST and WebSocket endpoints (production and testnet)
- Credentials loading
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Union


class MarketSegment(Enum):
    """Supported market segments."""
    SPOT = "spot"
    USD_FUTURES = "usd_futures"      # USDⓈ-M futures
    COIN_FUTURES = "coin_futures"    # COIN-M futures


@dataclass(frozen=True)
class ExchangeConfig:
    """
    Configuration for one market segment.

    REST paths are relative to the REST base URL and carry their own
    version prefix (``api/v3/...``, ``fapi/v1/...``, ``dapi/v1/...``).
    """
    segment: MarketSegment
    name: str

    # Endpoints
    rest_base_url: str
    rest_testnet_url: str
    websocket_base_url: str
    websocket_testnet_url: str


# ============================================================================
# SEGMENT CONFIGURATION
# ============================================================================

SPOT_CONFIG = ExchangeConfig(
    segment=MarketSegment.SPOT,
    name="Binance Spot",

    rest_base_url="https://api.binance.com",
    rest_testnet_url="https://testnet.binance.vision",

    websocket_base_url="wss://stream.binance.com:9443",
    websocket_testnet_url="wss://testnet.binance.vision",
)

USD_FUTURES_CONFIG = ExchangeConfig(
    segment=MarketSegment.USD_FUTURES,
    name="Binance USD-M Futures",

    rest_base_url="https://fapi.binance.com",
    rest_testnet_url="https://testnet.binancefuture.com",

    websocket_base_url="wss://fstream.binance.com",
    websocket_testnet_url="wss://stream.binancefuture.com",
)

COIN_FUTURES_CONFIG = ExchangeConfig(
    segment=MarketSegment.COIN_FUTURES,
    name="Binance COIN-M Futures",

    rest_base_url="https://dapi.binance.com",
    rest_testnet_url="https://testnet.binancefuture.com",

    websocket_base_url="wss://dstream.binance.com",
    websocket_testnet_url="wss://dstream.binancefuture.com",
)


EXCHANGE_CONFIGS: Dict[MarketSegment, ExchangeConfig] = {
    MarketSegment.SPOT: SPOT_CONFIG,
    MarketSegment.USD_FUTURES: USD_FUTURES_CONFIG,
    MarketSegment.COIN_FUTURES: COIN_FUTURES_CONFIG,
}


def get_exchange_config(segment: MarketSegment) -> ExchangeConfig:
    """
    Get configuration for a market segment.

    Args:
        segment: Market segment

    Returns:
        ExchangeConfig instance

    Raises:
        ValueError: If segment is not supported
    """
    if segment not in EXCHANGE_CONFIGS:
        raise ValueError(f"Unsupported market segment: {segment}")

    return EXCHANGE_CONFIGS[segment]


@dataclass(frozen=True)
class Endpoint:
    """Resolved base URLs for one segment in one environment."""
    rest_url: str
    ws_url: str

    @classmethod
    def for_segment(cls, segment: MarketSegment, testnet: bool = False) -> "Endpoint":
        config = get_exchange_config(segment)
        if testnet:
            return cls(config.rest_testnet_url, config.websocket_testnet_url)
        return cls(config.rest_base_url, config.websocket_base_url)


# ============================================================================
# CREDENTIALS
# ============================================================================

API_KEY_ENV = "BINANCE_API_KEY"
SECRET_KEY_ENV = "BINANCE_SECRET_KEY"


@dataclass(frozen=True)
class Credentials:
    """
    API key pair.

    The API key is sent with every request as a header; the secret key is
    only used locally to compute signatures.
    """
    api_key: str
    secret_key: str = field(repr=False)

    @classmethod
    def from_env(cls) -> "Credentials":
        """
        Read credentials from ``BINANCE_API_KEY`` / ``BINANCE_SECRET_KEY``.

        Raises:
            KeyError: If either variable is not set
        """
        try:
            return cls(os.environ[API_KEY_ENV], os.environ[SECRET_KEY_ENV])
        except KeyError as e:
            raise KeyError(f"Environment variable {e.args[0]} is not set") from e

    @classmethod
    def from_config_file(cls, path: Union[str, Path]) -> "Credentials":
        """
        Read credentials from a JSON configuration file.

        Expected layout::

            {"exchange": {"api_key": "...", "api_secret": "...", "testnet": true}}

        Raises:
            FileNotFoundError: If the file does not exist
            KeyError: If the exchange section lacks a key
        """
        config_file = Path(path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_file, 'r') as f:
            exchange = json.load(f)["exchange"]

        return cls(exchange["api_key"], exchange["api_secret"])
