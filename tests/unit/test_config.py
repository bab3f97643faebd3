"""
Unit tests for segment configuration, credentials, retries and logging setup.
"""

import json

import pytest
import structlog

from bian.exchange.exchange_config import (
    API_KEY_ENV,
    SECRET_KEY_ENV,
    Credentials,
    Endpoint,
    MarketSegment,
    get_exchange_config,
)
from bian.utils import logger as logger_module
from bian.utils.logger import setup_logger, shutdown_logger
from bian.utils.retry import retry_on_error


# ============================================================================
# Segment Configuration Tests
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("segment,rest_url,ws_url", [
    (MarketSegment.SPOT, "https://api.binance.com", "wss://stream.binance.com:9443"),
    (MarketSegment.USD_FUTURES, "https://fapi.binance.com", "wss://fstream.binance.com"),
    (MarketSegment.COIN_FUTURES, "https://dapi.binance.com", "wss://dstream.binance.com"),
])
def test_production_endpoints(segment, rest_url, ws_url):
    """Test production endpoints per segment."""
    endpoint = Endpoint.for_segment(segment)

    assert endpoint.rest_url == rest_url
    assert endpoint.ws_url == ws_url


@pytest.mark.unit
def test_testnet_endpoints():
    """Test testnet endpoints differ from production."""
    endpoint = Endpoint.for_segment(MarketSegment.USD_FUTURES, testnet=True)

    assert endpoint.rest_url == "https://testnet.binancefuture.com"
    assert endpoint.ws_url == "wss://stream.binancefuture.com"


@pytest.mark.unit
def test_get_exchange_config():
    """Test config lookup and rejection of unknown segments."""
    assert get_exchange_config(MarketSegment.SPOT).name == "Binance Spot"

    with pytest.raises(ValueError):
        get_exchange_config("options")


# ============================================================================
# Credentials Tests
# ============================================================================

@pytest.mark.unit
def test_credentials_from_env(monkeypatch):
    """Test reading the key pair from environment variables."""
    monkeypatch.setenv(API_KEY_ENV, "env-key")
    monkeypatch.setenv(SECRET_KEY_ENV, "env-secret")

    credentials = Credentials.from_env()

    assert credentials.api_key == "env-key"
    assert credentials.secret_key == "env-secret"


@pytest.mark.unit
def test_credentials_from_env_missing(monkeypatch):
    """Test a missing variable is named in the error."""
    monkeypatch.setenv(API_KEY_ENV, "env-key")
    monkeypatch.delenv(SECRET_KEY_ENV, raising=False)

    with pytest.raises(KeyError, match=SECRET_KEY_ENV):
        Credentials.from_env()


@pytest.mark.unit
def test_credentials_from_config_file(tmp_path):
    """Test reading the key pair from a JSON configuration file."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({
        "exchange": {"api_key": "file-key", "api_secret": "file-secret", "testnet": True}
    }))

    credentials = Credentials.from_config_file(config_file)

    assert credentials == Credentials("file-key", "file-secret")


@pytest.mark.unit
def test_credentials_missing_file(tmp_path):
    """Test a missing configuration file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        Credentials.from_config_file(tmp_path / "missing.json")


@pytest.mark.unit
def test_credentials_repr_hides_secret():
    """Test the secret key is left out of repr."""
    assert "top-secret" not in repr(Credentials("key", "top-secret"))


# ============================================================================
# Retry Decorator Tests
# ============================================================================

@pytest.mark.unit
def test_retry_returns_first_success():
    """Test a call that succeeds after failures returns its value."""
    calls = []

    @retry_on_error(max_attempts=3, exceptions=(ConnectionError,))
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("refused")
        return "connected"

    assert flaky() == "connected"
    assert len(calls) == 3


@pytest.mark.unit
def test_retry_reraises_last_error():
    """Test the final failure propagates after all attempts."""
    calls = []

    @retry_on_error(max_attempts=2, exceptions=(ConnectionError,))
    def always_fails():
        calls.append(1)
        raise ConnectionError(f"attempt {len(calls)}")

    with pytest.raises(ConnectionError, match="attempt 2"):
        always_fails()

    assert len(calls) == 2


@pytest.mark.unit
def test_retry_ignores_unlisted_errors():
    """Test exceptions outside the list are raised immediately."""
    calls = []

    @retry_on_error(max_attempts=3, exceptions=(ConnectionError,))
    def broken():
        calls.append(1)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        broken()

    assert len(calls) == 1


@pytest.mark.unit
def test_retry_rejects_zero_attempts():
    """Test at least one attempt is required."""
    with pytest.raises(ValueError):
        retry_on_error(max_attempts=0)


# ============================================================================
# Logger Tests
# ============================================================================

@pytest.fixture
def reset_structlog():
    yield
    shutdown_logger()


@pytest.mark.unit
def test_setup_logger_writes_json_lines(tmp_path, reset_structlog):
    """Test the json format writes one JSON object per event to the log dir."""
    logger = setup_logger(log_level="DEBUG", log_dir=str(tmp_path), log_format="json", service_name="bian-test")

    logger.info("listen_key_refreshed", listen_key="abcdefgh...")

    log_files = list(tmp_path.glob("bian_*.log"))
    assert len(log_files) == 1
    record = json.loads(log_files[0].read_text().strip().splitlines()[-1])
    assert record["event"] == "listen_key_refreshed"
    assert record["service"] == "bian-test"
    assert record["level"] == "info"
    assert "timestamp" in record


@pytest.mark.unit
def test_setup_logger_filters_below_level(tmp_path, reset_structlog):
    """Test events below the configured level are dropped."""
    logger = setup_logger(log_level="WARNING", log_dir=str(tmp_path), log_format="console")

    logger.info("hidden_event")
    logger.warning("shown_event")

    content = next(tmp_path.glob("bian_*.log")).read_text()
    assert "hidden_event" not in content
    assert "shown_event" in content


@pytest.mark.unit
def test_shutdown_logger_closes_log_file(tmp_path, reset_structlog):
    """Test shutdown closes the log file and restores structlog defaults."""
    setup_logger(log_dir=str(tmp_path))
    handle = logger_module._log_file

    shutdown_logger()

    assert handle.closed
    assert logger_module._log_file is None
    assert not structlog.is_configured()


@pytest.mark.unit
def test_setup_logger_again_closes_previous_file(tmp_path, reset_structlog):
    """Test reconfiguring closes the file opened by the previous setup."""
    setup_logger(log_dir=str(tmp_path / "first"))
    first = logger_module._log_file

    setup_logger(log_dir=str(tmp_path / "second"))

    assert first.closed
    assert not logger_module._log_file.closed
