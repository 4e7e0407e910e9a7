import pytest

from namada_explorer.config import ConfigurationError, ExplorerConfig


def test_defaults(monkeypatch):
    for var in ("DATABASE_URL", "TENDERMINT_ADDR", "TX_FANOUT", "PORT", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    config = ExplorerConfig.from_env()

    assert config.tendermint_addr == "http://127.0.0.1:26657"
    assert config.tx_fanout == 8
    assert config.cors_origins == ["*"]


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://indexer@db/namada")
    monkeypatch.setenv("TENDERMINT_ADDR", "https://rpc.example:443")
    monkeypatch.setenv("TX_FANOUT", "4")
    monkeypatch.setenv("RPC_TIMEOUT", "2.5")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = ExplorerConfig.from_env()

    assert config.database_url == "postgresql://indexer@db/namada"
    assert config.tendermint_addr == "https://rpc.example:443"
    assert config.tx_fanout == 4
    assert config.rpc_timeout == 2.5
    assert config.cors_origins == ["http://a.test", "http://b.test"]
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "var, value",
    [
        ("TX_FANOUT", "0"),
        ("TX_FANOUT", "many"),
        ("RPC_TIMEOUT", "-1"),
        ("TENDERMINT_ADDR", "localhost"),
        ("DATABASE_URL", "mysql://db/namada"),
        ("LOG_LEVEL", "chatty"),
    ],
)
def test_invalid_values(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    with pytest.raises(ConfigurationError):
        ExplorerConfig.from_env()


def test_pool_bounds(monkeypatch):
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "20")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "5")
    with pytest.raises(ConfigurationError):
        ExplorerConfig.from_env()
