"""Unit tests for ChainSettings, ChainContext and CachedGasPrice."""

import pytest

from gasprice.src.ChainContext import (
    DEFAULT_UPDATE_INTERVAL,
    CachedGasPrice,
    ChainContext,
    ChainSettings,
    UnrecognizedChainError,
    check_chain_id,
)
from gasprice.src.GasPriceRefresher import RefreshOutcome

HOME_ENV = {
    "HOME_RPC_URL": "https://rpc.home.test",
    "HOME_BRIDGE_ADDRESS": "0x5FbDB2315678afecb367f032d93F642f64180aa3",
    "HOME_GAS_PRICE_ORACLE_URL": "https://gasprice.home.test/",
    "HOME_GAS_PRICE_SPEED_TYPE": "standard",
    "HOME_GAS_PRICE_UPDATE_INTERVAL": "30000",
    "HOME_GAS_PRICE_FALLBACK": "1000000000",
}


class TestCheckChainId:
    """Test chain id validation."""

    def test_known_chains(self) -> None:
        """home and foreign should be accepted."""
        assert check_chain_id("home") == "home"
        assert check_chain_id("foreign") == "foreign"

    @pytest.mark.parametrize("chain_id", ["unknown", "Home", "", None])
    def test_unknown_chain(self, chain_id: object) -> None:
        """Anything else should raise UnrecognizedChainError."""
        with pytest.raises(UnrecognizedChainError, match="Unrecognized chainId"):
            check_chain_id(chain_id)

    def test_is_value_error(self) -> None:
        """UnrecognizedChainError should be a ValueError carrying the chain id."""
        error = UnrecognizedChainError("side")
        assert isinstance(error, ValueError)
        assert error.chain_id == "side"
        assert str(error) == "Unrecognized chainId 'side'"


class TestChainSettingsFromEnv:
    """Test ChainSettings.from_env()."""

    def test_home(self) -> None:
        """HOME_ variables should populate home settings."""
        settings = ChainSettings.from_env("home", HOME_ENV)

        assert settings.chain_id == "home"
        assert settings.rpc_url == "https://rpc.home.test"
        assert settings.bridge_address == "0x5FbDB2315678afecb367f032d93F642f64180aa3"
        assert settings.bridge_abi_path is None
        assert settings.oracle_url == "https://gasprice.home.test/"
        assert settings.speed_type == "standard"
        assert settings.update_interval_ms == 30000
        assert settings.update_interval == 30.0
        assert settings.fallback_gas_price == 1_000_000_000

    def test_foreign_ignores_home(self) -> None:
        """Foreign settings should only read FOREIGN_ variables."""
        env = dict(
            HOME_ENV,
            FOREIGN_GAS_PRICE_SPEED_TYPE="fast",
            FOREIGN_GAS_PRICE_FALLBACK="3000000000",
        )
        settings = ChainSettings.from_env("foreign", env)

        assert settings.chain_id == "foreign"
        assert settings.speed_type == "fast"
        assert settings.oracle_url is None
        assert settings.bridge_address is None
        assert settings.fallback_gas_price == 3_000_000_000

    def test_foreign_without_own_fallback(self) -> None:
        """The home fallback should not satisfy the foreign chain."""
        with pytest.raises(ValueError, match="FOREIGN_GAS_PRICE_FALLBACK"):
            ChainSettings.from_env("foreign", HOME_ENV)

    def test_default_interval_when_unset(self) -> None:
        """Unset interval should use DEFAULT_UPDATE_INTERVAL."""
        settings = ChainSettings.from_env("home", {"HOME_GAS_PRICE_FALLBACK": "1"})
        assert settings.update_interval_ms is None
        assert settings.update_interval == DEFAULT_UPDATE_INTERVAL / 1000 == 600.0

    def test_default_interval_when_zero(self) -> None:
        """Zero interval should use DEFAULT_UPDATE_INTERVAL."""
        settings = ChainSettings.from_env(
            "home",
            {"HOME_GAS_PRICE_UPDATE_INTERVAL": "0", "HOME_GAS_PRICE_FALLBACK": "1"},
        )
        assert settings.update_interval == 600.0

    def test_blank_values_are_unset(self) -> None:
        """Empty variables should be treated as unset."""
        settings = ChainSettings.from_env(
            "home",
            {
                "HOME_GAS_PRICE_ORACLE_URL": "",
                "HOME_BRIDGE_ADDRESS": "",
                "HOME_GAS_PRICE_FALLBACK": "7",
            },
        )
        assert settings.oracle_url is None
        assert settings.bridge_address is None

    def test_zero_fallback_is_a_value(self) -> None:
        """An explicit zero fallback should be kept."""
        settings = ChainSettings.from_env("home", {"HOME_GAS_PRICE_FALLBACK": "0"})
        assert settings.fallback_gas_price == 0

    @pytest.mark.parametrize("env", [{}, {"HOME_GAS_PRICE_FALLBACK": " "}])
    def test_missing_fallback(self, env: dict[str, str]) -> None:
        """An unset or blank fallback should raise ValueError naming the variable."""
        with pytest.raises(ValueError, match="HOME_GAS_PRICE_FALLBACK must be set"):
            ChainSettings.from_env("home", env)

    def test_malformed_number(self) -> None:
        """Malformed numbers should raise ValueError naming the variable."""
        with pytest.raises(ValueError, match="HOME_GAS_PRICE_UPDATE_INTERVAL"):
            ChainSettings.from_env(
                "home",
                {"HOME_GAS_PRICE_UPDATE_INTERVAL": "10s", "HOME_GAS_PRICE_FALLBACK": "1"},
            )

    def test_negative_fallback(self) -> None:
        """Negative fallback gas price should be rejected."""
        with pytest.raises(ValueError, match="fallback"):
            ChainSettings.from_env("home", {"HOME_GAS_PRICE_FALLBACK": "-1"})

    @pytest.mark.parametrize(
        "address",
        ["0xdead", "bridge", "0x5FbDB2315678afecb367f032d93F642f64180aA3"],
    )
    def test_malformed_bridge_address(self, address: str) -> None:
        """Malformed or badly checksummed bridge addresses should be rejected."""
        env = dict(HOME_ENV, HOME_BRIDGE_ADDRESS=address)
        with pytest.raises(ValueError, match=r"\[home\] invalid bridge address"):
            ChainSettings.from_env("home", env)

    def test_lowercase_bridge_address(self) -> None:
        """Lowercase addresses carry no checksum and should be accepted."""
        env = dict(HOME_ENV, HOME_BRIDGE_ADDRESS=HOME_ENV["HOME_BRIDGE_ADDRESS"].lower())
        settings = ChainSettings.from_env("home", env)
        assert settings.bridge_address == "0x5fbdb2315678afecb367f032d93f642f64180aa3"

    def test_unknown_chain(self) -> None:
        """Unknown chain ids should raise UnrecognizedChainError."""
        with pytest.raises(UnrecognizedChainError):
            ChainSettings.from_env("sidechain", HOME_ENV)

    def test_reads_os_environ_by_default(self, monkeypatch) -> None:
        """Without a mapping, os.environ should be used."""
        monkeypatch.delenv("FOREIGN_BRIDGE_ADDRESS", raising=False)
        monkeypatch.setenv("FOREIGN_GAS_PRICE_FALLBACK", "42")
        assert ChainSettings.from_env("foreign").fallback_gas_price == 42


class TestChainContext:
    """Test ChainContext construction."""

    def test_from_settings(self) -> None:
        """Context should mirror settings and hold the contract handle."""
        settings = ChainSettings.from_env("home", HOME_ENV)
        contract = object()

        context = ChainContext.from_settings(settings, contract)

        assert context.chain_id == "home"
        assert context.chain_query is contract
        assert context.oracle_url == "https://gasprice.home.test/"
        assert context.speed_type == "standard"
        assert context.update_interval == 30.0
        assert context.fallback_gas_price == 1_000_000_000

    def test_immutable(self) -> None:
        """Contexts should be frozen."""
        context = ChainContext.from_settings(ChainSettings("home", 1), None)
        with pytest.raises(AttributeError):
            context.oracle_url = "https://other.test/"  # type: ignore[misc]


class TestCachedGasPrice:
    """Test CachedGasPrice updates."""

    def test_initial_state(self) -> None:
        """Cache should start at the fallback with no speed table."""
        cache = CachedGasPrice(5_000_000_000)
        assert cache.gas_price == 5_000_000_000
        assert cache.speeds is None

    def test_apply_full_outcome(self) -> None:
        """Both fields should be replaced when present."""
        cache = CachedGasPrice(5)
        cache.apply(RefreshOutcome(gas_price=50, speeds={"fast": 50}))
        assert cache.gas_price == 50
        assert cache.speeds == {"fast": 50}

    def test_apply_keeps_absent_fields(self) -> None:
        """Absent fields should leave the cache as it was."""
        cache = CachedGasPrice(5)
        cache.apply(RefreshOutcome(gas_price=50, speeds={"fast": 50}))
        cache.apply(RefreshOutcome(gas_price=7))
        assert cache.gas_price == 7
        assert cache.speeds == {"fast": 50}

        cache.apply(RefreshOutcome())
        assert cache.gas_price == 7
        assert cache.speeds == {"fast": 50}

    def test_apply_zero_gas_price(self) -> None:
        """A fetched zero should replace the cached value."""
        cache = CachedGasPrice(5)
        cache.apply(RefreshOutcome(gas_price=0))
        assert cache.gas_price == 0
