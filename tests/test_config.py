"""Settings loading from the environment."""

from ridemeter.config import Settings


class TestSettings:
    def test_defaults(self, config):
        assert config.round_trips_enabled
        assert config.recurring_enabled
        assert config.currency == "USD"
        assert config.cost_tolerance == 0.01

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RIDEMETER_CURRENCY", "ZWL")
        monkeypatch.setenv("RIDEMETER_ROUND_TRIPS_ENABLED", "false")
        config = Settings(_env_file=None)
        assert config.currency == "ZWL"
        assert not config.round_trips_enabled

    def test_unprefixed_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("CURRENCY", "EUR")
        assert Settings(_env_file=None).currency == "USD"
