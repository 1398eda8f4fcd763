"""Unit tests for BatcherConfig, load_config_from_env and Batcher.from_config."""

import dataclasses

import pytest

from happybatcher.batcher import Batcher
from happybatcher.config import BatcherConfig, load_config_from_env


class TestBatcherConfig:
    def test_defaults(self):
        config = BatcherConfig()
        assert config.flush_at_size is None
        assert config.flush_interval_ms is None
        assert config.skip_empty is False

    def test_frozen(self):
        config = BatcherConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.flush_at_size = 5  # type: ignore[misc]


class TestLoadConfigFromEnv:
    def test_empty_environment_gives_defaults(self):
        assert load_config_from_env({}) == BatcherConfig()

    def test_reads_all_variables(self):
        config = load_config_from_env(
            {
                "HB_FLUSH_AT_SIZE": "50",
                "HB_FLUSH_INTERVAL_MS": "250.5",
                "HB_SKIP_EMPTY": "Yes",
            }
        )
        assert config == BatcherConfig(
            flush_at_size=50, flush_interval_ms=250.5, skip_empty=True
        )

    @pytest.mark.parametrize("raw", ["true", "1", "YES", " true "])
    def test_truthy_skip_empty(self, raw):
        assert load_config_from_env({"HB_SKIP_EMPTY": raw}).skip_empty is True

    @pytest.mark.parametrize("raw", ["false", "0", "no", "off"])
    def test_falsy_skip_empty(self, raw):
        assert load_config_from_env({"HB_SKIP_EMPTY": raw}).skip_empty is False

    def test_blank_values_keep_defaults(self):
        config = load_config_from_env({"HB_FLUSH_AT_SIZE": "  ", "HB_FLUSH_INTERVAL_MS": ""})
        assert config == BatcherConfig()

    def test_bad_size_raises(self):
        with pytest.raises(ValueError, match="HB_FLUSH_AT_SIZE"):
            load_config_from_env({"HB_FLUSH_AT_SIZE": "ten"})

    def test_bad_interval_raises(self):
        with pytest.raises(ValueError, match="HB_FLUSH_INTERVAL_MS"):
            load_config_from_env({"HB_FLUSH_INTERVAL_MS": "soon"})

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("HB_FLUSH_AT_SIZE", "7")
        monkeypatch.delenv("HB_FLUSH_INTERVAL_MS", raising=False)
        monkeypatch.delenv("HB_SKIP_EMPTY", raising=False)

        assert load_config_from_env().flush_at_size == 7


class TestFromConfig:
    def test_no_policies(self):
        batcher = Batcher.from_config(BatcherConfig(), name="plain")

        assert batcher.name == "plain"
        assert batcher.listener_count("push") == 0
        assert batcher.alarms == ()

    def test_size_and_interval(self, scheduler, flushed):
        config = BatcherConfig(flush_at_size=2, flush_interval_ms=1000, skip_empty=True)
        batcher = Batcher.from_config(config, scheduler=scheduler)
        batcher.on("flush", flushed.append)

        batcher.push(1)
        batcher.push(2)
        batcher.push(3)
        scheduler.advance(2000)

        assert flushed == [(1, 2), (3,)]
        assert len(batcher.alarms) == 1

    def test_invalid_size_propagates(self):
        with pytest.raises(ValueError, match="size must be >= 1"):
            Batcher.from_config(BatcherConfig(flush_at_size=0))
