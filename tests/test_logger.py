"""
Tests for the static Logger and its storage strategies.
"""

import pytest

from softbody.logger import LocalFileStrategy, Logger, LogStorageStrategy, MemoryStrategy


class TestLogger:
    """Logger routing and filtering."""

    def test_no_strategy_drops_messages(self):
        assert Logger.log_storage_strategy is None
        assert Logger.log("nobody listens") is None
        assert Logger.log_storage_strategy is None

    def test_messages_reach_strategy(self, memory_log):
        Logger.log("hello", Logger.LogPriority.INFO)
        assert memory_log.messages() == ["hello"]
        assert memory_log.entries[0][1] == "INFO"

    def test_min_priority_filters(self, memory_log):
        Logger.set_min_priority(Logger.LogPriority.WARNING)
        Logger.log("debug detail")
        Logger.log("careful", Logger.LogPriority.WARNING)
        Logger.log("broken", Logger.LogPriority.ERROR)
        assert memory_log.messages() == ["careful", "broken"]

    def test_disable_and_enable(self, memory_log):
        Logger.disable_logging()
        Logger.log("hidden")
        Logger.enable_logging()
        Logger.log("shown")
        assert "hidden" not in memory_log.messages()
        assert "shown" in memory_log.messages()

    def test_flush(self, memory_log):
        Logger.log("one")
        Logger.flush_logs()
        assert memory_log.entries == []

    def test_initialize_uses_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "logs" / "run.txt"
        monkeypatch.setenv("SOFTBODY_LOG_PATH", str(path))
        Logger.initialize()
        assert isinstance(Logger.log_storage_strategy, LocalFileStrategy)
        Logger.log("to disk", Logger.LogPriority.WARNING)
        text = path.read_text()
        assert "[WARNING] to disk" in text


class TestStrategies:
    """Storage strategy behaviour."""

    def test_base_strategy_is_abstract(self):
        strategy = LogStorageStrategy()
        with pytest.raises(NotImplementedError):
            strategy.store_log("m", "DEBUG", "now")
        with pytest.raises(NotImplementedError):
            strategy.flush_logs()

    def test_memory_strategy_cap(self):
        strategy = MemoryStrategy(max_entries=2)
        for i in range(4):
            strategy.store_log(f"m{i}", "DEBUG", "t")
        assert strategy.messages() == ["m2", "m3"]

    def test_local_file_strategy_flush(self, tmp_path):
        path = tmp_path / "log.txt"
        strategy = LocalFileStrategy(str(path))
        strategy.store_log("first", "INFO", "t0")
        assert "first" in path.read_text()
        strategy.flush_logs()
        assert "first" not in path.read_text()
        assert path.read_text().startswith("LOG FLUSHED")
