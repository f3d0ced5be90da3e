from .log_storage_strategy import LogStorageStrategy

class MemoryStrategy(LogStorageStrategy):
    """
    Keeps log entries in a list. Useful for hosts that render their own log
    panel and for tests that assert on emitted messages.
    """

    def __init__(self, max_entries=None):
        self.max_entries = max_entries
        self.entries = []

    def store_log(self, message, priority, timestamp):
        self.entries.append((timestamp, priority, message))
        if self.max_entries is not None and len(self.entries) > self.max_entries:
            del self.entries[0]

    def flush_logs(self):
        self.entries.clear()

    def messages(self, priority=None):
        """Return stored messages, optionally only those with the given priority name."""
        return [m for _, p, m in self.entries if priority is None or p == priority]
