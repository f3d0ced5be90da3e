class LogStorageStrategy:
    """
    Where Logger entries end up.

    Logger holds its own lock around every call, so an implementation does
    not need to be thread-safe. MemoryStrategy keeps entries in a list for
    tests and embedding hosts; LocalFileStrategy appends them to a text file.
    """

    def store_log(self, message, priority, timestamp):
        """Record one entry. ``priority`` is the LogPriority name, ``timestamp`` preformatted."""
        raise NotImplementedError()

    def flush_logs(self):
        """Push out anything buffered. Called by Logger.flush_logs()."""
        raise NotImplementedError()
