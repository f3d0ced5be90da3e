import threading
from datetime import datetime
from enum import Enum
import os
from .local_file_strategy import LocalFileStrategy

class Logger:
    """
    Process-wide logger for the simulator.
    Static class: all state lives on the class, call sites use Logger.log(...).
    """

    class LogPriority(Enum):
        DEBUG = 1
        INFO = 2
        WARNING = 3
        ERROR = 4
        CRITICAL = 5
        DEFAULT = 6


    is_logging_enabled = True
    log_storage_strategy = None
    min_priority = LogPriority.DEBUG
    _log_lock = threading.Lock()
    _strategy_lock = threading.Lock()
    _initialize_lock = threading.Lock()
    _toggle_lock = threading.Lock()
    _flush_lock = threading.Lock()

    # INSTALL THE DEFAULT FILE STRATEGY
    @classmethod
    def initialize(cls):
        """
        Installs a LocalFileStrategy if no strategy is set yet.
        The file path comes from SOFTBODY_LOG_PATH when defined.
        """
        with cls._initialize_lock:
            if cls.log_storage_strategy is None:
                file_location = os.getenv("SOFTBODY_LOG_PATH", "/tmp/softbody_logs.txt")
                cls.set_log_storage_strategy(LocalFileStrategy(file_location))
                cls.log(f"Logger initialized with file storage at {file_location}.", cls.LogPriority.INFO)

    # LOG WITH MESSAGE AND PRIORITY
    @classmethod
    def log(cls, message, priority=LogPriority.DEBUG):
        """
        Stores a message through the current strategy.

        Dropped while logging is disabled, while no strategy is installed, or
        when priority is below min_priority.

        Parameters:
        message (str): The log message.
        priority (LogPriority): Priority of the message (default DEBUG).
        """
        with cls._log_lock:
            if not (cls.is_logging_enabled and cls.log_storage_strategy):
                return
            if priority.value < cls.min_priority.value:
                return
            cls.log_storage_strategy.store_log(
                message, priority.name, datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            )

    @classmethod
    def set_log_storage_strategy(cls, log_storage_strategy):
        with cls._strategy_lock:
            cls.log_storage_strategy = log_storage_strategy

    @classmethod
    def set_min_priority(cls, priority):
        """Ignore messages below the given LogPriority."""
        with cls._strategy_lock:
            cls.min_priority = priority

    @classmethod
    def flush_logs(cls):
        with cls._flush_lock:
            if cls.is_logging_enabled and cls.log_storage_strategy:
                cls.log_storage_strategy.flush_logs()

    @classmethod
    def disable_logging(cls):
        with cls._toggle_lock:
            cls.log("Logging disabled")
            cls.is_logging_enabled = False

    @classmethod
    def enable_logging(cls):
        with cls._toggle_lock:
            cls.is_logging_enabled = True
            cls.log("Logging enabled")

    @classmethod
    def reset(cls):
        """Drop the storage strategy and restore defaults."""
        with cls._strategy_lock:
            cls.log_storage_strategy = None
            cls.min_priority = cls.LogPriority.DEBUG
            cls.is_logging_enabled = True
