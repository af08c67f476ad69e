import multiprocessing as mp
from dataclasses import dataclass, field
from typing import Optional

from onebrc.errors import ConfigError

READ_BUF_SIZE = 128 * 1024  # 128 KiB
QUEUE_CAPACITY = 1_000
MAX_RECORD_LENGTH = 1024 * 1024
BACKENDS = ("process", "thread")


@dataclass(frozen=True)
class EngineConfig:
    """Tuning knobs for one aggregation run."""

    block_size: int = READ_BUF_SIZE
    queue_capacity: int = QUEUE_CAPACITY
    workers: int = field(default_factory=mp.cpu_count)
    max_record_length: int = MAX_RECORD_LENGTH
    backend: str = "process"
    # multiprocessing start method for the process backend; None keeps the platform default
    start_method: Optional[str] = None
    # seconds a blocked put/get waits before checking that workers are alive
    poll_interval: float = 0.5

    def __post_init__(self):
        for name in ("block_size", "queue_capacity", "workers", "max_record_length"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.backend not in BACKENDS:
            raise ConfigError(f"backend must be one of {', '.join(BACKENDS)}, got {self.backend!r}")
        if self.start_method is not None and self.start_method not in mp.get_all_start_methods():
            raise ConfigError(f"unsupported start method {self.start_method!r}")
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be positive, got {self.poll_interval!r}")

    @classmethod
    def from_args(cls, args):
        """Build a config from parsed command line options, keeping defaults for unset ones."""
        overrides = {
            name: getattr(args, name)
            for name in ("block_size", "queue_capacity", "workers", "max_record_length", "backend")
            if getattr(args, name, None) is not None
        }
        return cls(**overrides)
