"""Error types raised by the aggregation pipeline.

Every error knows which stage failed (``read``, ``parse``, ``encode``...) so the
command line can report it. All of them survive pickling because worker
processes hand them back to the parent through a multiprocessing queue.
"""


class BrcError(Exception):
    stage = "run"


class ConfigError(BrcError, ValueError):
    stage = "config"


class InputError(BrcError):
    """The measurement file could not be opened or read."""

    stage = "read"


class RecordTooLongError(InputError):
    """A single record grew past the configured maximum length."""

    def __init__(self, length, limit):
        self.length = length
        self.limit = limit
        super().__init__(f"record of at least {length} bytes exceeds the {limit} byte limit")

    def __reduce__(self):
        return self.__class__, (self.length, self.limit)


class ParseError(BrcError):
    """A record's value is not a number."""

    stage = "parse"

    def __init__(self, raw, offset=None):
        self.raw = raw
        self.offset = offset
        message = f"cannot parse value {raw!r}"
        if offset is not None:
            message += f" in record at chunk offset {offset}"
        super().__init__(message)

    def __reduce__(self):
        return self.__class__, (self.raw, self.offset)


class OutputEncodingError(BrcError):
    stage = "encode"

    def __init__(self, name):
        self.name = name
        super().__init__(f"station name {name!r} is not valid UTF-8")

    def __reduce__(self):
        return self.__class__, (self.name,)


class WorkerCrashedError(BrcError):
    stage = "worker"

    def __init__(self, worker_id, exitcode):
        self.worker_id = worker_id
        self.exitcode = exitcode
        super().__init__(f"worker {worker_id} exited with code {exitcode} before reporting")

    def __reduce__(self):
        return self.__class__, (self.worker_id, self.exitcode)


class WorkerError(BrcError):
    """An unexpected exception inside a worker, carried over as text."""

    stage = "worker"
