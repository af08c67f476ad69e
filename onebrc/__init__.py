from onebrc.aggregate import StationStats, StationSummary, finalize, merge_results, round1
from onebrc.config import EngineConfig
from onebrc.dispatcher import ChunkDispatcher
from onebrc.engine import calculate_station_values, process_file_from_path
from onebrc.errors import (
    BrcError,
    ConfigError,
    InputError,
    OutputEncodingError,
    ParseError,
    RecordTooLongError,
    WorkerCrashedError,
    WorkerError,
)
from onebrc.output import format_results
from onebrc.pool import WorkerPool

__version__ = "1.0.0"
