import logging
import sys

from onebrc.aggregate import finalize, merge_results
from onebrc.config import EngineConfig
from onebrc.errors import InputError
from onebrc.output import format_results
from onebrc.pool import WorkerPool

logger = logging.getLogger(__name__)


def open_measurements(filename):
    try:
        return open(filename, "rb", buffering=0)
    except OSError as exc:
        raise InputError(f"cannot open {filename}: {exc.strerror or exc}") from exc


def calculate_station_values(source, config=None):
    """Aggregate a measurements file, or an open binary stream, into rounded summaries."""
    config = config or EngineConfig()
    if hasattr(source, "read"):
        aggregates = WorkerPool(config).run(source)
    else:
        with open_measurements(source) as f:
            aggregates = WorkerPool(config).run(f)
    result = merge_results(aggregates)
    logger.debug("merged %d stations from %d workers", len(result), len(aggregates))
    return finalize(result)


def process_file_from_path(filename, config=None, out=None):
    out = out or sys.stdout
    result = calculate_station_values(filename, config)
    print(format_results(result), file=out)
    return result
