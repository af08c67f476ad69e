"""Fixed pool of workers fed from one bounded queue of chunks.

Each worker owns its aggregate for its whole life and hands it back only once
the queue is closed, so nothing is locked while chunks are being processed.
"""

import logging
import multiprocessing as mp
import queue
import threading
import traceback

from onebrc.aggregate import aggregate_chunk
from onebrc.config import EngineConfig
from onebrc.dispatcher import ChunkDispatcher
from onebrc.errors import BrcError, WorkerCrashedError, WorkerError

logger = logging.getLogger(__name__)


def run_worker(worker_id, chunks, results, abort):
    """Aggregate chunks until the closing sentinel arrives, then report.

    After a failure the worker keeps taking chunks off the queue without
    parsing them, so the dispatcher never blocks on a queue nobody empties.
    """
    aggregate = {}
    error = None
    processed = 0
    while True:
        chunk = chunks.get()
        if chunk is None:
            break
        if error is not None or abort.is_set():
            continue
        try:
            aggregate_chunk(chunk, aggregate)
        except BrcError as exc:
            error = exc
            abort.set()
        except Exception as exc:
            error = WorkerError(f"worker {worker_id}: {exc!r}\n{traceback.format_exc()}")
            abort.set()
        else:
            processed += 1

    logger.debug("worker %d done: %d chunks, %d stations", worker_id, processed, len(aggregate))
    if error is not None:
        results.put((worker_id, None, error))
    else:
        results.put((worker_id, aggregate, None))


def _exitcode(worker):
    # threads have no exit code; they always report through the result queue
    return getattr(worker, "exitcode", None)


class WorkerPool:
    """Runs one dispatcher against ``config.workers`` workers. Single use."""

    def __init__(self, config=None):
        self.config = config or EngineConfig()
        self._workers = []

    def _start(self):
        config = self.config
        if config.backend == "process":
            ctx = mp.get_context(config.start_method)
            self._chunks = ctx.Queue(maxsize=config.queue_capacity)
            self._results = ctx.Queue()
            self._abort = ctx.Event()
            worker_cls = ctx.Process
        else:
            self._chunks = queue.Queue(maxsize=config.queue_capacity)
            self._results = queue.Queue()
            self._abort = threading.Event()
            worker_cls = threading.Thread

        for worker_id in range(config.workers):
            worker = worker_cls(
                target=run_worker,
                args=(worker_id, self._chunks, self._results, self._abort),
                name=f"onebrc-worker-{worker_id}",
                daemon=True,
            )
            worker.start()
            self._workers.append(worker)
        logger.debug("started %d %s workers", config.workers, config.backend)

    def _check_workers(self):
        for worker_id, worker in enumerate(self._workers):
            exitcode = _exitcode(worker)
            if exitcode not in (None, 0):
                raise WorkerCrashedError(worker_id, exitcode)

    def _send(self, chunk):
        while True:
            try:
                self._chunks.put(chunk, timeout=self.config.poll_interval)
                return
            except queue.Full:
                self._check_workers()

    def _close(self):
        """Send one sentinel per worker; each worker stops at the first it takes."""
        for _ in self._workers:
            while True:
                try:
                    self._chunks.put(None, timeout=self.config.poll_interval)
                    break
                except queue.Full:
                    if not any(worker.is_alive() for worker in self._workers):
                        return

    def _collect(self):
        aggregates = []
        errors = []
        pending = set(range(len(self._workers)))
        while pending:
            try:
                worker_id, aggregate, error = self._results.get(timeout=self.config.poll_interval)
            except queue.Empty:
                for worker_id in sorted(pending):
                    exitcode = _exitcode(self._workers[worker_id])
                    if exitcode not in (None, 0):
                        errors.append(WorkerCrashedError(worker_id, exitcode))
                        pending.discard(worker_id)
                continue
            pending.discard(worker_id)
            if error is not None:
                errors.append(error)
            else:
                aggregates.append(aggregate)
        return aggregates, errors

    def _join(self, failed):
        for worker in self._workers:
            worker.join()
        if self.config.backend == "process":
            if failed:
                # chunks may still sit in the pipe with no reader left
                self._chunks.cancel_join_thread()
            self._chunks.close()
            self._results.close()

    def run(self, stream, dispatcher=None):
        """Dispatch ``stream`` to the workers and return their aggregates.

        The first error, whether from reading or from a worker, is raised once
        every worker has stopped.
        """
        if dispatcher is None:
            dispatcher = ChunkDispatcher(self.config.block_size, self.config.max_record_length)
        self._start()

        dispatch_error = None
        try:
            dispatcher.dispatch(stream, self._send, self._abort)
        except BrcError as exc:
            dispatch_error = exc
            self._abort.set()
        except BaseException:
            self._abort.set()
            self._close()
            raise
        self._close()

        aggregates, errors = self._collect()
        self._join(failed=bool(errors) or dispatch_error is not None)
        if dispatch_error is not None:
            raise dispatch_error
        if errors:
            raise errors[0]
        logger.debug("collected %d worker aggregates", len(aggregates))
        return aggregates
