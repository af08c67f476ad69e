import logging

from onebrc.config import MAX_RECORD_LENGTH, READ_BUF_SIZE
from onebrc.errors import InputError, RecordTooLongError
from onebrc.splitter import split_last_line

logger = logging.getLogger(__name__)


class ChunkDispatcher:
    """Turns a byte stream into chunks that hold whole records only.

    The stream is read block by block. Everything up to the last line break of
    a block, prefixed by whatever was left over from earlier blocks, becomes
    one chunk; the bytes after that break are carried into the next chunk.
    """

    def __init__(self, block_size=READ_BUF_SIZE, max_record_length=MAX_RECORD_LENGTH):
        self.block_size = block_size
        self.max_record_length = max_record_length

    def _read(self, stream):
        try:
            return stream.read(self.block_size)
        except OSError as exc:
            raise InputError(f"failed to read input: {exc}") from exc

    def _check_carry(self, carry):
        if len(carry) > self.max_record_length:
            raise RecordTooLongError(len(carry), self.max_record_length)

    def iter_chunks(self, stream):
        carry = bytearray()
        while True:
            block = self._read(stream)
            if not block:
                if carry:
                    # last record, not terminated by a line break
                    yield bytes(carry)
                return

            head, tail = split_last_line(block)
            if not head:
                carry += tail
                self._check_carry(carry)
                continue

            if carry:
                carry += head
                chunk = bytes(carry)
            else:
                chunk = bytes(head)
            carry = bytearray(tail)
            self._check_carry(carry)
            yield chunk

    def dispatch(self, stream, send, abort=None):
        """Pass every chunk to ``send`` and return how many were sent.

        ``send`` is expected to block while the work queue is full. Reading
        stops early once ``abort`` is set.
        """
        dispatched = 0
        for chunk in self.iter_chunks(stream):
            if abort is not None and abort.is_set():
                logger.debug("dispatch aborted after %d chunks", dispatched)
                break
            send(chunk)
            dispatched += 1
        logger.debug("dispatched %d chunks", dispatched)
        return dispatched
