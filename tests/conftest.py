import pytest

from onebrc.config import EngineConfig


class BlockStream:
    """Binary stream that returns the given blocks one ``read`` at a time."""

    def __init__(self, blocks):
        self.blocks = list(blocks)

    def read(self, size=-1):
        if not self.blocks:
            return b""
        return self.blocks.pop(0)


@pytest.fixture
def write_measurements(tmp_path):
    def write(data, name="measurements.txt"):
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return write


@pytest.fixture(params=["thread", "process"])
def backend(request):
    return request.param


@pytest.fixture
def small_config(backend):
    return EngineConfig(workers=3, block_size=64, queue_capacity=4, backend=backend, poll_interval=0.05)


@pytest.fixture
def block_stream():
    return BlockStream
