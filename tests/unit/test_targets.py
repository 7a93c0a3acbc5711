import io
import os
from errno import EBADF
from pathlib import Path

import pytest

from magicbind.targets import (
    BufferTarget,
    DescriptorTarget,
    PathTarget,
    StreamTarget,
    buffer_target,
    descriptor_target,
    path_target,
    stream_target,
    to_target,
)


def test_path_target_encodes(tmp_path):
    target = path_target(tmp_path / "sample.bin")
    assert isinstance(target, PathTarget)
    assert target.path == os.fsencode(tmp_path / "sample.bin")
    assert target.display == str(tmp_path / "sample.bin")


def test_path_target_rejects_nul():
    with pytest.raises(ValueError, match="embedded null byte"):
        path_target("bad\x00name")


def test_path_target_rejects_wrong_type():
    with pytest.raises(TypeError):
        path_target(42)


def test_buffer_target_keeps_nul_bytes():
    target = buffer_target(b"a\x00b")
    assert target.data == b"a\x00b"
    assert buffer_target(bytearray(b"xy")).data == b"xy"
    assert buffer_target(memoryview(b"xy")).data == b"xy"
    assert buffer_target("text").data == b"text"


def test_buffer_target_rejects_wrong_type():
    with pytest.raises(TypeError):
        buffer_target(3)


def test_descriptor_target(tmp_path):
    sample = tmp_path / "sample.bin"
    sample.write_bytes(b"data")
    with sample.open("rb") as handle:
        target = descriptor_target(handle.fileno())
        assert target.fileno() == handle.fileno()


def test_descriptor_target_closed():
    target = descriptor_target(10_000)
    with pytest.raises(OSError) as excinfo:
        target.fileno()
    assert excinfo.value.errno == EBADF
    assert excinfo.value.strerror == "closed stream"


def test_descriptor_target_negative():
    with pytest.raises(OSError, match="closed stream"):
        DescriptorTarget(-1).fileno()


def test_descriptor_target_rejects_bool():
    with pytest.raises(TypeError):
        descriptor_target(True)


def test_stream_target_closed(tmp_path):
    sample = tmp_path / "sample.bin"
    sample.write_bytes(b"data")
    handle = sample.open("rb")
    target = stream_target(handle)
    handle.close()
    with pytest.raises(OSError, match="closed stream"):
        target.fileno()


def test_stream_target_without_descriptor():
    target = stream_target(io.BytesIO(b"data"))
    with pytest.raises(TypeError, match="use buffer instead"):
        target.fileno()


def test_stream_target_rejects_non_stream():
    with pytest.raises(TypeError):
        stream_target(object())


def test_to_target_dispatch(tmp_path):
    assert isinstance(to_target("/etc/hosts"), PathTarget)
    assert isinstance(to_target(Path("/etc/hosts")), PathTarget)
    assert isinstance(to_target(b"\x7fELF"), BufferTarget)
    assert isinstance(to_target(0), DescriptorTarget)
    sample = tmp_path / "sample.bin"
    sample.write_bytes(b"data")
    with sample.open("rb") as handle:
        assert isinstance(to_target(handle), StreamTarget)


def test_to_target_passes_targets_through():
    target = BufferTarget(b"x")
    assert to_target(target) is target


def test_to_target_rejects_unknown():
    with pytest.raises(TypeError):
        to_target(1.5)
    with pytest.raises(TypeError):
        to_target(None)
