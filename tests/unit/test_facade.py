import pytest

import magicbind
from magicbind import flags
from magicbind.errors import MagicError


def test_open_returns_session(engine):
    with magicbind.open(flags.RAW, engine=engine) as session:
        assert isinstance(session, magicbind.Session)
        assert session.flags == flags.RAW
    assert session.closed is True


def test_open_with_paths(engine):
    with magicbind.open(flags.NONE, "/custom/magic", engine=engine) as session:
        assert session.paths == ["/custom/magic"]


@pytest.mark.parametrize(
    ("factory", "expected"),
    [
        (magicbind.mime, flags.MIME),
        (magicbind.type, flags.MIME_TYPE),
        (magicbind.encoding, flags.MIME_ENCODING),
    ],
)
def test_mime_factories(engine, factory, expected):
    with factory(engine=engine) as session:
        assert session.flags == expected


def test_one_shot_buffer_closes_session(engine):
    assert magicbind.buffer(b"RGEM", engine=engine) == "Ruby Gem image"
    assert magicbind.buffer(b"RGEM", flags.MIME_TYPE, engine=engine) == "application/x-ruby-gem"
    assert engine.open_handles() == []


def test_one_shot_file_and_descriptor(engine, tmp_path):
    sample = tmp_path / "doc.pdf"
    sample.write_bytes(b"%PDF-1.5")
    assert magicbind.file(sample, engine=engine) == "PDF document"
    with sample.open("rb") as handle:
        assert magicbind.descriptor(handle, engine=engine) == "PDF document"
    assert engine.open_handles() == []


def test_one_shot_closes_on_failure(engine):
    engine.invalid_paths = {"/usr/share/misc/magic"}
    with pytest.raises(MagicError):
        magicbind.buffer(b"RGEM", engine=engine)
    assert engine.open_handles() == []


def test_one_shot_compile_and_check(engine):
    engine.invalid_paths = {"/bad.magic"}
    assert magicbind.compile("/good.magic", engine=engine) is True
    assert magicbind.check("/good.magic", engine=engine) is True
    assert magicbind.check("/bad.magic", engine=engine) is False
    with pytest.raises(MagicError):
        magicbind.compile("/bad.magic", engine=engine)
    assert engine.open_handles() == []


def test_version_functions(engine):
    assert magicbind.version(engine=engine) == 545
    assert magicbind.version_tuple(engine=engine) == (5, 45)
    assert magicbind.version_string(engine=engine) == "5.45"


def test_default_engine_used_without_argument(default_engine):
    assert magicbind.buffer(b"%PDF-1.5") == "PDF document"
    assert "classify_buffer" in default_engine.call_names()


def test_process_default_auto_load(default_engine):
    magicbind.set_default_auto_load(False)
    with pytest.raises(MagicError, match="not loaded"):
        magicbind.buffer(b"RGEM")
    assert default_engine.open_handles() == []
