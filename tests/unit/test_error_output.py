import os

from magicbind.utils.error_output import CapturedOutput, capture_error_output, suppress_error_output


def test_capture_error_output_collects_fd2():
    with capture_error_output() as captured:
        os.write(2, b"magic, 1: Warning: type `sting' invalid\n")
    assert captured
    assert captured.lines == ["magic, 1: Warning: type `sting' invalid"]


def test_capture_error_output_empty():
    with capture_error_output() as captured:
        pass
    assert not captured
    assert captured.text == ""


def test_capture_error_output_filled_on_exception():
    captured = None
    try:
        with capture_error_output() as captured:
            os.write(2, b"boom\n")
            raise RuntimeError("stop")
    except RuntimeError:
        pass
    assert captured.text == "boom\n"


def test_suppress_error_output_discards(capfd):
    with suppress_error_output():
        os.write(2, b"hidden\n")
    os.write(2, b"visible\n")
    assert capfd.readouterr().err == "visible\n"


def test_captured_output_decodes_invalid_bytes():
    captured = CapturedOutput()
    captured.data = b"bad \xff\n\n"
    assert captured.lines == ["bad \\xff"]
