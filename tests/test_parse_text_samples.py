import pytest

import stack2pprof.parse_dto as parse_dto
from stack2pprof.parse_text_samples import parse_text_samples
from stack2pprof.parse_to_samples import parse_to_samples

TRACE = """\
# sample trace
IMAGE, c:/chrome/chrome.dll, 0x10000, 0x8000
PROCESS, 1, chrome.exe, "chrome.exe --type=renderer --lang=en"
PROCESS, 2, dwm.exe

SAMPLE, 1, 5, 1.25
FRAME, 0x10010, c:/chrome/chrome.dll, Paint, src/paint.cc, 12
INLINE, Helper, src/helper.h, 4
FRAME, 0x10020, c:/chrome/chrome.dll, Main, src/main.cc, 3
SAMPLE, 2, , 2.5
FRAME, 0x500, , , ,
SAMPLE, 9, 1, 3
"""


def _write(tmp_path, text):
    path = tmp_path / "trace.txt"
    path.write_text(text)
    return str(path)


def test_parse_rows(tmp_path):
    items = list(parse_text_samples(_write(tmp_path, TRACE)))
    assert items[0] == parse_dto.Image("c:/chrome/chrome.dll", 0x10000, 0x8000)
    assert items[1] == parse_dto.Process(1, "chrome.exe", "chrome.exe --type=renderer --lang=en")
    assert items[2] == parse_dto.Process(2, "dwm.exe")
    assert items[8] == parse_dto.Frame(0x500, None, None, None, None)
    assert items[7] == parse_dto.SampleStart(2, None, 2.5)


def test_parse_samples(tmp_path):
    samples = list(parse_to_samples(parse_text_samples(_write(tmp_path, TRACE))))
    assert len(samples) == 3

    first = samples[0]
    assert first.process.name == "chrome.exe"
    assert first.process.command_line == "chrome.exe --type=renderer --lang=en"
    assert first.tid == 5
    assert first.timestamp == 1.25
    assert [f.function_name for f in first.frames] == ["Paint", "Main"]
    assert first.frames[0].image.base == 0x10000
    assert first.frames[0].inlined[0].function_name == "Helper"
    assert first.frames[0].inlined[0].line_number == 4

    second = samples[1]
    assert second.tid is None
    assert second.frames[0].image is None
    assert second.frames[0].function_name is None

    assert samples[2].process.name == "Unknown"
    assert samples[2].frames == []


def test_unknown_command(tmp_path):
    with pytest.raises(ValueError, match="Unknown command"):
        list(parse_text_samples(_write(tmp_path, "BOGUS, 1\n")))


def test_wrong_argument_count(tmp_path):
    with pytest.raises(ValueError, match="SAMPLE"):
        list(parse_text_samples(_write(tmp_path, "SAMPLE, 1, 2\n")))


def test_frame_outside_sample(tmp_path):
    items = parse_text_samples(_write(tmp_path, "FRAME, 1, , f, , \n"))
    with pytest.raises(ValueError, match="outside"):
        list(parse_to_samples(items))
