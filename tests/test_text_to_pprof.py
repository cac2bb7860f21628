import gzip

import pytest

import stack2pprof.profile_pb2 as pb2
import text_to_pprof

TRACE = """\
PROCESS, 1, chrome.exe, chrome.exe --type=gpu-process
PROCESS, 2, notepad.exe
SAMPLE, 1, 5, 1
FRAME, 0x10, , Draw, c:/b/s/w/ir/cache/builder/src/draw.cc, 1
SAMPLE, 1, 5, 2
FRAME, 0x10, , Draw, c:/b/s/w/ir/cache/builder/src/draw.cc, 1
SAMPLE, 2, 7, 3
FRAME, 0x20, , Edit, edit.cc, 2
"""


@pytest.fixture
def trace_file(tmp_path):
    path = tmp_path / "trace.txt"
    path.write_text(TRACE)
    return str(path)


def _read(path):
    profile = pb2.Profile()
    with open(path, "rb") as f:
        profile.ParseFromString(gzip.decompress(f.read()))
    return profile


def test_main_writes_profile(trace_file, tmp_path, capsys):
    out = str(tmp_path / "out.pb.gz")
    assert text_to_pprof.main([trace_file, "-o", out]) == 0
    assert f"bytes to {out}" in capsys.readouterr().out

    profile = _read(out)
    assert [s.value[0] for s in profile.sample] == [2]
    strings = profile.string_table
    assert "chrome.exe (gpu-process)" in strings
    assert "src/draw.cc" in strings
    assert "notepad.exe" not in strings


def test_main_all_processes(trace_file, tmp_path):
    out = str(tmp_path / "out.pb.gz")
    assert text_to_pprof.main([trace_file, "-o", out, "-p", "*", "--timeStart", "2"]) == 0
    assert sum(s.value[0] for s in _read(out).sample) == 2


def test_main_process_id_filter(trace_file, tmp_path):
    out = str(tmp_path / "out.pb.gz")
    args = [trace_file, "-o", out, "-p", "*", "-i", "2", "--includeProcessIds"]
    assert text_to_pprof.main(args) == 0
    profile = _read(out)
    assert len(profile.sample) == 1
    assert "notepad.exe" in profile.string_table


def test_main_no_split(trace_file, tmp_path):
    out = str(tmp_path / "out.pb.gz")
    assert text_to_pprof.main([trace_file, "-o", out, "--no-splitChromeProcesses"]) == 0
    assert "chrome.exe (gpu-process)" not in _read(out).string_table


def test_main_rejects_bad_process_id_filter(trace_file, tmp_path):
    with pytest.raises(SystemExit) as e:
        text_to_pprof.main([trace_file, "-i", "abc", "-o", str(tmp_path / "x")])
    assert e.value.code == 2


def test_main_reports_write_errors(trace_file, tmp_path):
    out = str(tmp_path / "missing" / "out.pb.gz")
    assert text_to_pprof.main([trace_file, "-o", out]) == 1


def test_main_reports_missing_input(tmp_path):
    out = str(tmp_path / "out.pb.gz")
    assert text_to_pprof.main([str(tmp_path / "nope.txt"), "-o", out]) == 1


def test_main_rejects_bad_strip_prefix(trace_file, tmp_path, capsys):
    out = tmp_path / "out.pb.gz"
    with pytest.raises(SystemExit) as e:
        text_to_pprof.main(
            [trace_file, "-o", str(out), "--stripSourceFileNamePrefix", "(("]
        )
    assert e.value.code == 2
    assert "Invalid source file name prefix" in capsys.readouterr().err
    assert not out.exists()
