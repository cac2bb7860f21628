import csv
import stack2pprof.parse_dto as dto


def _lines_in_file(filename):
    with open(filename, "r") as file:
        for line in file.readlines():
            yield line.strip()


def _content_lines(lines):
    for line in lines:
        if line == "":
            continue
        if line.startswith("#"):
            continue
        yield line


def _csv_rows(lines):
    return csv.reader(
        lines, delimiter=",", quotechar='"', skipinitialspace=True, strict=True
    )


def _opt_str(value):
    return value if value != "" else None


def _opt_int(value):
    return int(value, 0) if value != "" else None


def _parse_IMAGE(args):
    assert len(args) in (3, 4), f"IMAGE expects 3 or 4 arguments, got: {args}"
    return dto.Image(
        path=args[0],
        base=int(args[1], 0),
        size=int(args[2], 0),
        offset=int(args[3], 0) if len(args) == 4 else 0,
    )


def _parse_PROCESS(args):
    assert len(args) in (2, 3), f"PROCESS expects 2 or 3 arguments, got: {args}"
    return dto.Process(
        pid=int(args[0], 0),
        name=args[1],
        command_line=args[2] if len(args) == 3 else "",
    )


def _parse_SAMPLE(args):
    assert len(args) == 3, f"SAMPLE expects 3 arguments, got: {args}"
    return dto.SampleStart(
        pid=int(args[0], 0), tid=_opt_int(args[1]), timestamp=float(args[2])
    )


def _parse_FRAME(args):
    assert len(args) == 5, f"FRAME expects 5 arguments, got: {args}"
    return dto.Frame(
        address=int(args[0], 0),
        image_path=_opt_str(args[1]),
        function_name=_opt_str(args[2]),
        file_name=_opt_str(args[3]),
        line_number=_opt_int(args[4]),
    )


def _parse_INLINE(args):
    assert len(args) == 3, f"INLINE expects 3 arguments, got: {args}"
    return dto.Inline(
        function_name=_opt_str(args[0]),
        file_name=_opt_str(args[1]),
        line_number=_opt_int(args[2]),
    )


_PARSERS = {
    "IMAGE": _parse_IMAGE,
    "PROCESS": _parse_PROCESS,
    "SAMPLE": _parse_SAMPLE,
    "FRAME": _parse_FRAME,
    "INLINE": _parse_INLINE,
}


def _csv_rows_to_objects(rows):
    for row in rows:
        command = row[0].upper()
        args = row[1:]

        if command not in _PARSERS:
            raise ValueError(f"Unknown command {command}")
        try:
            yield _PARSERS[command](args)
        except (AssertionError, ValueError) as e:
            raise ValueError(f"Invalid {command} row {row}: {e}") from e


def parse_text_samples(filename):
    r = _lines_in_file(filename)
    r = _content_lines(r)
    r = _csv_rows(r)
    r = _csv_rows_to_objects(r)
    return r
