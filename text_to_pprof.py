#!env python3

import argparse
import logging
import math
import re
import sys

from tqdm import tqdm

from stack2pprof.filter_policy import parse_process_filter, parse_process_id_filter
from stack2pprof.parse_text_samples import parse_text_samples
from stack2pprof.parse_to_samples import parse_to_samples
from stack2pprof.profile_writer import (
    DEFAULT_STRIP_SOURCE_FILE_NAME_PREFIX,
    Options,
    ProfileWriter,
)

logger = logging.getLogger(__name__)


def make_parser():
    parser = argparse.ArgumentParser(
        description="Transform a textual CPU sample trace to a gzipped pprof profile."
    )
    parser.add_argument("filename", type=str, help="The filename of the sample trace")
    parser.add_argument(
        "-o",
        "--outputFileName",
        type=str,
        help="Output file name for gzipped pprof profile",
        default="profile.pb.gz",
    )
    parser.add_argument(
        "-p",
        "--processFilter",
        type=str,
        help="Process names (comma-separated) to include; * for all processes",
        default="chrome.exe,dwm.exe,audiodg.exe",
    )
    parser.add_argument(
        "-i",
        "--processIdFilter",
        type=str,
        help="Process ids (comma-separated) to include; * for all processes",
        default="",
    )
    parser.add_argument(
        "--includeInlinedFunctions",
        action="store_true",
        help="Include inlined functions in the profile",
    )
    parser.add_argument(
        "--stripSourceFileNamePrefix",
        type=str,
        help="Prefix regex to strip out of source file names",
        default=DEFAULT_STRIP_SOURCE_FILE_NAME_PREFIX,
    )
    parser.add_argument(
        "--timeStart", type=float, help="Start of time range to export in seconds"
    )
    parser.add_argument(
        "--timeEnd", type=float, help="End of time range to export in seconds"
    )
    parser.add_argument(
        "--includeProcessIds",
        action="store_true",
        help="Include process ids in the profile",
    )
    parser.add_argument(
        "--includeProcessAndThreadIds",
        action="store_true",
        help="Include process and thread ids in the profile",
    )
    parser.add_argument(
        "--splitChromeProcesses",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Split chrome.exe processes by type (parsed from the command line)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def _strip_prefix_pattern(pattern):
    try:
        re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid source file name prefix {pattern!r}: {e}") from None
    return pattern


def make_options(args):
    """Converts the parsed arguments into writer options; raises ValueError on bad filters."""
    return Options(
        trace_file_name=args.filename,
        include_inlined_functions=args.includeInlinedFunctions,
        include_process_ids=args.includeProcessIds,
        include_process_and_thread_ids=args.includeProcessAndThreadIds,
        split_chrome_processes=args.splitChromeProcesses,
        strip_source_file_name_prefix=_strip_prefix_pattern(args.stripSourceFileNamePrefix),
        time_start=args.timeStart if args.timeStart is not None else 0,
        time_end=args.timeEnd if args.timeEnd is not None else math.inf,
        process_filter_set=parse_process_filter(args.processFilter),
        process_id_filter_set=parse_process_id_filter(args.processIdFilter),
    )


def run(filename, out, options, progress=True):
    """Converts the sample trace in `filename` into a profile in `out`."""
    samples = parse_to_samples(parse_text_samples(filename))
    writer = ProfileWriter(options)
    for sample in tqdm(samples, desc="Samples", unit="sample", disable=not progress):
        writer.add(sample)
    return writer.write(out)


def main(argv=None):
    parser = make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        options = make_options(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        size = run(args.filename, args.outputFileName, options)
    except (OSError, ValueError) as e:
        logger.error("Failed to convert %s: %s", args.filename, e)
        return 1
    print(f"Wrote {size:,} bytes to {args.outputFileName}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
