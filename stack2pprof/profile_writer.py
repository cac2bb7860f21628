import gzip
import logging
import math
from dataclasses import dataclass

import stack2pprof.dto as dto
import stack2pprof.profile_pb2 as pb2
from stack2pprof.aggregator import StackAggregator
from stack2pprof.filter_policy import FilterPolicy
from stack2pprof.interning import InterningTables

logger = logging.getLogger(__name__)

DEFAULT_STRIP_SOURCE_FILE_NAME_PREFIX = r"^c:/b/s/w/ir/cache/builder/"

_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


@dataclass
class Options:
    """Options controlling how samples end up in the profile."""

    trace_file_name: str = ""
    include_inlined_functions: bool = False
    include_process_ids: bool = False
    include_process_and_thread_ids: bool = False
    include_process_name: bool = True
    split_chrome_processes: bool = True
    strip_source_file_name_prefix: str = DEFAULT_STRIP_SOURCE_FILE_NAME_PREFIX
    time_start: float = 0
    time_end: float = math.inf
    process_filter_set: frozenset[str] | None = None
    process_id_filter_set: frozenset[int] | None = None


class ProfileWriter:
    """Builds a pprof profile out of CPU samples and writes it to a file."""

    def __init__(self, options: Options | None = None):
        self._options = options or Options()
        self._tables = InterningTables(self._options.strip_source_file_name_prefix)
        self._aggregator = StackAggregator(
            self._tables,
            include_inlined_functions=self._options.include_inlined_functions,
            include_process_ids=self._options.include_process_ids,
            include_process_and_thread_ids=self._options.include_process_and_thread_ids,
            include_process_name=self._options.include_process_name,
            split_chrome_processes=self._options.split_chrome_processes,
        )
        self._filter = FilterPolicy(
            process_names=self._options.process_filter_set,
            process_ids=self._options.process_id_filter_set,
            time_start=self._options.time_start,
            time_end=self._options.time_end,
        )
        strings = self._tables.strings
        self._sample_type = (strings.intern("samples"), strings.intern("count"))
        self._comment = (
            strings.intern(f"Converted from {self._options.trace_file_name}")
            if self._options.trace_file_name
            else None
        )
        self._first_timestamp = None
        self._last_timestamp = None
        self._total_count = 0
        self._excluded_count = 0
        self._profile = None

    @property
    def tables(self):
        return self._tables

    @property
    def sample_count(self):
        """Number of distinct aggregated samples."""
        return len(self._aggregator.samples)

    @property
    def total_count(self):
        """Number of raw samples kept in the profile."""
        return self._total_count

    def add(self, sample: dto.Sample):
        """Adds a sample object to the profile; returns whether it was kept."""
        return self.add_sample(
            pid=sample.process.pid,
            tid=sample.tid,
            process_name=sample.process.name,
            timestamp=sample.timestamp,
            frames=sample.frames,
            command_line=sample.process.command_line,
        )

    def add_sample(self, pid, tid, process_name, timestamp, frames, command_line=""):
        """Adds a sample to the profile if the filters accept it.

        Returns True if the sample was kept.
        """
        if self._profile is not None:
            raise RuntimeError("Cannot add samples to a finalized profile")
        if not self._filter.should_include(pid, process_name, timestamp):
            self._excluded_count += 1
            return False

        self._aggregator.add(pid, tid, process_name, frames, command_line)
        self._total_count += 1
        if self._first_timestamp is None or timestamp < self._first_timestamp:
            self._first_timestamp = timestamp
        if self._last_timestamp is None or timestamp > self._last_timestamp:
            self._last_timestamp = timestamp
        return True

    def finalize(self):
        """Returns the profile built so far; no more samples can be added after."""
        if self._profile is None:
            self._profile = self._build_profile()
            logger.debug(
                "Finalized profile: %d samples in %d buckets, %d excluded",
                self._total_count,
                self.sample_count,
                self._excluded_count,
            )
        return self._profile

    def write(self, filename):
        """Writes the gzipped profile to `filename`; returns the number of bytes written."""
        data = gzip.compress(self.finalize().SerializeToString())
        with open(filename, "wb") as f:
            f.write(data)
        logger.info("Wrote %d bytes to %s", len(data), filename)
        return len(data)

    def _build_profile(self):
        profile = pb2.Profile()
        sample_type = profile.sample_type.add()
        sample_type.type, sample_type.unit = self._sample_type
        profile.default_sample_type = self._sample_type[0]
        if self._comment is not None:
            profile.comment.append(self._comment)

        if self._first_timestamp is not None:
            profile.time_nanos = _nanos(self._first_timestamp)
            profile.duration_nanos = _nanos(self._last_timestamp - self._first_timestamp)
        else:
            profile.time_nanos = _nanos(self._options.time_start)

        for sample in self._aggregator.samples:
            s = profile.sample.add()
            s.location_id.extend(sample.location_ids)
            s.value.append(sample.count)
            for label in sample.labels:
                pb_label = s.label.add()
                pb_label.key = label.key
                if label.str:
                    pb_label.str = label.str
                else:
                    pb_label.num = label.num

        for m in self._tables.mappings:
            mapping = profile.mapping.add()
            mapping.id = m.id
            mapping.memory_start = m.memory_start & _UINT64_MASK
            mapping.memory_limit = m.memory_limit & _UINT64_MASK
            mapping.file_offset = m.file_offset & _UINT64_MASK
            mapping.filename = m.filename

        for loc in self._tables.locations:
            location = profile.location.add()
            location.id = loc.id
            location.mapping_id = loc.mapping_id
            location.address = loc.address & _UINT64_MASK
            # pprof wants the innermost function first
            for entry in reversed(loc.lines):
                line = location.line.add()
                line.function_id = entry.function_id
                line.line = entry.line

        for f in self._tables.functions:
            function = profile.function.add()
            function.id = f.id
            function.name = f.name
            function.system_name = f.system_name
            function.filename = f.filename

        profile.string_table.extend(self._tables.strings)
        return profile


def _nanos(seconds):
    if not math.isfinite(seconds):
        return 0
    return int(round(seconds * 1_000_000_000))
