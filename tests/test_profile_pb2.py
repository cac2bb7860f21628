import pytest

import stack2pprof.profile_pb2 as pb2

# Field numbers of perftools/profiles/profile.proto (github.com/google/pprof)
UPSTREAM_FIELDS = {
    "Profile": {
        "sample_type": 1,
        "sample": 2,
        "mapping": 3,
        "location": 4,
        "function": 5,
        "string_table": 6,
        "drop_frames": 7,
        "keep_frames": 8,
        "time_nanos": 9,
        "duration_nanos": 10,
        "period_type": 11,
        "period": 12,
        "comment": 13,
        "default_sample_type": 14,
        "doc_url": 15,
    },
    "ValueType": {"type": 1, "unit": 2},
    "Sample": {"location_id": 1, "value": 2, "label": 3},
    "Label": {"key": 1, "str": 2, "num": 3, "num_unit": 4},
    "Mapping": {
        "id": 1,
        "memory_start": 2,
        "memory_limit": 3,
        "file_offset": 4,
        "filename": 5,
        "build_id": 6,
        "has_functions": 7,
        "has_filenames": 8,
        "has_line_numbers": 9,
        "has_inline_frames": 10,
    },
    "Location": {"id": 1, "mapping_id": 2, "address": 3, "line": 4, "is_folded": 5},
    "Line": {"function_id": 1, "line": 2, "column": 3},
    "Function": {"id": 1, "name": 2, "system_name": 3, "filename": 4, "start_line": 5},
}


@pytest.mark.parametrize("message_name", sorted(UPSTREAM_FIELDS))
def test_field_numbers_match_upstream(message_name):
    descriptor = getattr(pb2, message_name).DESCRIPTOR
    assert descriptor.full_name == f"perftools.profiles.{message_name}"
    fields = {f.name: f.number for f in descriptor.fields}
    assert fields == UPSTREAM_FIELDS[message_name]


def test_known_encoding():
    # string_table = ["", "a"], sample { location_id: [1], value: [2] }
    profile = pb2.Profile()
    profile.string_table.extend(["", "a"])
    sample = profile.sample.add()
    sample.location_id.append(1)
    sample.value.append(2)
    data = profile.SerializeToString()
    assert data == b"\x12\x06\x0a\x01\x01\x12\x01\x02" + b"\x32\x00\x32\x01a"
