"""Message classes for the pprof `perftools.profiles` schema.

Field numbers follow the public pprof profile.proto. The descriptor is built
at import time in a private pool, so this module does not clash with other
copies of the schema registered in the default pool.
"""

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import message_factory

_PACKAGE = "perftools.profiles"

_F = descriptor_pb2.FieldDescriptorProto

_INT64 = _F.TYPE_INT64
_UINT64 = _F.TYPE_UINT64
_BOOL = _F.TYPE_BOOL
_STRING = _F.TYPE_STRING
_MESSAGE = _F.TYPE_MESSAGE

# (name, number, type, repeated, message type)
_MESSAGES = {
    "Profile": [
        ("sample_type", 1, _MESSAGE, True, "ValueType"),
        ("sample", 2, _MESSAGE, True, "Sample"),
        ("mapping", 3, _MESSAGE, True, "Mapping"),
        ("location", 4, _MESSAGE, True, "Location"),
        ("function", 5, _MESSAGE, True, "Function"),
        ("string_table", 6, _STRING, True, None),
        ("drop_frames", 7, _INT64, False, None),
        ("keep_frames", 8, _INT64, False, None),
        ("time_nanos", 9, _INT64, False, None),
        ("duration_nanos", 10, _INT64, False, None),
        ("period_type", 11, _MESSAGE, False, "ValueType"),
        ("period", 12, _INT64, False, None),
        ("comment", 13, _INT64, True, None),
        ("default_sample_type", 14, _INT64, False, None),
        ("doc_url", 15, _INT64, False, None),
    ],
    "ValueType": [
        ("type", 1, _INT64, False, None),
        ("unit", 2, _INT64, False, None),
    ],
    "Sample": [
        ("location_id", 1, _UINT64, True, None),
        ("value", 2, _INT64, True, None),
        ("label", 3, _MESSAGE, True, "Label"),
    ],
    "Label": [
        ("key", 1, _INT64, False, None),
        ("str", 2, _INT64, False, None),
        ("num", 3, _INT64, False, None),
        ("num_unit", 4, _INT64, False, None),
    ],
    "Mapping": [
        ("id", 1, _UINT64, False, None),
        ("memory_start", 2, _UINT64, False, None),
        ("memory_limit", 3, _UINT64, False, None),
        ("file_offset", 4, _UINT64, False, None),
        ("filename", 5, _INT64, False, None),
        ("build_id", 6, _INT64, False, None),
        ("has_functions", 7, _BOOL, False, None),
        ("has_filenames", 8, _BOOL, False, None),
        ("has_line_numbers", 9, _BOOL, False, None),
        ("has_inline_frames", 10, _BOOL, False, None),
    ],
    "Location": [
        ("id", 1, _UINT64, False, None),
        ("mapping_id", 2, _UINT64, False, None),
        ("address", 3, _UINT64, False, None),
        ("line", 4, _MESSAGE, True, "Line"),
        ("is_folded", 5, _BOOL, False, None),
    ],
    "Line": [
        ("function_id", 1, _UINT64, False, None),
        ("line", 2, _INT64, False, None),
        ("column", 3, _INT64, False, None),
    ],
    "Function": [
        ("id", 1, _UINT64, False, None),
        ("name", 2, _INT64, False, None),
        ("system_name", 3, _INT64, False, None),
        ("filename", 4, _INT64, False, None),
        ("start_line", 5, _INT64, False, None),
    ],
}


def _file_descriptor():
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="perftools/profiles/profile.proto",
        package=_PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        for name, number, field_type, repeated, type_name in fields:
            field = message.field.add(
                name=name,
                number=number,
                type=field_type,
                label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
            )
            if type_name:
                field.type_name = f".{_PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())


def _message_class(name):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    )


Profile = _message_class("Profile")
ValueType = _message_class("ValueType")
Sample = _message_class("Sample")
Label = _message_class("Label")
Mapping = _message_class("Mapping")
Location = _message_class("Location")
Line = _message_class("Line")
Function = _message_class("Function")
