"""
UserList Protobuf Schema

Message classes for backend/proto/user.proto, built from a FileDescriptorProto
so no protoc step is needed. Keep the field table below identical to the
.proto file: the field numbers are the wire contract.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PROTO_PACKAGE = "qt"
PROTO_FILE = "qt/user.proto"

_T = descriptor_pb2.FieldDescriptorProto

# (name, number, type, json_name)
USER_FIELDS = (
    ("id", 1, _T.TYPE_STRING, "id"),
    ("email", 2, _T.TYPE_STRING, "email"),
    ("role", 3, _T.TYPE_STRING, "role"),
    ("status", 4, _T.TYPE_STRING, "status"),
    ("created_at", 5, _T.TYPE_STRING, "createdAt"),
    ("email_hash", 6, _T.TYPE_BYTES, "emailHash"),
    ("signature", 7, _T.TYPE_BYTES, "signature"),
    ("public_key", 8, _T.TYPE_BYTES, "publicKey"),
)


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=PROTO_FILE,
        package=PROTO_PACKAGE,
        syntax="proto3",
    )

    user = file_proto.message_type.add(name="User")
    for name, number, field_type, json_name in USER_FIELDS:
        user.field.add(
            name=name,
            number=number,
            type=field_type,
            label=_T.LABEL_OPTIONAL,
            json_name=json_name,
        )

    user_list = file_proto.message_type.add(name="UserList")
    user_list.field.add(
        name="users",
        number=1,
        type=_T.TYPE_MESSAGE,
        label=_T.LABEL_REPEATED,
        type_name=f".{PROTO_PACKAGE}.User",
        json_name="users",
    )
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

User = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.User"))
UserList = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.UserList"))
