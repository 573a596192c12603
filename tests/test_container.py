import io

import pytest

from avrorecord import (
    ContainerDecoder,
    ContainerEncoder,
    Field,
    FieldType,
    InvalidEncoding,
    Schema,
    SchemaError,
    TruncatedInput,
    open_container,
)
from avrorecord.codec.ContainerFormat import MAGIC
from avrorecord.util.AvroBinaryUtil import encodeBytes, encodeLong, encodeString
from avrorecord.util.ByteBuf import ByteBuf


@pytest.fixture
def users(make_user):
    return [make_user("Ann", 30), make_user("Bob", 41, email="bob@example.com"), make_user("Cy", 7, active=False)]


def _header(metadata, sync):
    out = ByteBuf()
    out.writeBytes(MAGIC)
    encodeLong(out, len(metadata))
    for k, v in metadata.items():
        encodeString(out, k)
        encodeBytes(out, v)
    encodeLong(out, 0)
    out.writeBytes(sync)
    return out.toBytes()


@pytest.mark.parametrize("codec", ["null", "deflate"])
def test_container_round_trip(user_schema, users, codec):
    data = ContainerEncoder(user_schema, codec=codec, records_per_block=2).encode(users)
    reader = ContainerDecoder(data)
    assert reader.schema == user_schema
    assert reader.codec == codec
    assert list(reader) == users


def test_container_header_read_eagerly(user_schema, users, sync_marker):
    data = ContainerEncoder(user_schema, sync_marker=sync_marker, metadata={"app": b"demo"}).encode(users)
    reader = open_container(data)
    assert reader.sync_marker == sync_marker
    assert reader.metadata["app"] == b"demo"
    assert reader.writer_schema.name == "com.example.User"


def test_container_over_single_byte_chunks(user_schema, users, one_byte_chunks):
    data = ContainerEncoder(user_schema, records_per_block=1).encode(users)
    with ContainerDecoder(one_byte_chunks(data)) as reader:
        assert list(reader) == users


def test_container_written_to_file(user_schema, users, tmp_path):
    path = tmp_path / "users.avro"
    with open(path, "wb") as fp:
        ContainerEncoder(user_schema).write(fp, users)
    assert list(ContainerDecoder(path.read_bytes())) == users


def test_reader_schema_must_match(user_schema, users):
    data = ContainerEncoder(user_schema).encode(users)
    other = Schema([Field("name", FieldType.STRING), Field("age", FieldType.INT32)], name="User")
    with pytest.raises(SchemaError):
        ContainerDecoder(data, reader_schema=other)
    assert list(ContainerDecoder(data, reader_schema=user_schema)) == users


def test_bad_magic(user_schema, users):
    data = ContainerEncoder(user_schema).encode(users)
    with pytest.raises(InvalidEncoding):
        ContainerDecoder(b"Obj\x02" + data[4:])
    with pytest.raises(InvalidEncoding):
        ContainerDecoder(b"PK")


def test_truncated_header(user_schema, users):
    data = ContainerEncoder(user_schema).encode(users)
    header_len = len(ContainerEncoder(user_schema).header())
    for end in (0, 3, 10, header_len - 1):
        with pytest.raises(TruncatedInput):
            ContainerDecoder(data[:end])


def test_missing_schema_metadata(sync_marker):
    with pytest.raises(SchemaError):
        ContainerDecoder(_header({"avro.codec": b"null"}, sync_marker))


def test_unsupported_codec(user_schema, sync_marker):
    meta = {"avro.schema": user_schema.toJson().encode(), "avro.codec": b"snappy"}
    with pytest.raises(InvalidEncoding):
        ContainerDecoder(_header(meta, sync_marker))


def test_codec_defaults_to_null(user_schema, users, sync_marker):
    enc = ContainerEncoder(user_schema, sync_marker=sync_marker)
    data = _header({"avro.schema": user_schema.toJson().encode()}, sync_marker) + enc.encodeBlocks(users)
    assert list(ContainerDecoder(data)) == users


def test_close_releases_source(user_schema, users):
    state = {"closed": False}
    data = ContainerEncoder(user_schema, records_per_block=1).encode(users)

    def source():
        try:
            yield from (data[i:i + 8] for i in range(0, len(data), 8))
        finally:
            state["closed"] = True

    reader = ContainerDecoder(source())
    it = iter(reader)
    assert next(it) == users[0]
    it.close()
    assert state["closed"] is True


def test_encoder_validates_arguments(user_schema):
    with pytest.raises(ValueError):
        ContainerEncoder(user_schema, codec="snappy")
    with pytest.raises(ValueError):
        ContainerEncoder(user_schema, sync_marker=b"x")
    with pytest.raises(ValueError):
        ContainerEncoder(user_schema, records_per_block=0)


def test_stream_object_source(user_schema, users):
    from avrorecord import iter_stream

    fp = io.BytesIO(ContainerEncoder(user_schema).encode(users))
    assert list(ContainerDecoder(iter_stream(fp))) == users
