import io

import pytest

from huffman_archiver.archive_format import (
    ArchiveKind,
    ArchiveMember,
    GlobalTreeArchive,
    SeparateTreesArchive,
    SingleFileArchive,
    decode_member_path,
    encode_member_path,
    folder_layout,
    read_kind,
    read_packed,
)
from huffman_archiver.errors import ArchiveIOError, FormatError, VarIntOverrun

# tree for {a: 2, b: 1} is (b, a): b -> 0, a -> 1
GLOBAL_ONE_FILE = (
    b"G"
    + b"\x98\x8c\x20"  # tree
    + b"\x01"  # file count
    + b"\x01\x02"  # path bits, content bits
    + b"\x01\x00\x00\x00\x80"  # path "a"
    + b"\x02\x00\x00\x00\x80"  # content "ab"
)
SEPARATE_ONE_FILE = b"S" + b"\x01" + b"\x98\x8c\x20" + b"\x01\x02" + b"\x80" + b"\x80"

NESTED = [
    ArchiveMember("a.txt", b"hello hello hello"),
    ArchiveMember("empty.bin", b""),
    ArchiveMember("sub/deeper/copy.txt", b"hello hello hello"),
    ArchiveMember("sub/other.bin", bytes(range(256)) * 3),
]


def write_bytes(layout, members):
    out = io.BytesIO()
    size = layout.write(out, members)
    assert size == len(out.getvalue())
    return out.getvalue()


def test_single_file_layout():
    out = io.BytesIO()
    tree, size = SingleFileArchive.write(out, b"ab")
    assert out.getvalue() == b"F\x98\x4c\x40\x02\x00\x00\x00\x40"
    assert size == 9
    assert tree.structure() == (ord("a"), ord("b"))


@pytest.mark.parametrize("data", [b"x", b"xxxx", b"aaaabbbccd", bytes(range(256)) * 4])
def test_single_file_round_trip(data):
    out = io.BytesIO()
    SingleFileArchive.write(out, data)
    assert SingleFileArchive.read(io.BytesIO(out.getvalue())) == data


def test_single_file_rejects_empty_data():
    with pytest.raises(ArchiveIOError):
        SingleFileArchive.write(io.BytesIO(), b"")


def test_global_layout():
    assert write_bytes(GlobalTreeArchive, [ArchiveMember("a", b"ab")]) == GLOBAL_ONE_FILE


def test_separate_layout():
    assert write_bytes(SeparateTreesArchive, [ArchiveMember("a", b"ab")]) == SEPARATE_ONE_FILE


@pytest.mark.parametrize("layout", [GlobalTreeArchive, SeparateTreesArchive])
def test_folder_round_trip(layout):
    archive = write_bytes(layout, NESTED)
    assert list(layout.iter_members(io.BytesIO(archive))) == NESTED


@pytest.mark.parametrize("layout", [GlobalTreeArchive, SeparateTreesArchive])
def test_folder_round_trip_single_symbol(layout):
    members = [ArchiveMember("a", b"aaa")]
    archive = write_bytes(layout, members)
    assert list(layout.iter_members(io.BytesIO(archive))) == members


@pytest.mark.parametrize("layout", [GlobalTreeArchive, SeparateTreesArchive])
def test_folder_rejects_no_members(layout):
    with pytest.raises(ArchiveIOError):
        layout.write(io.BytesIO(), [])


def test_non_ascii_path_round_trip():
    members = [ArchiveMember("папка/файл.txt", b"data")]
    archive = write_bytes(GlobalTreeArchive, members)
    assert list(GlobalTreeArchive.iter_members(io.BytesIO(archive))) == members


def test_read_kind():
    assert read_kind(io.BytesIO(b"F")) is ArchiveKind.SINGLE
    assert read_kind(io.BytesIO(b"G")) is ArchiveKind.GLOBAL
    assert read_kind(io.BytesIO(b"S")) is ArchiveKind.SEPARATE


def test_unknown_tag_reports_hex():
    with pytest.raises(FormatError, match="0x5a"):
        read_kind(io.BytesIO(b"Z"))


def test_empty_archive():
    with pytest.raises(FormatError):
        read_kind(io.BytesIO(b""))


def test_tag_mismatch():
    with pytest.raises(FormatError):
        SingleFileArchive.read(io.BytesIO(GLOBAL_ONE_FILE))
    with pytest.raises(FormatError):
        list(SeparateTreesArchive.iter_members(io.BytesIO(GLOBAL_ONE_FILE)))


def test_folder_layout_dispatch():
    assert folder_layout(ArchiveKind.GLOBAL) is GlobalTreeArchive
    assert folder_layout(ArchiveKind.SEPARATE) is SeparateTreesArchive
    with pytest.raises(FormatError):
        folder_layout(ArchiveKind.SINGLE)


def test_global_header_disagrees_with_varint():
    tampered = bytearray(GLOBAL_ONE_FILE)
    # declare 2 path bits while the 4-byte header says 1
    tampered[5] = 0x02
    with pytest.raises(FormatError, match="disagree"):
        list(GlobalTreeArchive.iter_members(io.BytesIO(bytes(tampered))))


@pytest.mark.parametrize("archive", [GLOBAL_ONE_FILE, SEPARATE_ONE_FILE])
def test_truncated_folder_archive(archive):
    layout = folder_layout(read_kind(io.BytesIO(archive)))
    with pytest.raises(FormatError):
        list(layout.iter_members(io.BytesIO(archive[:-1])))


def test_truncated_file_count():
    with pytest.raises(VarIntOverrun):
        list(SeparateTreesArchive.iter_members(io.BytesIO(b"S")))


def test_members_before_corruption_are_yielded():
    archive = write_bytes(SeparateTreesArchive, NESTED)
    members = SeparateTreesArchive.iter_members(io.BytesIO(archive[:-1]))
    assert next(members) == NESTED[0]
    with pytest.raises(FormatError):
        list(members)


def test_read_packed_with_explicit_count():
    bits = read_packed(io.BytesIO(b"\xa0\xff"), 3)
    assert bits.to01() == "101"


def test_read_packed_declares_more_than_available():
    with pytest.raises(FormatError):
        read_packed(io.BytesIO(b"\x10\x00\x00\x00\xff"))
    with pytest.raises(FormatError):
        read_packed(io.BytesIO(b"\x01\x00"))


@pytest.mark.parametrize(
    "raw",
    [b"", b"/etc/passwd", b"../up", b"a/../../b", b"..\\evil", b"a\\b", b"C:/x", b"c:evil"],
)
def test_unsafe_member_paths(raw):
    with pytest.raises(FormatError):
        decode_member_path(raw)


def test_non_utf8_path_bytes_kept_as_is():
    path = decode_member_path(b"caf\xe9.txt")
    assert path == "caf\udce9.txt"
    assert encode_member_path(path) == b"caf\xe9.txt"


@pytest.mark.parametrize("layout", [GlobalTreeArchive, SeparateTreesArchive])
def test_non_utf8_member_path_round_trip(layout):
    members = [ArchiveMember("caf\udce9.txt", b"latte"), ArchiveMember("ok.txt", b"tea")]
    archive = write_bytes(layout, members)
    assert list(layout.iter_members(io.BytesIO(archive))) == members


def test_unsafe_path_rejected_on_read():
    archive = write_bytes(GlobalTreeArchive, [ArchiveMember("../evil", b"x")])
    with pytest.raises(FormatError):
        list(GlobalTreeArchive.iter_members(io.BytesIO(archive)))


def test_encoded_records_carry_bits_only():
    tree, records = GlobalTreeArchive.encode_members([ArchiveMember("a", b"ab")])
    assert [(r.path_bits.to01(), r.content_bits.to01(), r.tree) for r in records] == [
        ("1", "10", None)
    ]
    record = SeparateTreesArchive.encode_member(ArchiveMember("a", b"ab"))
    assert record.tree.structure() == tree.structure()
