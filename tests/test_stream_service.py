import pytest
from jamvault.services.stream_service import iter_file_range, parse_range_header

@pytest.mark.parametrize("header,expected", [
    ("bytes=0-99", (0, 99)),
    ("bytes=100-", (100, 999)),
    ("bytes=-100", (900, 999)),
    ("bytes=-5000", (0, 999)),
    ("bytes=900-5000", (900, 999)),
    ("bytes=999-999", (999, 999)),
])
def test_parse_range(header, expected):
    assert parse_range_header(header, 1000) == expected

@pytest.mark.parametrize("header", [
    "bytes=1000-",
    "bytes=50-10",
    "bytes=-0",
    "bytes=-",
    "items=0-10",
    "bytes=0-10,20-30",
    "",
])
def test_unsatisfiable_or_malformed_range(header):
    assert parse_range_header(header, 1000) is None

def test_empty_file_has_no_satisfiable_range():
    assert parse_range_header("bytes=0-", 0) is None

def test_iter_file_range_reads_inclusive_slice(audio_file):
    data = audio_file.read_bytes()
    chunks = list(iter_file_range(str(audio_file), 10, 509, chunk_size=128))
    assert b"".join(chunks) == data[10:510]
    assert len(chunks) == 4
