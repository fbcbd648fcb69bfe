# ============================================================================
# FILE: jamvault/services/stream_service.py
# ============================================================================
from typing import Iterator, Optional, Tuple
import re

AUDIO_MEDIA_TYPE = "audio/mpeg"
CHUNK_SIZE = 64 * 1024

_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$", re.IGNORECASE)

def parse_range_header(range_header: str, file_size: int) -> Optional[Tuple[int, int]]:
    """
    Parse a single-range 'Range' header into inclusive (start, end).

    Supports 'bytes=a-b', 'bytes=a-' and suffix ranges 'bytes=-n'. The end
    is clamped to the last byte. Returns None when the header is malformed
    or the range cannot be satisfied.
    """
    match = _RANGE_RE.match(range_header or "")
    if not match or file_size <= 0:
        return None
    start_text, end_text = match.groups()

    if not start_text:
        if not end_text:
            return None
        suffix = int(end_text)
        if suffix == 0:
            return None
        return max(0, file_size - suffix), file_size - 1

    start = int(start_text)
    end = int(end_text) if end_text else file_size - 1
    if start >= file_size or end < start:
        return None
    return start, min(end, file_size - 1)

def iter_file_range(path: str, start: int, end: int, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield bytes start..end (inclusive) of a file in chunks"""
    remaining = end - start + 1
    with open(path, "rb") as f:
        f.seek(start)
        while remaining > 0:
            chunk = f.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
