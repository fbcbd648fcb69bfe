# ============================================================================
# FILE: jamvault/core/barcode.py
# ============================================================================
from typing import Optional
import hashlib
import re
import secrets
import time

BARCODE_PREFIX = "JV"
BARCODE_PATTERN = re.compile(r"^JV-[0-9A-F]{8}-[0-9A-F]{4}$")

def generate_song_barcode(title: str, artist: str, timestamp: Optional[int] = None) -> str:
    """
    Generate a barcode for a song in the form JV-XXXXXXXX-XXXX

    The hash mixes the song attributes with random bytes, so two calls with
    the same arguments still produce different codes.
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    seed = f"{title}{artist}{timestamp}{secrets.token_hex(8)}"
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest().upper()
    return f"{BARCODE_PREFIX}-{digest[:8]}-{digest[8:12]}"

def is_valid_barcode(barcode: str) -> bool:
    return bool(BARCODE_PATTERN.match(barcode or ""))
