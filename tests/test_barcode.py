from jamvault.core.barcode import generate_song_barcode, is_valid_barcode

def test_barcode_format():
    barcode = generate_song_barcode("Song", "Artist")
    assert is_valid_barcode(barcode)
    assert barcode.startswith("JV-")
    assert len(barcode) == 16

def test_same_inputs_give_different_barcodes():
    first = generate_song_barcode("Song", "Artist", timestamp=1)
    second = generate_song_barcode("Song", "Artist", timestamp=1)
    assert first != second

def test_invalid_barcodes():
    assert not is_valid_barcode("")
    assert not is_valid_barcode(None)
    assert not is_valid_barcode("JV-1234567-ABCD")
    assert not is_valid_barcode("XX-12345678-ABCD")
    assert not is_valid_barcode("JV-12345678-abcd")
