from .srr import (
    StoredFile,
    decode_le,
    ensure_valid_srr,
    extract_stored_files,
    filter_by_extension,
    is_valid_srr,
    iter_stored_files,
    signature_mismatches,
)

__all__ = [
    "StoredFile",
    "decode_le",
    "ensure_valid_srr",
    "extract_stored_files",
    "filter_by_extension",
    "is_valid_srr",
    "iter_stored_files",
    "signature_mismatches",
]
