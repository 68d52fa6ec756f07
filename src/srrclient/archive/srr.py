"""SRR container scanner.

An SRR file recreates a set of RAR volumes and carries the small files of a
release (NFO, SFV, samples' SRS) as "stored file" blocks. This module only
understands enough of the format to find those blocks and return their
contents; no other block type is interpreted and no CRC is checked.

Stored file block layout::

    HEAD_CRC    0x6A6A                      2 bytes
    HEAD_TYPE   0x6A                        1 byte
    HEAD_FLAGS  0x8000 always set           2 bytes
    HEAD_SIZE   limited to 0xFFFF           2 bytes
    ADD_SIZE    size of the stored file     4 bytes
    NAME_SIZE   length of NAME              2 bytes
    NAME        path of the stored file     NAME_SIZE bytes
    [stored file data]                      ADD_SIZE bytes
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from srrclient.core.errors import InvalidContainer, MalformedContainer
from srrclient.core.settings import (
    DATA_SIZE_OFFSET,
    HEADER_MIN_SIZE,
    NAME_OFFSET,
    NAME_SIZE_OFFSET,
    SRR_SIGNATURE,
    STORED_FILE_MARKER,
)


@dataclass(frozen=True)
class StoredFile:
    """A file embedded in an SRR container."""
    name: str
    data: bytes


def signature_mismatches(data: bytes) -> bool:
    """Return True when ``data`` does not start with the SRR signature.

    Buffers shorter than the signature always mismatch.
    """
    return data[:len(SRR_SIGNATURE)] != SRR_SIGNATURE


def is_valid_srr(data: bytes) -> bool:
    return not signature_mismatches(data)


def ensure_valid_srr(data: bytes) -> None:
    """Raise InvalidContainer unless ``data`` carries the SRR signature."""
    if signature_mismatches(data):
        raise InvalidContainer("The downloaded file isn't a valid SRR file.")


def decode_le(data: bytes) -> int:
    """Decode an unsigned little-endian integer; an empty slice decodes to 0."""
    result = 0
    for index, byte in enumerate(data):
        result |= byte << (index * 8)
    return result


def _marker_at(data: bytes, offset: int, lenient: bool) -> bool:
    if lenient:
        # Older clients compared data[i+1] twice, so only two bytes counted.
        return data[offset:offset + 2] == STORED_FILE_MARKER[:2]
    return data[offset:offset + 3] == STORED_FILE_MARKER


def _read_block(data: bytes, offset: int) -> Tuple[StoredFile, int]:
    end = len(data)
    if offset + HEADER_MIN_SIZE > end:
        raise MalformedContainer(
            f"Truncated stored file header at offset {offset}", offset)

    data_size = decode_le(data[offset + DATA_SIZE_OFFSET:offset + NAME_SIZE_OFFSET])
    name_size = decode_le(data[offset + NAME_SIZE_OFFSET:offset + NAME_OFFSET])

    name_start = offset + NAME_OFFSET
    data_start = name_start + name_size
    data_end = data_start + data_size
    if data_start > end:
        raise MalformedContainer(
            f"Stored file name at offset {offset} runs past the end of the container "
            f"({name_size} bytes declared)", offset)
    if data_end > end:
        raise MalformedContainer(
            f"Stored file data at offset {offset} runs past the end of the container "
            f"({data_size} bytes declared, {end - data_start} available)", offset)

    name = data[name_start:data_start].decode("utf-8", errors="surrogateescape")
    return StoredFile(name=name, data=bytes(data[data_start:data_end])), data_end


def iter_stored_files(data: bytes, lenient_marker: bool = False) -> Iterator[StoredFile]:
    """Yield every stored file block in ``data`` in offset order.

    Bytes inside an extracted data block are never scanned for markers.

    Raises:
        MalformedContainer: A matched block declares sizes past the buffer end.
    """
    cursor = 0
    end = len(data)
    while cursor < end:
        if _marker_at(data, cursor, lenient_marker):
            stored, cursor = _read_block(data, cursor)
            yield stored
        else:
            cursor += 1


def extract_stored_files(data: bytes, lenient_marker: bool = False) -> List[StoredFile]:
    """Return every stored file in an SRR container.

    A container without stored file blocks yields an empty list; deciding
    whether that is an error is up to the caller.
    """
    return list(iter_stored_files(data, lenient_marker=lenient_marker))


def filter_by_extension(files: Iterable[StoredFile], extension: str) -> List[StoredFile]:
    """Keep the stored files whose name ends with ``extension``, ignoring case.

    This is a raw suffix compare: ``foo.mp3`` matches ``p3``.
    """
    suffix = extension.lower()
    return [f for f in files if f.name.lower().endswith(suffix)]
