"""
Project-wide constants for the SRR container layout and the srrdb.com service.
"""

# Container signature found at offset 0 of every SRR file.
SRR_SIGNATURE = b"\x69\x69\x69"

# Stored file block marker: HEAD_CRC (0x6A6A) followed by HEAD_TYPE (0x6A).
STORED_FILE_MARKER = b"\x6a\x6a\x6a"

# Offsets relative to the start of a stored file block.
DATA_SIZE_OFFSET = 7        # ADD_SIZE, 4 bytes little-endian
NAME_SIZE_OFFSET = 11       # NAME_SIZE, 2 bytes little-endian
NAME_OFFSET = 13            # NAME, NAME_SIZE bytes
HEADER_MIN_SIZE = NAME_OFFSET

SRR_EXTENSION = "srr"

NOT_FOUND_BODY = "The requested file does not exist."
LOGIN_COOKIE = "uid"

PROJECT_NAME = "srrdb.com Terminal Client"
PROJECT_URL = "https://github.com/hashworks/srrdb-Terminal-Client"
LICENSE_LINE = "Published under the GNU General Public License v3.0."
