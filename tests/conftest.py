"""
Shared fixtures: SRR container builders and a fake HTTP session.
"""

import struct
from unittest.mock import MagicMock

import pytest
import requests

from srrclient.core.config import Settings

SIGNATURE = b"\x69\x69\x69"
MARKER = b"\x6a\x6a\x6a"


def stored_block(name: bytes, data: bytes, marker: bytes = MARKER) -> bytes:
    """Build a stored file block: marker, flags, header size, sizes, name, data."""
    header_size = 13 + len(name)
    return (
        marker
        + b"\x00\x80"
        + struct.pack("<H", header_size)
        + struct.pack("<I", len(data))
        + struct.pack("<H", len(name))
        + name
        + data
    )


def srr_container(*blocks: bytes) -> bytes:
    """An SRR file: signature, a header without marker bytes, then the blocks."""
    return SIGNATURE + b"\x00\x00\x05\x00" + b"".join(blocks)


def make_response(status: int = 200, content: bytes = b"", cookies=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.encoding = "utf-8"
    for name, value in (cookies or {}).items():
        response.cookies.set(name, value)
    return response


@pytest.fixture
def block():
    return stored_block


@pytest.fixture
def container():
    return srr_container


@pytest.fixture
def response():
    return make_response


@pytest.fixture
def settings():
    return Settings(base_url="http://srrdb.test/", timeout=5, user_agent="srrclient-tests")


@pytest.fixture
def fake_session():
    """A real requests.Session whose request() is a mock."""
    session = requests.Session()
    session.request = MagicMock()
    return session
