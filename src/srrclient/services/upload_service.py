"""
Upload SRR files, or stored files attached to an existing release.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests

from srrclient.api.client import SrrdbClient
from srrclient.core.errors import AuthenticationError, SrrClientError

logger = logging.getLogger(__name__)


@dataclass
class UploadOptions:
    """Options of an upload run."""
    username: Optional[str] = None
    password: Optional[str] = None
    release: Optional[str] = None
    folder: str = ""

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)


@dataclass
class StoredFileUpload:
    """Result of uploading one stored file."""
    path: str
    message: Optional[str] = None
    error: Optional[SrrClientError] = None

    @property
    def label(self) -> str:
        return os.path.basename(self.path)

    def display(self) -> str:
        if self.error is not None:
            return f"{self.label}: Failed to upload stored file - {self.error}"
        return f"{self.label}: {self.message}"


def _login(client: SrrdbClient, options: UploadOptions) -> requests.Session:
    try:
        return client.login(options.username, options.password)
    except SrrClientError as e:
        raise AuthenticationError(f"Failed to login: {e}") from e


def upload_srrs(client: SrrdbClient, paths: List[str], options: UploadOptions) -> List[str]:
    """
    Upload SRR files in one request, logged in when credentials are given.

    Returns one display line per file the service reported on.

    Raises:
        ValueError: ``paths`` is empty.
        AuthenticationError: Credentials were given but login failed.
        TransportError: The upload request failed.
    """
    if not paths:
        raise ValueError("You must provide at least one file to upload.")

    session = _login(client, options) if options.has_credentials else None
    response = client.upload_srrs(paths, session=session)
    logger.info("Uploaded %d SRR file(s)", len(paths))
    return [uploaded.display() for uploaded in response.files]


def upload_stored_files(client: SrrdbClient, paths: List[str], options: UploadOptions,
                        report: Optional[Callable[[StoredFileUpload], None]] = None) -> List[StoredFileUpload]:
    """
    Attach each file to ``options.release``. A failed file is recorded and
    the remaining files are still uploaded.

    Raises:
        ValueError: ``paths`` is empty or no release is set.
        AuthenticationError: Credentials are missing or login failed.
    """
    if not paths:
        raise ValueError("You must provide at least one file to upload.")
    if not options.release:
        raise ValueError("A release dirname is required to upload stored files.")
    if not options.has_credentials:
        raise AuthenticationError("You need to set your username and password to upload stored files.")

    session = _login(client, options)
    results = []
    for path in paths:
        try:
            message = client.upload_stored_file(path, options.release, options.folder, session)
            result = StoredFileUpload(path=path, message=message)
        except SrrClientError as e:
            logger.info("%s: %s", path, e)
            result = StoredFileUpload(path=path, error=e)
        except OSError as e:
            logger.info("%s: %s", path, e)
            result = StoredFileUpload(path=path, error=SrrClientError(str(e)))
        results.append(result)
        if report:
            report(result)
    return results
