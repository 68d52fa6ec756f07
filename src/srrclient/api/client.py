"""
HTTP client for srrdb.com: search, SRR download, login and uploads.

The client wraps ``requests``; every network or protocol failure is
re-raised as TransportError so callers only deal with the client's own
exception hierarchy.
"""

import logging
import os
import re
from contextlib import ExitStack
from typing import List, Optional, Sequence
from urllib.parse import quote

import requests
from pydantic import ValidationError

from srrclient.core.config import Settings, get_settings
from srrclient.core.errors import AuthenticationError, TransportError
from srrclient.core.settings import LOGIN_COOKIE, NOT_FOUND_BODY
from srrclient.schemas.srrdb import SearchResponse, UploadResponse

logger = logging.getLogger(__name__)

ALERT_PATTERN = re.compile(r'<div class="alert alert-[^>]*>\s*([^<]*)')


def has_login_cookie(session: requests.Session) -> bool:
    """Check whether ``session`` carries the cookie srrdb.com sets on login."""
    return any(cookie.name == LOGIN_COOKIE for cookie in session.cookies)


class SrrdbClient:
    """Thin wrapper around the srrdb.com web endpoints."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.base_url.rstrip("/")
        self.timeout = self.settings.timeout
        self.session = session or self._new_session()

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = self.settings.user_agent
        return session

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, session: Optional[requests.Session] = None,
                 expected_status: Sequence[int] = (200,), **kwargs) -> requests.Response:
        session = session or self.session
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e
        if response.status_code not in expected_status:
            raise TransportError(f"Unexpected return code {response.status_code}.")
        return response

    def search(self, query: str) -> SearchResponse:
        """
        Query the search API. Whitespace separates search terms; see
        https://www.srrdb.com/help#keywords for the keywords the service knows.
        """
        path = "/api/search/" + "".join(quote(term, safe="") + "/" for term in query.split())
        response = self._request("GET", path)
        try:
            return SearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(f"Failed to parse search response: {e}") from e

    def download(self, dirname: str) -> bytes:
        """Fetch the SRR file of a release by its dirname."""
        response = self._request("GET", "/download/srr/" + quote(dirname, safe=""))
        body = response.content
        if body == NOT_FOUND_BODY.encode():
            raise TransportError("Not found.")
        logger.debug("Downloaded %d bytes for %s", len(body), dirname)
        return body

    def login(self, username: str, password: str) -> requests.Session:
        """
        Log in and return a session holding the login cookie.

        srrdb.com answers a successful login with a redirect, which must not be
        followed or the cookie of the redirect target replaces the login one.
        """
        session = self._new_session()
        response = self._request(
            "POST", "/account/login", session=session,
            expected_status=(200, 301, 302, 303),
            data={"username": username, "password": password},
            allow_redirects=False,
        )
        session.cookies.update(response.cookies)
        if not has_login_cookie(session):
            raise AuthenticationError("Wrong authentication?")
        logger.info("Logged in as %s", username)
        return session

    def upload_srrs(self, paths: List[str], session: Optional[requests.Session] = None) -> UploadResponse:
        """Upload one or more SRR files, anonymously unless ``session`` is logged in."""
        with ExitStack() as stack:
            files = [
                ("files[]", (os.path.basename(path), stack.enter_context(open(path, "rb"))))
                for path in paths
            ]
            response = self._request(
                "POST", "/release/upload", session=session,
                files=files,
                headers={"X-Requested-With": "XMLHttpRequest"},
            )
        try:
            return UploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(f"Failed to parse upload response: {e}") from e

    def upload_stored_file(self, path: str, dirname: str, folder: str, session: requests.Session) -> str:
        """
        Attach a stored file to an existing release. Needs a logged in session,
        see login(). Returns the message the service shows for the upload.
        """
        if not has_login_cookie(session):
            raise AuthenticationError("No login cookie found in provided session.")
        with open(path, "rb") as handle:
            response = self._request(
                "POST", "/release/add/" + quote(dirname, safe=""), session=session,
                files={"file": (os.path.basename(path), handle)},
                data={"folder": folder, "add": ""},
            )
        match = ALERT_PATTERN.search(response.text)
        if not match:
            raise TransportError("Failed to parse upload result.")
        return match.group(1).strip()
