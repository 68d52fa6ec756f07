"""
Download SRR files for a batch of dirnames and save or stream their contents.

Every dirname is processed on its own: a failure is recorded in that
dirname's outcome and the batch moves on to the next one.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from srrclient.api.client import SrrdbClient
from srrclient.archive.srr import ensure_valid_srr, extract_stored_files, filter_by_extension
from srrclient.core.errors import MemberNotFound, SrrClientError
from srrclient.core.settings import SRR_EXTENSION
from srrclient.utils.files import save_file

logger = logging.getLogger(__name__)


@dataclass
class DownloadOptions:
    """Options of a download run."""
    extension: str = ""
    to_stdout: bool = False
    prune_paths: bool = False
    lenient_marker: bool = False
    base_dir: Optional[Path] = None

    @property
    def wants_container(self) -> bool:
        return self.extension.lower() in ("", SRR_EXTENSION)


@dataclass
class DownloadOutcome:
    """Result of processing one dirname."""
    dirname: str
    saved: List[Path] = field(default_factory=list)
    written: int = 0
    error: Optional[SrrClientError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _emit(name: str, data: bytes, options: DownloadOptions, stream: Optional[BinaryIO],
          outcome: DownloadOutcome) -> None:
    if options.to_stdout:
        stream.write(data)
        stream.flush()
        outcome.written += 1
    else:
        outcome.saved.append(save_file(name, data, options.prune_paths, options.base_dir))


def process_container(dirname: str, srr: bytes, options: DownloadOptions,
                      stream: Optional[BinaryIO] = None) -> DownloadOutcome:
    """
    Validate a downloaded SRR file and save/stream it whole, or the stored
    files matching ``options.extension``.

    Raises:
        InvalidContainer: ``srr`` lacks the SRR signature.
        MalformedContainer: A stored file block runs past the end of ``srr``.
        MemberNotFound: No stored file matches the requested extension.
        OSError: Saving a file failed.
        ValueError: A stored file name has no usable path.
    """
    outcome = DownloadOutcome(dirname=dirname)
    ensure_valid_srr(srr)

    if options.wants_container:
        _emit(f"{dirname}.{SRR_EXTENSION}", srr, options, stream, outcome)
        return outcome

    stored_files = extract_stored_files(srr, lenient_marker=options.lenient_marker)
    logger.debug("%s contains %d stored files", dirname, len(stored_files))
    matches = filter_by_extension(stored_files, options.extension)
    if not matches:
        raise MemberNotFound(f"Extension not found in SRR of {dirname}.")
    for stored in matches:
        _emit(stored.name, stored.data, options, stream, outcome)
    return outcome


def download_dirnames(client: SrrdbClient, dirnames: List[str], options: DownloadOptions,
                      stream: Optional[BinaryIO] = None,
                      report: Optional[Callable[[DownloadOutcome], None]] = None) -> List[DownloadOutcome]:
    """
    Download and process every dirname in order.

    ``stream`` receives the raw bytes when ``options.to_stdout`` is set.
    ``report`` is called with each outcome as soon as it is known.

    Raises:
        ValueError: ``dirnames`` is empty.
    """
    if not dirnames:
        raise ValueError("You must provide at least one dirname.")
    if options.to_stdout and stream is None:
        raise ValueError("A stream is required when writing to stdout.")

    outcomes = []
    for dirname in dirnames:
        try:
            srr = client.download(dirname)
            outcome = process_container(dirname, srr, options, stream)
        except SrrClientError as e:
            logger.info("%s: %s", dirname, e)
            outcome = DownloadOutcome(dirname=dirname, error=e)
        except (OSError, ValueError) as e:
            logger.info("%s: failed to save file: %s", dirname, e)
            outcome = DownloadOutcome(dirname=dirname, error=SrrClientError(f"Failed to save file: {e}"))
        outcomes.append(outcome)
        if report:
            report(outcome)
    return outcomes
