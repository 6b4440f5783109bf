"""
HTTP download of source archives with checksum verification.

Downloads are streamed to a temporary file next to the destination and
renamed into place only once complete (and verified, when a SHA256 is
declared), so an interrupted download never masquerades as a finished one.
Failures are not retried here; re-running the checkout retries.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


class ChecksumError(DownloadError):
    """Exception raised when checksum verification fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    timeout: int = 30,
) -> Path:
    """
    Download file from URL to destination.

    An existing destination whose checksum matches `expected_sha256` is
    reused without touching the network.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or the file cannot be written
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL is empty

    Example:
        >>> download_file(
        ...     "https://example.com/llvm-17.0.6.src.tar.xz",
        ...     Path("~/.llvmenv/.downloads/llvm-17.0.6.src.tar.xz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    if destination.exists() and expected_sha256:
        if verify_checksum(destination, expected_sha256):
            logger.info(f"Checksum verified, reusing {destination}")
            return destination
        logger.warning(f"Checksum mismatch for cached {destination}, re-downloading")
        destination.unlink()

    partial = destination.with_name(destination.name + ".part")
    hasher = hashlib.sha256()

    logger.info(f"Downloading from {url}")
    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()
            with open(partial, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        hasher.update(chunk)
    except RequestException as e:
        partial.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} failed: {e}") from e
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise DownloadError(f"Writing {partial} failed: {e}") from e

    if expected_sha256:
        actual_hash = hasher.hexdigest()
        if actual_hash.lower() != expected_sha256.lower():
            partial.unlink(missing_ok=True)
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual_hash}"
            )
        logger.info("Checksum verified successfully")

    partial.replace(destination)
    logger.info(f"Download complete: {destination}")
    return destination


def verify_checksum(file_path: Path, expected_sha256: str) -> bool:
    """
    Verify file SHA256 checksum.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest().lower() == expected_sha256.lower()
