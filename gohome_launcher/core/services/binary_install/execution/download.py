"""
L4 Execution — Download and checksum verification.

Streams release files over HTTP(S) with a bounded redirect chain and
checks their digests.  Redirects are followed by hand so the hop cap
and the per-hop logging stay under our control.
"""

from __future__ import annotations

import hashlib
import http.client
import logging
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import urljoin, urlsplit

from gohome_launcher.core.services.binary_install.domain.download_helpers import (
    _fmt_size,
    _progress_step,
)
from gohome_launcher.core.services.binary_install.errors import DownloadError

logger = logging.getLogger(__name__)

REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})
_SCHEMES = ("http", "https")

_CHUNK = 64 * 1024


class _NoRedirect(urllib.request.HTTPRedirectHandler):
    """Surface every 3xx as an HTTPError instead of following it."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


_opener = urllib.request.build_opener(_NoRedirect)


def open_url(
    url: str,
    *,
    max_redirects: int = 5,
    timeout: float | None = None,
    user_agent: str = "gohome-launcher",
) -> http.client.HTTPResponse:
    """GET ``url`` and return the 200 response, following redirects.

    The caller owns the returned response and must close it.

    Raises:
        DownloadError: Non-200 final status, too many redirects, a
            redirect without ``Location`` or from https down to http,
            or any network failure.
    """
    if urlsplit(url).scheme not in _SCHEMES:
        raise DownloadError(url, "only http and https URLs are supported")

    current = url
    for hop in range(max_redirects + 1):
        req = urllib.request.Request(current, headers={"User-Agent": user_agent})
        try:
            resp = _opener.open(req, timeout=timeout)
        except urllib.error.HTTPError as e:
            location = e.headers.get("Location") if e.headers else None
            e.close()
            if e.code not in REDIRECT_CODES:
                raise DownloadError(current, e.reason or "", status=e.code) from e
            if not location:
                raise DownloadError(current, "redirect without Location", status=e.code) from e
            nxt = urljoin(current, location)
            if urlsplit(nxt).scheme not in _SCHEMES:
                raise DownloadError(current, f"refusing redirect to {nxt}", status=e.code) from e
            if urlsplit(current).scheme == "https" and urlsplit(nxt).scheme == "http":
                raise DownloadError(current, f"refusing https to http redirect: {nxt}", status=e.code) from e
            logger.debug("Redirect %d (hop %d): %s -> %s", e.code, hop + 1, current, nxt)
            current = nxt
            continue
        except urllib.error.URLError as e:
            raise DownloadError(current, str(e.reason)) from e
        except (OSError, http.client.HTTPException, ValueError) as e:
            raise DownloadError(current, str(e) or type(e).__name__) from e

        status = resp.getcode()
        if status != 200:
            resp.close()
            raise DownloadError(current, "unexpected status", status=status)
        return resp

    raise DownloadError(url, f"more than {max_redirects} redirects (last: {current})")


def fetch(
    url: str,
    dest: Path,
    *,
    max_redirects: int = 5,
    timeout: float | None = None,
    user_agent: str = "gohome-launcher",
) -> int:
    """Stream ``url`` into ``dest`` (truncating it).  Returns bytes written.

    Write errors on ``dest`` propagate as ``OSError``; everything on the
    network side becomes ``DownloadError``, including a body cut short
    of its ``Content-Length``.
    """
    resp = open_url(url, max_redirects=max_redirects, timeout=timeout, user_agent=user_agent)
    with resp, open(dest, "wb") as f:
        total = int(resp.headers.get("Content-Length") or 0)
        downloaded = 0
        last_pct = 0
        while True:
            try:
                chunk = resp.read(_CHUNK)
            except (OSError, http.client.HTTPException) as e:
                raise DownloadError(url, f"connection lost after {_fmt_size(downloaded)}: {e}") from e
            if not chunk:
                break
            f.write(chunk)
            downloaded += len(chunk)

            pct = _progress_step(downloaded, total, last_pct)
            if pct is not None:
                last_pct = pct
                logger.info(
                    "Download progress: %d%% (%s / %s)",
                    pct, _fmt_size(downloaded), _fmt_size(total),
                )

    if total and downloaded != total:
        raise DownloadError(url, f"incomplete body: {downloaded} of {total} bytes")

    logger.info("Downloaded %s from %s", _fmt_size(downloaded), url)
    return downloaded


def fetch_text(
    url: str,
    *,
    max_redirects: int = 5,
    timeout: float | None = None,
    user_agent: str = "gohome-launcher",
) -> str:
    """Fetch a small text file (e.g. a checksum manifest)."""
    resp = open_url(url, max_redirects=max_redirects, timeout=timeout, user_agent=user_agent)
    with resp:
        try:
            body = resp.read()
        except (OSError, http.client.HTTPException) as e:
            raise DownloadError(url, f"connection lost: {e}") from e
    return body.decode("utf-8", errors="replace")


def _file_digest(path: Path, algo: str) -> str:
    h = hashlib.new(algo)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


def _verify_checksum(path: Path, expected: str) -> tuple[bool, str]:
    """Verify file checksum.  Format: ``algo:hex``.

    Returns:
        ``(matches, actual)`` where ``actual`` is ``algo:hex`` of the file.
    """
    algo, expected_hash = expected.split(":", 1)
    actual = f"{algo}:{_file_digest(path, algo)}"
    return actual == f"{algo}:{expected_hash.lower()}", actual
