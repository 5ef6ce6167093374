"""
Test helpers: in-memory release archives and server paths.
"""

from __future__ import annotations

import hashlib
import io
import tarfile
import zipfile

FAKE_BINARY = b"#!/bin/sh\necho gohome-fake \"$@\"\nexit 0\n"


def make_tar_gz(members: dict[str, bytes], mode: int = 0o644) -> bytes:
    """Build a .tar.gz in memory.  Member modes default to non-executable."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def make_zip(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def sha256_of(data: bytes) -> str:
    return "sha256:" + hashlib.sha256(data).hexdigest()


def release_path(filename: str, version: str = "1.2.3") -> str:
    """Server path for a release file under the default test config."""
    return f"/owner/repo/releases/download/v{version}/{filename}"
