"""Storage of branded images in the public output directory.

Files are written to a local directory which the app serves under
``/storage`` (see ``main.create_app``). The public URL of a file is the
configured public base followed by the file name.

Names are derived from the client-supplied upload name, so two uploads with
the same name overwrite each other.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "-logo"


def output_filename(client_name: str) -> str:
    """Derive ``<stem>-logo.<ext>`` from the name the client uploaded.

    Only the last path component of the client name is used. The extension
    is taken verbatim from that name, even when it does not match the real
    content, and an upload without an extension produces a name ending in
    a bare dot (``photo`` becomes ``photo-logo.``).

    Args:
        client_name: File name as sent in the multipart upload.

    Returns:
        The output file name.
    """
    base = client_name.replace("\\", "/").rsplit("/", 1)[-1]
    if "." in base:
        stem, ext = base.rsplit(".", 1)
    else:
        stem, ext = base, ""
    return f"{stem}{OUTPUT_SUFFIX}.{ext}"


def _ensure_dir(path: Path) -> None:
    """Create the directory if it does not exist."""
    os.makedirs(path, exist_ok=True)


def save_bytes(directory: Path, filename: str, data: bytes) -> Path:
    """Write ``data`` to ``directory/filename``, replacing any existing file.

    Args:
        directory: Public output directory.
        filename: Name of the file inside the directory.
        data: Encoded image bytes.

    Returns:
        The path that was written.
    """
    _ensure_dir(directory)
    dest_path = Path(directory) / filename
    with open(dest_path, "wb") as f:
        f.write(data)
    logger.debug("Wrote %d bytes to %s", len(data), dest_path)
    return dest_path


def public_url(base: str, filename: str) -> str:
    """Return the URL under which ``filename`` is served."""
    return f"{base.rstrip('/')}/{filename}"
