# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for benchprep.

Manifests are replaced atomically, so a benchmark driver polling one
never sees half a JSON document. Build files are appended to in place:
they live in a throwaway clone.
"""

import tempfile
from pathlib import Path


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write `content` to a sibling temp file, then rename it over `target_path`.

    Raises:
        OSError: If the write or rename fails. The temp file is removed.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".benchprep_tmp_",
        suffix=".tmp",
        delete=False,
    ) as handle:
        temp_path = Path(handle.name)
        try:
            handle.write(content)
        except BaseException:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise

    try:
        temp_path.replace(target_path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def append_text(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Append to a text file, creating it if missing.

    Raises:
        OSError: If the file can't be opened or written.
    """
    with target_path.open("a", encoding=encoding) as handle:
        handle.write(content)
