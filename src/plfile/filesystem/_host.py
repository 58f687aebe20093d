# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Host filesystem backend.

This module provides the ``Filesystem`` implementation backed by the host
operating system. An optional sandbox root restricts every operation to one
directory tree; paths whose resolved location escapes it are rejected.

Example usage::

    from plfile.filesystem import HostFilesystem

    fs = HostFilesystem()
    fs.write_file("/tmp/hello.txt", b"hello")
    assert fs.read_file("/tmp/hello.txt") == b"hello"

    sandboxed = HostFilesystem("/srv/workspace", read_only=True)
    sandboxed.exists("/etc/passwd")  # False: outside the sandbox
"""

from __future__ import annotations

import os
import pathlib
import shutil
import stat
from collections.abc import Sequence
from datetime import UTC, datetime

from ..logging import StructuredLogger, get_logger
from ._types import ChangeCallback, EntryAttributes, EntryStatus, EntryType
from ._watch import PollingSubscription, path_signature

__all__ = ["HostFilesystem"]

logger: StructuredLogger = get_logger(__name__, context={"component": "host_fs"})


def _entry_type(mode: int) -> EntryType:
    if stat.S_ISLNK(mode):
        return EntryType.SYMBOLIC_LINK
    if stat.S_ISDIR(mode):
        return EntryType.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryType.FILE
    return EntryType.OTHER


class HostFilesystem:
    """Filesystem backed by the host OS.

    Args:
        root: Sandbox root. The default ``"/"`` disables sandboxing.
        read_only: When True every mutation raises ``PermissionError``.
        poll_interval: Seconds between polls for ``subscribe()``.
    """

    __slots__ = ("_poll_interval", "_read_only", "_root")

    def __init__(
        self,
        root: str = "/",
        *,
        read_only: bool = False,
        poll_interval: float = 0.5,
    ) -> None:
        self._root = root
        self._read_only = read_only
        self._poll_interval = poll_interval

    def __repr__(self) -> str:
        return f"HostFilesystem(root={self._root!r}, read_only={self._read_only!r})"

    @property
    def root(self) -> str:
        """Sandbox root path."""
        return self._root

    @property
    def read_only(self) -> bool:
        """True if write operations are disabled."""
        return self._read_only

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    def _resolve_path(self, path: str) -> pathlib.Path:
        """Return ``path`` as an absolute host path inside the sandbox.

        Symbolic links are not followed in the returned path, only during the
        sandbox check.

        Raises:
            PermissionError: If the resolved location escapes the sandbox root.
        """
        candidate = pathlib.Path(os.path.abspath(path or os.getcwd()))
        if self._root in {"", "/"}:
            return candidate
        root_path = pathlib.Path(self._root).resolve()
        try:
            _ = candidate.resolve().relative_to(root_path)
        except ValueError:
            msg = f"Path escapes root directory: {path}"
            raise PermissionError(msg) from None
        return candidate

    def _check_writable(self) -> None:
        if self._read_only:
            msg = "Filesystem is read-only"
            raise PermissionError(msg)

    # --- Queries ---

    def status(self, path: str) -> EntryStatus:
        """Report existence and directory flag, following links.

        Entries that cannot be stat'ed (outside the sandbox, names that are too
        long, unsearchable parents) are reported as missing.
        """
        try:
            resolved = self._resolve_path(path)
            st = resolved.stat()
        except OSError:
            return EntryStatus.missing()
        return EntryStatus(exists=True, is_directory=stat.S_ISDIR(st.st_mode))

    def exists(self, path: str) -> bool:
        return self.status(path).exists

    def list_names(self, path: str) -> Sequence[str]:
        """Names of the direct children of a directory."""
        return os.listdir(self._resolve_path(path))

    def read_file(self, path: str) -> bytes:
        resolved = self._resolve_path(path)
        if resolved.is_dir():
            msg = f"Is a directory: {path}"
            raise IsADirectoryError(msg)
        return resolved.read_bytes()

    def attributes(self, path: str) -> EntryAttributes:
        """Stat ``path`` without following symbolic links."""
        st = self._resolve_path(path).lstat()
        entry_type = _entry_type(st.st_mode)
        created = getattr(st, "st_birthtime", st.st_ctime)
        return EntryAttributes(
            entry_type=entry_type,
            size_bytes=st.st_size if entry_type is not EntryType.DIRECTORY else 0,
            mode=stat.S_IMODE(st.st_mode),
            created_at=datetime.fromtimestamp(created, tz=UTC),
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        )

    def read_symbolic_link(self, path: str) -> str | None:
        try:
            resolved = self._resolve_path(path)
        except PermissionError:
            return None
        if not resolved.is_symlink():
            return None
        return os.readlink(resolved)

    def current_directory(self) -> str:
        return os.getcwd()

    # --- Mutations ---

    def create_directory(self, path: str, *, create_intermediates: bool = True) -> None:
        self._check_writable()
        resolved = self._resolve_path(path)
        resolved.mkdir(parents=create_intermediates, exist_ok=True)
        logger.debug(
            "Created directory.",
            event="host_directory_created",
            context={"path": str(resolved)},
        )

    def create_file(self, path: str, contents: bytes | None = None) -> bool:
        """Create or truncate a file; False when the host refuses."""
        self._check_writable()
        resolved = self._resolve_path(path)
        try:
            with resolved.open("wb") as handle:
                if contents:
                    _ = handle.write(contents)
        except OSError as err:
            logger.warning(
                "Could not create file.",
                event="host_file_create_failed",
                context={"path": str(resolved), "error": str(err)},
            )
            return False
        return True

    def write_file(self, path: str, data: bytes) -> None:
        self._check_writable()
        resolved = self._resolve_path(path)
        with resolved.open("wb") as handle:
            _ = handle.write(data)

    def append_file(self, path: str, data: bytes) -> None:
        """Open for update, seek to the end, write, close."""
        self._check_writable()
        resolved = self._resolve_path(path)
        with resolved.open("r+b") as handle:
            _ = handle.seek(0, os.SEEK_END)
            _ = handle.write(data)

    def move(self, source: str, destination: str) -> None:
        self._check_writable()
        src = self._resolve_path(source)
        dst = self._resolve_path(destination)
        if not os.path.lexists(src):
            raise FileNotFoundError(source)
        if os.path.lexists(dst):
            msg = f"Destination already exists: {destination}"
            raise FileExistsError(msg)
        _ = shutil.move(src, dst)
        logger.debug(
            "Moved entry.",
            event="host_entry_moved",
            context={"source": str(src), "destination": str(dst)},
        )

    def copy(self, source: str, destination: str) -> None:
        self._check_writable()
        src = self._resolve_path(source)
        dst = self._resolve_path(destination)
        if not os.path.lexists(src):
            raise FileNotFoundError(source)
        if os.path.lexists(dst):
            msg = f"Destination already exists: {destination}"
            raise FileExistsError(msg)
        if src.is_dir() and not src.is_symlink():
            _ = shutil.copytree(src, dst, symlinks=True)
        else:
            _ = shutil.copy2(src, dst, follow_symlinks=False)

    def remove(self, path: str) -> None:
        self._check_writable()
        resolved = self._resolve_path(path)
        if not os.path.lexists(resolved):
            raise FileNotFoundError(path)
        if resolved.is_symlink() or not resolved.is_dir():
            resolved.unlink()
        else:
            shutil.rmtree(resolved)
        logger.debug(
            "Removed entry.",
            event="host_entry_removed",
            context={"path": str(resolved)},
        )

    def set_attributes(
        self,
        path: str,
        *,
        mode: int | None = None,
        modified_at: datetime | None = None,
    ) -> None:
        self._check_writable()
        resolved = self._resolve_path(path)
        if mode is not None:
            resolved.chmod(mode)
        if modified_at is not None:
            accessed = resolved.stat().st_atime
            os.utime(resolved, (accessed, modified_at.timestamp()))

    def create_symbolic_link(self, path: str, destination: str) -> None:
        self._check_writable()
        resolved = self._resolve_path(path)
        resolved.symlink_to(destination)

    # --- Notifications ---

    def subscribe(self, path: str, callback: ChangeCallback) -> PollingSubscription:
        resolved = self._resolve_path(path)
        subscription = PollingSubscription(
            path=str(resolved),
            callback=callback,
            signature=lambda: path_signature(resolved),
            interval=self._poll_interval,
        )
        subscription.start()
        return subscription
