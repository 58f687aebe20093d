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

"""Filesystem access capability protocol.

This module provides the ``Filesystem`` protocol that every ``File`` and
``Folder`` handle reaches the underlying storage through. Handles receive a
backend at construction time, so the same code runs against the host file
system or against a deterministic in-memory tree.

Implementations:

- ``plfile.filesystem.HostFilesystem``: the host OS, optionally sandboxed
- ``plfile.filesystem.InMemoryFilesystem``: dict-backed tree for tests

Backends report failures with builtin ``OSError`` subclasses; the handle layer
translates them into :mod:`plfile.errors`.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from ._types import ChangeCallback, EntryAttributes, EntryStatus, Subscription


@runtime_checkable
class Filesystem(Protocol):
    """Access capability consumed by stores and handles.

    Paths are absolute strings (or relative to ``current_directory()``).
    Trailing separators on directory paths are accepted everywhere.

    Example::

        def sizes(fs: Filesystem, folder: str) -> dict[str, int]:
            return {
                name: fs.attributes(folder + name).size_bytes
                for name in fs.list_names(folder)
            }
    """

    # --- Queries ---

    def status(self, path: str) -> EntryStatus:
        """Report whether ``path`` exists and whether it is a directory.

        Symbolic links are followed. Never raises for missing paths.
        """
        ...

    def exists(self, path: str) -> bool:
        """Shorthand for ``status(path).exists``."""
        ...

    def list_names(self, path: str) -> Sequence[str]:
        """Return the names of the direct children of a directory.

        The order is backend-defined; callers sort when they need to.

        Raises:
            FileNotFoundError: Path does not exist.
            NotADirectoryError: Path is not a directory.
        """
        ...

    def read_file(self, path: str) -> bytes:
        """Return the full content of a file.

        Raises:
            FileNotFoundError: Path does not exist.
            IsADirectoryError: Path is a directory.
        """
        ...

    def attributes(self, path: str) -> EntryAttributes:
        """Return metadata for ``path`` without following symbolic links.

        Raises:
            FileNotFoundError: Path does not exist.
        """
        ...

    def read_symbolic_link(self, path: str) -> str | None:
        """Return the destination of a symbolic link, or None if ``path`` is not one."""
        ...

    def current_directory(self) -> str:
        """Working directory used for empty folder paths."""
        ...

    # --- Mutations ---

    def create_directory(self, path: str, *, create_intermediates: bool = True) -> None:
        """Create a directory.

        Succeeds silently when the directory already exists.

        Raises:
            FileExistsError: A non-directory exists at ``path``.
            FileNotFoundError: Parent missing and ``create_intermediates=False``.
        """
        ...

    def create_file(self, path: str, contents: bytes | None = None) -> bool:
        """Create (or truncate) a file with optional initial contents.

        Returns:
            True on success, False when the file could not be created.
        """
        ...

    def write_file(self, path: str, data: bytes) -> None:
        """Replace the content of a file, creating it if needed.

        Raises:
            FileNotFoundError: Parent directory does not exist.
            IsADirectoryError: Path is a directory.
        """
        ...

    def append_file(self, path: str, data: bytes) -> None:
        """Append ``data`` to the end of an existing file.

        Raises:
            FileNotFoundError: Path does not exist.
            IsADirectoryError: Path is a directory.
        """
        ...

    def move(self, source: str, destination: str) -> None:
        """Move an entry.

        Raises:
            FileNotFoundError: ``source`` does not exist or the destination
                parent is missing.
            FileExistsError: Something already exists at ``destination``.
        """
        ...

    def copy(self, source: str, destination: str) -> None:
        """Copy an entry (recursively for directories).

        Raises:
            FileNotFoundError: ``source`` does not exist or the destination
                parent is missing.
            FileExistsError: Something already exists at ``destination``.
        """
        ...

    def remove(self, path: str) -> None:
        """Remove an entry, recursively for directories.

        Symbolic links are removed themselves, never their destinations.

        Raises:
            FileNotFoundError: Path does not exist.
        """
        ...

    def set_attributes(
        self,
        path: str,
        *,
        mode: int | None = None,
        modified_at: datetime | None = None,
    ) -> None:
        """Update permission bits and/or the modification time.

        Raises:
            FileNotFoundError: Path does not exist.
        """
        ...

    def create_symbolic_link(self, path: str, destination: str) -> None:
        """Create a symbolic link at ``path`` pointing at ``destination``.

        Raises:
            FileExistsError: Something already exists at ``path``.
        """
        ...

    # --- Notifications ---

    def subscribe(self, path: str, callback: ChangeCallback) -> Subscription | None:
        """Invoke ``callback`` whenever the entry at ``path`` changes.

        Returns:
            A subscription handle, or None when the backend cannot watch.
        """
        ...

    @property
    def read_only(self) -> bool:
        """Whether mutations raise ``PermissionError``."""
        ...


__all__ = ["Filesystem"]
