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

"""Normalized path storage shared by file and folder handles.

A ``Store`` owns the normalized path of one entry together with the access
capability used to reach it. Construction runs the normalization pipeline:

1. An empty file path is rejected; an empty folder path means the working
   directory.
2. Folder paths gain a trailing separator.
3. A leading ``~`` is replaced by the home folder.
4. Each ``../`` is resolved against the folder prefix preceding it, one
   occurrence at a time, and that prefix must exist as a directory.
5. The final path must exist and be of the requested kind.

Example::

    from plfile import EntryKind, Store
    from plfile.filesystem import InMemoryFilesystem

    fs = InMemoryFilesystem()
    fs.create_directory("/a/c")
    fs.create_directory("/a/b")
    Store("/a/b/../c", EntryKind.FOLDER, fs).path  # Path('/a/c/')
"""

from __future__ import annotations

from enum import StrEnum

from ._path import (
    HOME_MARKER,
    PARENT_REFERENCE,
    SEPARATOR,
    Path,
    as_path,
    ensure_suffix,
)
from .dbc import invariant, require
from .errors import (
    CopyError,
    DeleteError,
    EmptyPathError,
    MissingEntryError,
    MoveError,
    WriteError,
)
from .filesystem import (
    ChangeCallback,
    EntryAttributes,
    EntryType,
    Filesystem,
    Subscription,
)
from .logging import StructuredLogger, get_logger

logger: StructuredLogger = get_logger(__name__, context={"component": "store"})

_MAX_MODE = 0o7777


class EntryKind(StrEnum):
    """Kind of entry a handle refers to."""

    FILE = "file"
    FOLDER = "folder"


def _separator_matches_kind(store: Store) -> tuple[bool, str]:
    raw = store.path.raw
    if store.kind is EntryKind.FOLDER:
        return raw.endswith(SEPARATOR), f"folder path must end with {SEPARATOR!r}"
    return not raw.endswith(SEPARATOR), f"file path must not end with {SEPARATOR!r}"


def _mode_in_range(store: Store, mode: int) -> tuple[bool, str]:
    return 0 <= mode <= _MAX_MODE, f"mode must be within 0o0..0o7777, got {mode:#o}"


@invariant(_separator_matches_kind)
class Store:
    """Normalized path plus access capability for a single entry.

    Args:
        path: Path to normalize, absolute or relative to the working directory.
        kind: Whether the entry must be a file or a folder.
        filesystem: Access capability every operation goes through.

    Raises:
        EmptyPathError: ``path`` is empty for a file.
        MissingEntryError: A ``../`` prefix or the final path does not exist
            as the required kind.
    """

    __slots__ = ("_filesystem", "_kind", "_path")

    def __init__(
        self,
        path: Path | str,
        kind: EntryKind,
        filesystem: Filesystem,
    ) -> None:
        self._kind = kind
        self._filesystem = filesystem
        self._path = self._normalize(as_path(path))

    def __repr__(self) -> str:
        return f"Store(path={self._path.raw!r}, kind={self._kind.value!r})"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def kind(self) -> EntryKind:
        return self._kind

    @property
    def filesystem(self) -> Filesystem:
        return self._filesystem

    # --- Normalization ---

    def _normalize(self, path: Path) -> Path:
        raw = path.raw
        if not raw:
            if self._kind is EntryKind.FILE:
                raise EmptyPathError(path)
            raw = self._filesystem.current_directory()

        if self._kind is EntryKind.FOLDER and not raw.endswith(SEPARATOR):
            raw += SEPARATOR

        if raw.startswith(HOME_MARKER):
            raw = Path.home().raw.rstrip(SEPARATOR) + raw[len(HOME_MARKER) :]

        while (index := raw.find(PARENT_REFERENCE)) >= 0:
            prefix = raw[:index]
            if not prefix:
                prefix = ensure_suffix(self._filesystem.current_directory(), SEPARATOR)
            self._verify(prefix, EntryKind.FOLDER)
            raw = Path(prefix).parent.raw + raw[index + len(PARENT_REFERENCE) :]

        self._verify(raw, self._kind)
        if raw != path.raw:
            logger.debug(
                "Normalized path.",
                event="store_path_normalized",
                context={"requested": path.raw, "normalized": raw},
            )
        return Path(raw)

    def _verify(self, raw: str, kind: EntryKind) -> None:
        status = self._filesystem.status(raw)
        if kind is EntryKind.FOLDER:
            matches = status.exists and status.is_directory
        else:
            matches = (
                status.exists
                and not status.is_directory
                and not raw.endswith(SEPARATOR)
            )
        if not matches:
            raise MissingEntryError(Path(raw))

    # --- Operations ---

    def exists(self) -> bool:
        """Re-check that the entry is still present with the same kind."""
        status = self._filesystem.status(self._path.raw)
        if not status.exists:
            return False
        return status.is_directory == (self._kind is EntryKind.FOLDER)

    def move(self, destination: Path | str) -> None:
        """Move the entry and adopt ``destination`` as the new path.

        Raises:
            MoveError: The access capability refused the move. The stored
                path is left untouched.
        """
        target = as_path(destination)
        try:
            self._filesystem.move(self._path.raw, target.raw)
        except OSError as err:
            raise MoveError(self._path, err) from err
        if self._kind is EntryKind.FOLDER:
            target = target.appending_suffix(SEPARATOR)
        logger.debug(
            "Moved entry.",
            event="store_entry_moved",
            context={"source": self._path.raw, "destination": target.raw},
        )
        self._path = target

    def copy(self, destination: Path | str) -> None:
        target = as_path(destination)
        try:
            self._filesystem.copy(self._path.raw, target.raw)
        except OSError as err:
            raise CopyError(self._path, err) from err

    def delete(self) -> None:
        try:
            self._filesystem.remove(self._path.raw)
        except OSError as err:
            raise DeleteError(self._path, err) from err

    def attributes(self) -> EntryAttributes | None:
        """Metadata of the entry itself, or None when it cannot be read."""
        try:
            return self._filesystem.attributes(self._path.raw)
        except OSError as err:
            logger.debug(
                "Attributes unavailable.",
                event="store_attributes_unavailable",
                context={"path": self._path.raw, "error": str(err)},
            )
            return None

    def permissions(self) -> int | None:
        attributes = self.attributes()
        return None if attributes is None else attributes.mode

    @require(_mode_in_range)
    def set_permissions(self, mode: int) -> None:
        try:
            self._filesystem.set_attributes(self._path.raw, mode=mode)
        except OSError as err:
            raise WriteError(self._path, err) from err

    def is_symbolic_link(self) -> bool:
        attributes = self.attributes()
        return (
            attributes is not None
            and attributes.entry_type is EntryType.SYMBOLIC_LINK
        )

    def destination_of_symbolic_link(self) -> Path | None:
        destination = self._filesystem.read_symbolic_link(self._path.raw)
        return None if destination is None else Path(destination)

    def watch(self, callback: ChangeCallback) -> Subscription | None:
        """Subscribe to changes of the entry, if the backend can watch."""
        subscription = self._filesystem.subscribe(self._path.raw, callback)
        if subscription is None:
            logger.warning(
                "Watching is not supported by this filesystem.",
                event="store_watch_unsupported",
                context={
                    "path": self._path.raw,
                    "filesystem": type(self._filesystem).__name__,
                },
            )
        return subscription


__all__ = ["EntryKind", "Store"]
