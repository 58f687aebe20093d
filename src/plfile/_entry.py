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

"""Behaviour shared by file and folder handles.

An ``Entry`` wraps a ``Store`` and exposes the operations that make sense for
any entry on the file system: naming, metadata, rename, move, copy, delete and
change notifications. ``File`` and ``Folder`` add their kind-specific APIs.

Handles are compared by class and ``description``, so two handles naming the
same normalized path are equal even when they were built separately.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Final, Self

from ._path import Path, ensure_suffix
from ._store import EntryKind, Store
from .filesystem import ChangeCallback, Filesystem, HostFilesystem, Subscription

if TYPE_CHECKING:
    from ._folder import Folder

_DEFAULT_FILESYSTEM: Final[Filesystem] = HostFilesystem()


def default_filesystem() -> Filesystem:
    """Access capability used by handles built without an explicit one."""
    return _DEFAULT_FILESYSTEM


class Entry:
    """Base class for ``File`` and ``Folder``.

    Subclasses set ``kind``; construction normalizes ``path`` against
    ``filesystem`` and fails when no entry of that kind exists there.
    """

    kind: ClassVar[EntryKind]

    __slots__ = ("_store",)

    def __init__(
        self,
        path: Path | str,
        *,
        filesystem: Filesystem | None = None,
    ) -> None:
        self._store = Store(path, self.kind, filesystem or default_filesystem())

    @classmethod
    def from_store(cls, store: Store) -> Self:
        """Wrap an already-normalized store without touching the file system."""
        if store.kind is not cls.kind:
            msg = f"{cls.__name__} requires a {cls.kind.value} store, got {store.kind.value}"
            raise TypeError(msg)
        handle = cls.__new__(cls)
        handle._store = store
        return handle

    # --- Identity ---

    @property
    def store(self) -> Store:
        return self._store

    @property
    def path(self) -> Path:
        return self._store.path

    @property
    def filesystem(self) -> Filesystem:
        return self._store.filesystem

    @property
    def name(self) -> str:
        """Last component of the path."""
        return self.path.last_component

    @property
    def extension(self) -> str | None:
        """Text after the last dot of ``name``, if the name has more than one part.

        Empty parts are ignored, so ``".bashrc"`` has no extension and
        ``"archive.tar.gz"`` has ``"gz"``.
        """
        parts = [part for part in self.name.split(".") if part]
        if len(parts) > 1:
            return parts[-1]
        return None

    @property
    def creation_date(self) -> datetime | None:
        attributes = self._store.attributes()
        return None if attributes is None else attributes.created_at

    @property
    def modification_date(self) -> datetime | None:
        attributes = self._store.attributes()
        return None if attributes is None else attributes.modified_at

    @property
    def description(self) -> str:
        return f"(name: {self.name}, path: {self.path.raw})"

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.description}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self.kind is other.kind and self.description == other.description

    def __hash__(self) -> int:
        return hash((self.kind, self.description))

    # --- Operations ---

    def rename(self, new_name: str, *, keep_extension: bool = True) -> None:
        """Move the entry within its parent folder to ``new_name``.

        With ``keep_extension`` the current extension is appended to
        ``new_name`` unless it already ends with it.

        Raises:
            MoveError: The rename was refused.
        """
        extension = self.extension
        if keep_extension and extension is not None:
            new_name = ensure_suffix(new_name, f".{extension}")
        self._store.move(self.path.parent.joining(new_name))

    def move(self, to: Folder) -> None:
        """Move the entry into ``to``, keeping its name."""
        self._store.move(to.path.joining(self.name))

    def copy(self, to: Folder) -> Self:
        """Copy the entry into ``to`` and return a handle for the copy.

        Raises:
            CopyError: The copy was refused.
            MissingEntryError: The copy does not exist as the same kind.
        """
        destination = to.path.joining(self.name)
        self._store.copy(destination)
        return self.from_store(Store(destination, self.kind, self.filesystem))

    def delete(self) -> None:
        self._store.delete()

    def exists(self) -> bool:
        """Re-check the file system; the handle may have gone stale."""
        return self._store.exists()

    def managed_by(self, filesystem: Filesystem) -> Self:
        """Return a handle for the same path normalized against ``filesystem``."""
        return type(self)(self.path, filesystem=filesystem)

    def permissions(self) -> int | None:
        """Permission bits of the entry, or None when unavailable."""
        return self._store.permissions()

    def set_permissions(self, mode: int) -> None:
        self._store.set_permissions(mode)

    def is_symbolic_link(self) -> bool:
        return self._store.is_symbolic_link()

    def symbolic_link_destination(self) -> Path | None:
        return self._store.destination_of_symbolic_link()

    def watch(self, callback: ChangeCallback) -> Subscription | None:
        """Invoke ``callback`` whenever the entry changes.

        Returns None when the access capability cannot watch.
        """
        return self._store.watch(callback)


__all__ = ["Entry", "EntryKind", "default_filesystem"]
