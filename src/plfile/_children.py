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

"""Lazy traversal of the children of a folder.

``ChildSequence`` describes what to enumerate (files or folders, recursive or
not, hidden entries or not) and ``ChildIterator`` performs the walk. The walk
is lazy: a folder's names are listed only when its iterator is first advanced.

Recursive walks yield every direct child of a folder before anything nested
below it. Nested folders are queued in the order they were discovered and each
queued folder is drained fully, its own queue included, before the next::

    /root
      f1
      a/f2
      a/c/f4
      b/f3

    files.recursive()  ->  f1, f2, f4, f3

Names are visited in sorted order. Entries that vanish or cannot be opened
while the walk is in progress are skipped.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, cast

from ._entry import Entry
from ._path import Path
from ._store import EntryKind, Store
from .errors import FileError
from .logging import StructuredLogger, get_logger

if TYPE_CHECKING:
    from ._folder import Folder

logger: StructuredLogger = get_logger(__name__, context={"component": "children"})

_HIDDEN_PREFIX = "."


@dataclass(slots=True, frozen=True)
class ChildSequence[EntryT: Entry]:
    """Reusable description of a child enumeration.

    Each ``iter()`` call starts a fresh walk, so a sequence can be iterated
    any number of times and always reflects the current file system.

    Attributes:
        folder: Folder whose children are enumerated.
        wanted: Handle class to yield, ``File`` or ``Folder``.
        is_recursive: Descend into nested folders.
        include_hidden: Yield names starting with a dot and descend into them.
    """

    folder: Folder
    wanted: type[EntryT]
    is_recursive: bool = False
    include_hidden: bool = False

    def __iter__(self) -> Iterator[EntryT]:
        return ChildIterator(
            self.folder,
            self.wanted,
            recursive=self.is_recursive,
            include_hidden=self.include_hidden,
        )

    def __str__(self) -> str:
        return "\n".join(child.description for child in self)

    def recursive(self) -> ChildSequence[EntryT]:
        return replace(self, is_recursive=True)

    def including_hidden(self) -> ChildSequence[EntryT]:
        return replace(self, include_hidden=True)

    def names(self) -> list[str]:
        return [child.name for child in self]

    def count(self) -> int:
        return sum(1 for _ in self)

    def first(self) -> EntryT | None:
        return next(iter(self), None)

    def last(self) -> EntryT | None:
        tail = deque(self, maxlen=1)
        return tail[0] if tail else None

    def move(self, to: Folder) -> None:
        """Move every yielded entry into ``to``."""
        for child in self:
            child.move(to)

    def delete(self) -> None:
        """Delete every yielded entry."""
        for child in self:
            child.delete()


class ChildIterator[EntryT: Entry]:
    """Single-pass walk over the children of ``folder``.

    The iterator yields direct children of its folder first. Once they are
    exhausted it drains the queue of nested iterators it enqueued on the way,
    front to back; each nested iterator does the same for its own folder.
    """

    __slots__ = (
        "_folder",
        "_include_hidden",
        "_index",
        "_names",
        "_pending",
        "_recursive",
        "_wanted",
    )

    def __init__(
        self,
        folder: Folder,
        wanted: type[EntryT],
        *,
        recursive: bool = False,
        include_hidden: bool = False,
    ) -> None:
        self._folder = folder
        self._wanted = wanted
        self._recursive = recursive
        self._include_hidden = include_hidden
        self._names: list[str] | None = None
        self._index = 0
        self._pending: deque[ChildIterator[EntryT]] = deque()

    def __iter__(self) -> ChildIterator[EntryT]:
        return self

    def __next__(self) -> EntryT:
        names = self._load_names()
        while self._index < len(names):
            name = names[self._index]
            self._index += 1
            child = self._visit(name)
            if child is not None:
                return child
        return self._next_pending()

    def _load_names(self) -> list[str]:
        if self._names is None:
            path = self._folder.path
            try:
                self._names = sorted(self._folder.filesystem.list_names(path.raw))
            except OSError as err:
                logger.debug(
                    "Skipping unreadable folder.",
                    event="children_listing_failed",
                    context={"path": path.raw, "error": str(err)},
                )
                self._names = []
        return self._names

    def _next_pending(self) -> EntryT:
        while self._pending:
            try:
                return next(self._pending[0])
            except StopIteration:
                _ = self._pending.popleft()
        raise StopIteration

    def _visit(self, name: str) -> EntryT | None:
        if not self._include_hidden and name.startswith(_HIDDEN_PREFIX):
            return None

        path = self._folder.path.joining(name)
        status = self._folder.filesystem.status(path.raw)
        if not status.exists:
            self._skip(path, "vanished")
            return None

        if self._wanted.kind is EntryKind.FOLDER:
            if not status.is_directory:
                return None
            folder = self._open_folder(path)
            if folder is not None and self._recursive:
                self._descend(folder)
            return cast("EntryT | None", folder)

        if status.is_directory:
            if self._recursive:
                folder = self._open_folder(path)
                if folder is not None:
                    self._descend(folder)
            return None
        store = self._open(path, EntryKind.FILE)
        return None if store is None else self._wanted.from_store(store)

    def _descend(self, folder: Folder) -> None:
        self._pending.append(
            ChildIterator(
                folder,
                self._wanted,
                recursive=True,
                include_hidden=self._include_hidden,
            )
        )

    def _open_folder(self, path: Path) -> Folder | None:
        store = self._open(path, EntryKind.FOLDER)
        return None if store is None else type(self._folder).from_store(store)

    def _open(self, path: Path, kind: EntryKind) -> Store | None:
        try:
            return Store(path, kind, self._folder.filesystem)
        except FileError as err:
            self._skip(path, str(err))
            return None

    @staticmethod
    def _skip(path: Path, reason: str) -> None:
        logger.debug(
            "Skipping child.",
            event="children_entry_skipped",
            context={"path": path.raw, "reason": reason},
        )


__all__ = ["ChildIterator", "ChildSequence"]
