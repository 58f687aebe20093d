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

"""Folder handles.

A ``Folder`` looks up, creates and enumerates the entries below it. Lookups
and creations take paths relative to the folder; a leading separator on the
relative path is ignored.

Example usage::

    from plfile import Folder
    from plfile.filesystem import InMemoryFilesystem

    root = Folder("/", filesystem=InMemoryFilesystem())
    logs = root.create_subfolder("var/log")
    logs.create_file("app.log", contents=b"started\\n")

    for file in root.files.recursive():
        print(file.path)
"""

from __future__ import annotations

from typing import ClassVar, override

from ._children import ChildSequence
from ._entry import Entry
from ._file import File
from ._path import SEPARATOR, Path
from ._store import EntryKind, Store
from .errors import CreateFileError, CreateFolderError, EmptyPathError, FileError
from .filesystem import Filesystem
from .logging import StructuredLogger, get_logger

logger: StructuredLogger = get_logger(__name__, context={"component": "folder"})


class Folder(Entry):
    """Handle for an existing directory.

    ``Folder()`` with no path refers to the working directory of the access
    capability. The normalized path always ends with a separator.
    """

    kind: ClassVar[EntryKind] = EntryKind.FOLDER

    __slots__ = ()

    @override
    def __init__(
        self,
        path: Path | str = "",
        *,
        filesystem: Filesystem | None = None,
    ) -> None:
        super().__init__(path, filesystem=filesystem)

    # --- Children ---

    @property
    def subfolders(self) -> ChildSequence[Folder]:
        """Direct, non-hidden subfolders."""
        return ChildSequence(self, Folder)

    @property
    def files(self) -> ChildSequence[File]:
        """Direct, non-hidden files."""
        return ChildSequence(self, File)

    def all_files(
        self,
        *,
        recursive: bool = False,
        include_hidden: bool = False,
    ) -> list[File]:
        return list(
            ChildSequence(
                self,
                File,
                is_recursive=recursive,
                include_hidden=include_hidden,
            )
        )

    def all_folders(
        self,
        *,
        recursive: bool = False,
        include_hidden: bool = False,
    ) -> list[Folder]:
        return list(
            ChildSequence(
                self,
                Folder,
                is_recursive=recursive,
                include_hidden=include_hidden,
            )
        )

    # --- Lookup ---

    def subfolder(self, at: Path | str) -> Folder:
        """Return the existing folder at ``at`` relative to this one.

        Raises:
            MissingEntryError: No folder exists there.
        """
        store = Store(self._child_path(at), EntryKind.FOLDER, self.filesystem)
        return Folder.from_store(store)

    def file(self, at: Path | str) -> File:
        """Return the existing file at ``at`` relative to this one.

        Raises:
            EmptyPathError: ``at`` is empty.
            MissingEntryError: No file exists there.
        """
        store = Store(self._child_path(at), EntryKind.FILE, self.filesystem)
        return File.from_store(store)

    # --- Creation ---

    def create_subfolder(self, at: Path | str) -> Folder:
        """Create the folder at ``at``, including missing intermediate folders.

        Creating a folder that already exists succeeds.

        Raises:
            EmptyPathError: ``at`` is empty.
            CreateFolderError: The folder could not be created.
        """
        target = self._child_path(at)
        if target == self.path:
            raise EmptyPathError(self.path)
        try:
            self.filesystem.create_directory(target.raw, create_intermediates=True)
            store = Store(target, EntryKind.FOLDER, self.filesystem)
        except (OSError, FileError) as err:
            raise CreateFolderError(target, err) from err
        logger.debug(
            "Created folder.",
            event="folder_subfolder_created",
            context={"path": store.path.raw},
        )
        return Folder.from_store(store)

    def create_file(self, at: Path | str, contents: bytes | None = None) -> File:
        """Create the file at ``at`` with optional ``contents``.

        Missing intermediate folders are created first. An existing file is
        replaced.

        Raises:
            EmptyPathError: ``at`` is empty.
            CreateFolderError: An intermediate folder could not be created.
            CreateFileError: The file could not be created.
        """
        target = self._child_path(at)
        if target == self.path:
            raise EmptyPathError(self.path)
        parent = target.parent
        if parent != self.path:
            try:
                self.filesystem.create_directory(parent.raw, create_intermediates=True)
            except OSError as err:
                raise CreateFolderError(parent, err) from err
        try:
            created = self.filesystem.create_file(target.raw, contents)
        except OSError as err:
            raise CreateFileError(target, err) from err
        if not created:
            raise CreateFileError(target)
        try:
            store = Store(target, EntryKind.FILE, self.filesystem)
        except FileError as err:
            raise CreateFileError(target, err) from err
        logger.debug(
            "Created file.",
            event="folder_file_created",
            context={"path": store.path.raw, "size": len(contents or b"")},
        )
        return File.from_store(store)

    def create_subfolder_if_needed(self, at: Path | str) -> Folder:
        """Return the folder at ``at``, creating it when it does not exist."""
        try:
            return self.subfolder(at)
        except FileError:
            return self.create_subfolder(at)

    def create_file_if_needed(
        self,
        at: Path | str,
        contents: bytes | None = None,
    ) -> File:
        """Return the file at ``at``; ``contents`` only apply when it is created."""
        try:
            return self.file(at)
        except FileError:
            return self.create_file(at, contents)

    def create_symbolic_link(
        self,
        at: Path | str,
        destination: Path | str,
    ) -> File | Folder:
        """Create a symbolic link at ``at`` pointing to ``destination``.

        Returns a ``Folder`` when the link resolves to a directory and a
        ``File`` otherwise.

        Raises:
            EmptyPathError: ``at`` is empty.
            CreateFileError: The link could not be created.
            MissingEntryError: The link was created but its destination does
                not exist.
        """
        target = self._child_path(at)
        if target == self.path:
            raise EmptyPathError(self.path)
        link_path = Path(target.raw.rstrip(SEPARATOR))
        try:
            self.filesystem.create_symbolic_link(link_path.raw, str(destination))
        except OSError as err:
            raise CreateFileError(link_path, err) from err
        if self.filesystem.status(link_path.raw).is_directory:
            return Folder(link_path, filesystem=self.filesystem)
        return File(link_path, filesystem=self.filesystem)

    # --- Bulk operations ---

    def move_contents(self, to: Folder, *, include_hidden: bool = False) -> None:
        """Move every file, then every subfolder, into ``to``."""
        files = ChildSequence(self, File, include_hidden=include_hidden)
        files.move(to)
        folders = ChildSequence(self, Folder, include_hidden=include_hidden)
        folders.move(to)

    def empty(self, *, include_hidden: bool = False) -> None:
        """Delete every file, then every subfolder, keeping the folder itself."""
        files = ChildSequence(self, File, include_hidden=include_hidden)
        files.delete()
        folders = ChildSequence(self, Folder, include_hidden=include_hidden)
        folders.delete()

    def _child_path(self, at: Path | str) -> Path:
        return self.path.joining(at)


__all__ = ["Folder"]
