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

"""Object-oriented handles for files and folders.

``File`` and ``Folder`` wrap a normalized path plus the ``Filesystem``
capability used to reach it. Construction validates that the entry exists with
the right kind, so a live handle always started out pointing at something real.

Example usage::

    from plfile import Folder

    home = Folder("~")
    drafts = home.create_subfolder_if_needed("drafts")
    note = drafts.create_file("today.txt", contents=b"hello")
    for file in home.files.recursive().including_hidden():
        print(file)
"""

from __future__ import annotations

from . import dbc, errors, filesystem
from ._children import ChildIterator, ChildSequence
from ._entry import Entry, EntryKind, default_filesystem
from ._file import File
from ._folder import Folder
from ._path import Path
from ._store import Store
from .errors import (
    CopyError,
    CreateFileError,
    CreateFolderError,
    DeleteError,
    EmptyPathError,
    EncodingError,
    FileError,
    MissingEntryError,
    MoveError,
    PLFileError,
    ReadError,
    WriteError,
)
from .filesystem import Filesystem, HostFilesystem, InMemoryFilesystem
from .logging import configure_logging, get_logger

__all__ = [
    "ChildIterator",
    "ChildSequence",
    "CopyError",
    "CreateFileError",
    "CreateFolderError",
    "DeleteError",
    "EmptyPathError",
    "EncodingError",
    "Entry",
    "EntryKind",
    "File",
    "FileError",
    "Filesystem",
    "Folder",
    "HostFilesystem",
    "InMemoryFilesystem",
    "MissingEntryError",
    "MoveError",
    "PLFileError",
    "Path",
    "ReadError",
    "Store",
    "WriteError",
    "configure_logging",
    "dbc",
    "default_filesystem",
    "errors",
    "filesystem",
    "get_logger",
]
