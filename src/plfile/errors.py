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

"""Base exception hierarchy for :mod:`plfile`."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._path import Path


class PLFileError(Exception):
    """Base class for all plfile exceptions.

    Catch this to handle every library-specific failure with a single handler
    while letting standard Python exceptions propagate normally.

    Example:
        Handling any handle failure::

            try:
                folder.create_file("notes.txt").write_text("hi")
            except PLFileError as e:
                logger.error("File operation failed: %s", e)

    Note:
        Subclasses also inherit from standard exception types (``ValueError``,
        ``LookupError``, ``RuntimeError``) so they can be caught by more generic
        handlers when needed.
    """


class FileError(PLFileError):
    """Failure tied to a single entry on the file system.

    Attributes:
        path: The path the operation was acting on.
        cause: The underlying exception reported by the access capability,
            when there was one.
    """

    reason: str = "file operation failed"

    def __init__(self, path: Path, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        message = f"{self.reason}: {path.raw!r}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


class EmptyPathError(FileError, ValueError):
    """Raised when a file handle or a subfolder is requested for an empty path."""

    reason = "path is empty"


class MissingEntryError(FileError, LookupError):
    """Raised when a path does not exist or has the wrong entry kind.

    Normalization raises this both for absent entries and for kind mismatches,
    e.g. asking for a ``File`` at a path that is a directory.
    """

    reason = "no matching entry"


class MoveError(FileError, RuntimeError):
    """Raised when an entry could not be moved."""

    reason = "could not move entry"


class CopyError(FileError, RuntimeError):
    """Raised when an entry could not be copied."""

    reason = "could not copy entry"


class DeleteError(FileError, RuntimeError):
    """Raised when an entry could not be deleted."""

    reason = "could not delete entry"


class CreateFileError(FileError, RuntimeError):
    """Raised when a file (or symbolic link) could not be created."""

    reason = "could not create file"


class CreateFolderError(FileError, RuntimeError):
    """Raised when a folder could not be created."""

    reason = "could not create folder"


class ReadError(FileError, RuntimeError):
    """Raised when file content could not be read or decoded."""

    reason = "could not read file"


class WriteError(FileError, RuntimeError):
    """Raised when content or attributes could not be written."""

    reason = "could not write file"


class EncodingError(FileError, ValueError):
    """Raised when text cannot be represented in the requested encoding."""

    reason = "could not encode text"


__all__ = [
    "CopyError",
    "CreateFileError",
    "CreateFolderError",
    "DeleteError",
    "EmptyPathError",
    "EncodingError",
    "FileError",
    "MissingEntryError",
    "MoveError",
    "PLFileError",
    "ReadError",
    "WriteError",
]
