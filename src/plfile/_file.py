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

"""File handles."""

from __future__ import annotations

from typing import ClassVar

from ._entry import Entry
from ._store import EntryKind
from .errors import EncodingError, ReadError, WriteError
from .logging import StructuredLogger, get_logger

logger: StructuredLogger = get_logger(__name__, context={"component": "file"})


class File(Entry):
    """Handle for an existing regular file.

    Example::

        from plfile import File

        notes = File("~/notes.txt")
        notes.append_text("\\nanother line")
        print(notes.read_text())
    """

    kind: ClassVar[EntryKind] = EntryKind.FILE

    __slots__ = ()

    def read(self) -> bytes:
        """Return the whole content of the file.

        Raises:
            ReadError: The file could not be read.
        """
        try:
            return self.filesystem.read_file(self.path.raw)
        except OSError as err:
            raise ReadError(self.path, err) from err

    def read_text(self, encoding: str = "utf-8") -> str:
        """Return the content decoded with ``encoding``.

        Raises:
            ReadError: The file could not be read or decoded.
        """
        data = self.read()
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as err:
            raise ReadError(self.path, err) from err

    def write(self, data: bytes) -> None:
        """Replace the content of the file with ``data``.

        Raises:
            WriteError: The file could not be written.
        """
        try:
            self.filesystem.write_file(self.path.raw, data)
        except OSError as err:
            raise WriteError(self.path, err) from err
        logger.debug(
            "Wrote file.",
            event="file_written",
            context={"path": self.path.raw, "size": len(data)},
        )

    def write_text(self, text: str, encoding: str = "utf-8") -> None:
        """Replace the content with ``text`` encoded as ``encoding``.

        Raises:
            EncodingError: ``text`` cannot be represented in ``encoding``.
            WriteError: The file could not be written.
        """
        self.write(self._encode(text, encoding))

    def append(self, data: bytes) -> None:
        """Add ``data`` at the end of the file.

        Raises:
            WriteError: Opening, seeking or writing failed.
        """
        try:
            self.filesystem.append_file(self.path.raw, data)
        except OSError as err:
            raise WriteError(self.path, err) from err

    def append_text(self, text: str, encoding: str = "utf-8") -> None:
        self.append(self._encode(text, encoding))

    def _encode(self, text: str, encoding: str) -> bytes:
        try:
            return text.encode(encoding)
        except (UnicodeEncodeError, LookupError) as err:
            raise EncodingError(self.path, err) from err


__all__ = ["File"]
