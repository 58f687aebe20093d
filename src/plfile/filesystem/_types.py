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

"""Value types exchanged with ``Filesystem`` backends.

All types are immutable frozen dataclasses:

- ``EntryStatus``: existence and directory flag for one path
- ``EntryAttributes``: metadata returned by ``Filesystem.attributes()``
- ``EntryType``: the kind of entry reported by attribute queries
- ``Subscription``: handle returned by ``Filesystem.subscribe()``
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Final, Protocol, runtime_checkable

#: Permission bits for files created without an explicit mode.
DEFAULT_FILE_MODE: Final[int] = 0o644

#: Permission bits for directories created without an explicit mode.
DEFAULT_DIRECTORY_MODE: Final[int] = 0o755

ChangeCallback = Callable[[], None]


class EntryType(StrEnum):
    """Kind of an entry as reported by ``Filesystem.attributes()``.

    Symbolic links report ``SYMBOLIC_LINK`` because attribute queries do not
    follow links, while ``Filesystem.status()`` does.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMBOLIC_LINK = "symbolic_link"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class EntryStatus:
    """Result of ``Filesystem.status()``.

    Attributes:
        exists: True if something exists at the path (links are followed).
        is_directory: True if that entry is a directory.

    Example::

        status = fs.status("/tmp/project")
        if status.exists and status.is_directory:
            names = fs.list_names("/tmp/project")
    """

    exists: bool
    is_directory: bool = False

    @classmethod
    def missing(cls) -> EntryStatus:
        return cls(exists=False, is_directory=False)


@dataclass(slots=True, frozen=True)
class EntryAttributes:
    """Metadata for a single entry.

    Attributes:
        entry_type: Kind of the entry itself (links are not followed).
        size_bytes: Content size (0 for directories).
        mode: POSIX permission bits (``st_mode & 0o7777``).
        created_at: Creation time when the backend knows it.
        modified_at: Last modification time when the backend knows it.
    """

    entry_type: EntryType
    size_bytes: int
    mode: int
    created_at: datetime | None = None
    modified_at: datetime | None = None


@runtime_checkable
class Subscription(Protocol):
    """Handle for an active change subscription."""

    @property
    def active(self) -> bool:
        """True until ``cancel()`` has been called."""
        ...

    def cancel(self) -> None:
        """Stop delivering change callbacks. Safe to call more than once."""
        ...


def now() -> datetime:
    """Return the current UTC time truncated to milliseconds."""
    value = datetime.now(UTC)
    microsecond = value.microsecond - value.microsecond % 1000
    return value.replace(microsecond=microsecond)


__all__ = [
    "DEFAULT_DIRECTORY_MODE",
    "DEFAULT_FILE_MODE",
    "ChangeCallback",
    "EntryAttributes",
    "EntryStatus",
    "EntryType",
    "Subscription",
    "now",
]
