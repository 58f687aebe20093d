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

"""In-memory filesystem backend.

This module provides a dict-backed implementation of the ``Filesystem``
protocol, suitable for deterministic tests and sandboxes that must never touch
the host. It models directories, regular files, permission bits and symbolic
links, and delivers change callbacks synchronously after each mutation.

Example usage::

    from plfile import Folder
    from plfile.filesystem import InMemoryFilesystem

    fs = InMemoryFilesystem()
    fs.create_directory("/project")
    folder = Folder("/project", filesystem=fs)
    folder.create_file("README.md").write_text("hello")
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from ..logging import StructuredLogger, get_logger
from ._types import (
    DEFAULT_DIRECTORY_MODE,
    DEFAULT_FILE_MODE,
    ChangeCallback,
    EntryAttributes,
    EntryStatus,
    EntryType,
    now,
)
from ._watch import CallbackSubscription

__all__ = ["InMemoryFilesystem"]

logger: StructuredLogger = get_logger(__name__, context={"component": "memory_fs"})

_ROOT = "/"
_MAX_LINK_HOPS = 40


# ---------------------------------------------------------------------------
# Internal Types
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _MemoryFile:
    content: bytes
    created_at: datetime
    modified_at: datetime
    mode: int = DEFAULT_FILE_MODE


@dataclass(slots=True)
class _MemoryDirectory:
    created_at: datetime
    modified_at: datetime
    mode: int = DEFAULT_DIRECTORY_MODE


@dataclass(slots=True)
class _MemoryLink:
    destination: str
    created_at: datetime = field(default_factory=now)


def _is_under(path: str, base: str) -> bool:
    """True if ``path`` equals ``base`` or is one of its descendants."""
    if base == _ROOT:
        return True
    return path == base or path.startswith(base + "/")


def _rebase(path: str, old: str, new: str) -> str:
    if path == old:
        return new
    return new.rstrip("/") + path[len(old) :]


# ---------------------------------------------------------------------------
# InMemoryFilesystem Implementation
# ---------------------------------------------------------------------------


class InMemoryFilesystem:
    """Dict-backed filesystem tree rooted at ``/``.

    Args:
        read_only: When True every mutation raises ``PermissionError``.
        current_directory: Absolute path that relative paths resolve against.
            Created on construction if missing.
    """

    def __init__(
        self,
        *,
        read_only: bool = False,
        current_directory: str = _ROOT,
    ) -> None:
        timestamp = now()
        self._files: dict[str, _MemoryFile] = {}
        self._directories: dict[str, _MemoryDirectory] = {
            _ROOT: _MemoryDirectory(created_at=timestamp, modified_at=timestamp)
        }
        self._links: dict[str, _MemoryLink] = {}
        self._subscriptions: list[CallbackSubscription] = []
        self._read_only = False
        self._cwd = _ROOT
        self._cwd = self._normalize(current_directory)
        self._ensure_directories(self._cwd)
        self._read_only = read_only

    def __repr__(self) -> str:
        return (
            f"InMemoryFilesystem(files={len(self._files)}, "
            f"directories={len(self._directories)}, links={len(self._links)})"
        )

    @property
    def read_only(self) -> bool:
        """True if write operations are disabled."""
        return self._read_only

    # --- Path helpers ---

    def _normalize(self, path: str) -> str:
        if not path:
            return self._cwd
        if not path.startswith("/"):
            path = posixpath.join(self._cwd, path)
        normalized = posixpath.normpath(path)
        if normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        return normalized

    def _follow(self, path: str, *, follow_last: bool) -> str:
        """Resolve symbolic links along ``path``.

        Raises:
            OSError: Too many levels of symbolic links.
        """
        hops = 0
        current = path
        while True:
            parts = [part for part in current.split("/") if part]
            resolved = _ROOT
            restart = False
            for index, part in enumerate(parts):
                candidate = posixpath.join(resolved, part)
                is_last = index == len(parts) - 1
                link = self._links.get(candidate)
                if link is None or (is_last and not follow_last):
                    resolved = candidate
                    continue
                hops += 1
                if hops > _MAX_LINK_HOPS:
                    msg = f"Too many levels of symbolic links: {path}"
                    raise OSError(msg)
                target = link.destination
                if not target.startswith("/"):
                    target = posixpath.join(resolved, target)
                remainder = "/".join(parts[index + 1 :])
                current = posixpath.normpath(
                    posixpath.join(target, remainder) if remainder else target
                )
                restart = True
                break
            if not restart:
                return resolved

    def _entry_path(self, path: str) -> str:
        """Normalized path with links resolved in every component but the last."""
        return self._follow(self._normalize(path), follow_last=False)

    def _target_path(self, path: str) -> str:
        """Normalized path with every link resolved."""
        return self._follow(self._normalize(path), follow_last=True)

    def _lexists(self, key: str) -> bool:
        return key in self._files or key in self._directories or key in self._links

    def _require_parent_directory(self, key: str) -> str:
        parent = posixpath.dirname(key)
        resolved = self._follow(parent, follow_last=True)
        if resolved not in self._directories:
            if resolved in self._files:
                msg = f"Not a directory: {parent}"
                raise NotADirectoryError(msg)
            msg = f"Parent directory does not exist: {parent}"
            raise FileNotFoundError(msg)
        return resolved

    def _check_writable(self) -> None:
        if self._read_only:
            msg = "Filesystem is read-only"
            raise PermissionError(msg)

    def _keys_under(self, base: str) -> list[str]:
        keys: list[str] = []
        for table in (self._files, self._directories, self._links):
            keys.extend(key for key in table if _is_under(key, base))
        return keys

    def _touch_parent(self, key: str) -> None:
        parent = self._directories.get(posixpath.dirname(key))
        if parent is not None:
            parent.modified_at = now()

    def _notify(self, changed: Iterable[str]) -> None:
        paths = list(changed)
        for subscription in list(self._subscriptions):
            if any(_is_under(path, subscription.path) for path in paths):
                subscription.notify()

    # --- Queries ---

    def status(self, path: str) -> EntryStatus:
        try:
            key = self._target_path(path)
        except OSError:
            return EntryStatus.missing()
        if key in self._directories:
            return EntryStatus(exists=True, is_directory=True)
        if key in self._files:
            return EntryStatus(exists=True, is_directory=False)
        return EntryStatus.missing()

    def exists(self, path: str) -> bool:
        return self.status(path).exists

    def list_names(self, path: str) -> Sequence[str]:
        key = self._target_path(path)
        if key in self._files:
            msg = f"Not a directory: {path}"
            raise NotADirectoryError(msg)
        if key not in self._directories:
            raise FileNotFoundError(path)
        names: list[str] = []
        for table in (self._files, self._directories, self._links):
            names.extend(
                posixpath.basename(child)
                for child in table
                if child != _ROOT and posixpath.dirname(child) == key
            )
        return names

    def read_file(self, path: str) -> bytes:
        key = self._target_path(path)
        if key in self._directories:
            msg = f"Is a directory: {path}"
            raise IsADirectoryError(msg)
        if key not in self._files:
            raise FileNotFoundError(path)
        return self._files[key].content

    def attributes(self, path: str) -> EntryAttributes:
        key = self._entry_path(path)
        link = self._links.get(key)
        if link is not None:
            return EntryAttributes(
                entry_type=EntryType.SYMBOLIC_LINK,
                size_bytes=len(link.destination),
                mode=0o777,
                created_at=link.created_at,
                modified_at=link.created_at,
            )
        directory = self._directories.get(key)
        if directory is not None:
            return EntryAttributes(
                entry_type=EntryType.DIRECTORY,
                size_bytes=0,
                mode=directory.mode,
                created_at=directory.created_at,
                modified_at=directory.modified_at,
            )
        file = self._files.get(key)
        if file is None:
            raise FileNotFoundError(path)
        return EntryAttributes(
            entry_type=EntryType.FILE,
            size_bytes=len(file.content),
            mode=file.mode,
            created_at=file.created_at,
            modified_at=file.modified_at,
        )

    def read_symbolic_link(self, path: str) -> str | None:
        try:
            key = self._entry_path(path)
        except OSError:
            return None
        link = self._links.get(key)
        return link.destination if link is not None else None

    def current_directory(self) -> str:
        return self._cwd

    # --- Mutations ---

    def _ensure_directories(self, key: str) -> list[str]:
        created: list[str] = []
        current = _ROOT
        for part in [part for part in key.split("/") if part]:
            current = self._follow(posixpath.join(current, part), follow_last=True)
            if current in self._directories:
                continue
            if current in self._files:
                msg = f"A file exists at path: {current}"
                raise FileExistsError(msg)
            self._check_writable()
            timestamp = now()
            self._directories[current] = _MemoryDirectory(
                created_at=timestamp, modified_at=timestamp
            )
            self._touch_parent(current)
            created.append(current)
        return created

    def create_directory(self, path: str, *, create_intermediates: bool = True) -> None:
        self._check_writable()
        key = self._entry_path(path)
        if self.status(key).is_directory:
            return
        if self._lexists(key):
            msg = f"A file exists at path: {path}"
            raise FileExistsError(msg)
        if create_intermediates:
            created = self._ensure_directories(key)
        else:
            _ = self._require_parent_directory(key)
            timestamp = now()
            self._directories[key] = _MemoryDirectory(
                created_at=timestamp, modified_at=timestamp
            )
            self._touch_parent(key)
            created = [key]
        self._notify(created)

    def create_file(self, path: str, contents: bytes | None = None) -> bool:
        self._check_writable()
        try:
            self.write_file(path, contents or b"")
        except OSError as err:
            logger.warning(
                "Could not create file.",
                event="memory_file_create_failed",
                context={"path": path, "error": str(err)},
            )
            return False
        return True

    def write_file(self, path: str, data: bytes) -> None:
        self._check_writable()
        key = self._target_path(path)
        if key in self._directories:
            msg = f"Is a directory: {path}"
            raise IsADirectoryError(msg)
        _ = self._require_parent_directory(key)
        timestamp = now()
        existing = self._files.get(key)
        if existing is None:
            self._files[key] = _MemoryFile(
                content=bytes(data), created_at=timestamp, modified_at=timestamp
            )
            self._touch_parent(key)
        else:
            existing.content = bytes(data)
            existing.modified_at = timestamp
        self._notify([key])

    def append_file(self, path: str, data: bytes) -> None:
        self._check_writable()
        key = self._target_path(path)
        if key in self._directories:
            msg = f"Is a directory: {path}"
            raise IsADirectoryError(msg)
        existing = self._files.get(key)
        if existing is None:
            raise FileNotFoundError(path)
        existing.content += data
        existing.modified_at = now()
        self._notify([key])

    def _check_transfer(self, source: str, destination: str) -> tuple[str, str]:
        self._check_writable()
        src = self._entry_path(source)
        dst = self._entry_path(destination)
        if not self._lexists(src):
            raise FileNotFoundError(source)
        if self._lexists(dst):
            msg = f"Destination already exists: {destination}"
            raise FileExistsError(msg)
        if _is_under(dst, src):
            msg = f"Cannot move or copy a directory into itself: {destination}"
            raise OSError(msg)
        _ = self._require_parent_directory(dst)
        return src, dst

    def move(self, source: str, destination: str) -> None:
        src, dst = self._check_transfer(source, destination)
        for table in (self._files, self._directories, self._links):
            moved = {key: table.pop(key) for key in list(table) if _is_under(key, src)}
            for key, value in moved.items():
                table[_rebase(key, src, dst)] = value  # type: ignore[index]
        self._touch_parent(src)
        self._touch_parent(dst)
        logger.debug(
            "Moved entry.",
            event="memory_entry_moved",
            context={"source": src, "destination": dst},
        )
        self._notify([src, dst])

    def copy(self, source: str, destination: str) -> None:
        src, dst = self._check_transfer(source, destination)
        timestamp = now()
        for key in [key for key in self._files if _is_under(key, src)]:
            self._files[_rebase(key, src, dst)] = replace(
                self._files[key], created_at=timestamp
            )
        for key in [key for key in self._directories if _is_under(key, src)]:
            self._directories[_rebase(key, src, dst)] = replace(
                self._directories[key], created_at=timestamp
            )
        for key in [key for key in self._links if _is_under(key, src)]:
            self._links[_rebase(key, src, dst)] = _MemoryLink(
                destination=self._links[key].destination
            )
        self._touch_parent(dst)
        self._notify([dst])

    def remove(self, path: str) -> None:
        self._check_writable()
        key = self._entry_path(path)
        if key == _ROOT:
            msg = "Cannot delete root directory"
            raise PermissionError(msg)
        if not self._lexists(key):
            raise FileNotFoundError(path)
        if key in self._links or key in self._files:
            self._links.pop(key, None)
            self._files.pop(key, None)
        else:
            for child in self._keys_under(key):
                self._files.pop(child, None)
                self._directories.pop(child, None)
                self._links.pop(child, None)
        self._touch_parent(key)
        self._notify([key])

    def set_attributes(
        self,
        path: str,
        *,
        mode: int | None = None,
        modified_at: datetime | None = None,
    ) -> None:
        self._check_writable()
        key = self._target_path(path)
        record = self._files.get(key) or self._directories.get(key)
        if record is None:
            raise FileNotFoundError(path)
        if mode is not None:
            record.mode = mode & 0o7777
        if modified_at is not None:
            record.modified_at = modified_at
        self._notify([key])

    def create_symbolic_link(self, path: str, destination: str) -> None:
        self._check_writable()
        key = self._entry_path(path)
        if self._lexists(key):
            msg = f"File exists: {path}"
            raise FileExistsError(msg)
        _ = self._require_parent_directory(key)
        self._links[key] = _MemoryLink(destination=destination)
        self._touch_parent(key)
        self._notify([key])

    # --- Notifications ---

    def subscribe(self, path: str, callback: ChangeCallback) -> CallbackSubscription:
        """Register ``callback`` for mutations at or below ``path``."""
        subscription = CallbackSubscription(
            path=self._entry_path(path),
            callback=callback,
            on_cancel=self._subscriptions.remove,
        )
        self._subscriptions.append(subscription)
        return subscription
