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

"""String-backed path values.

``Path`` is a thin value type around a raw path string. It never touches the
file system: construction cannot fail and every accessor is a pure function of
the string. Paths are only validated later, when a ``Store`` normalizes them
against a live access capability.

Folder paths produced by this module end with ``SEPARATOR``; file paths do not.

Examples:
    >>> Path("/a/b/").parent
    Path('/a/')
    >>> Path("/a/b.txt").last_component
    'b.txt'
    >>> Path("/a").joining("/b")
    Path('/a/b')
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from typing import Final

from .dbc import ensure

SEPARATOR: Final[str] = "/"
PARENT_REFERENCE: Final[str] = "../"
HOME_MARKER: Final[str] = "~"


def trim_prefix(value: str, prefix: str) -> str:
    """Remove ``prefix`` from ``value`` once, if present."""
    return value.removeprefix(prefix)


def ensure_suffix(value: str, suffix: str) -> str:
    """Append ``suffix`` to ``value`` unless it already ends with it."""
    if value.endswith(suffix):
        return value
    return value + suffix


def _parent_keeps_separator(path: Path, *, result: Path) -> bool:
    return not result.raw or result.raw.endswith(SEPARATOR)


@dataclass(slots=True, frozen=True)
class Path:
    """Immutable path value compared and hashed by its raw string."""

    raw: str = ""

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"Path({self.raw!r})"

    def __fspath__(self) -> str:
        return self.raw

    @property
    def is_absolute(self) -> bool:
        return self.raw.startswith(SEPARATOR)

    @property
    def is_folder_like(self) -> bool:
        """True when the raw value ends with a separator."""
        return self.raw.endswith(SEPARATOR)

    @property
    @ensure(_parent_keeps_separator)
    def parent(self) -> Path:
        """Path of the containing folder, with a trailing separator.

        The trailing separator is stripped first, then the last component. The
        parent of the root is the root; the parent of a single relative
        component is the empty path (the working directory).
        """
        stripped = self.raw.rstrip(SEPARATOR)
        if not stripped:
            return Path(SEPARATOR) if self.raw else Path()
        index = stripped.rfind(SEPARATOR)
        if index < 0:
            return Path()
        return Path(stripped[: index + 1])

    @property
    def last_component(self) -> str:
        """Final non-empty component; ``"/"`` for the root."""
        stripped = self.raw.rstrip(SEPARATOR)
        if not stripped:
            return SEPARATOR if self.raw else ""
        return stripped.rsplit(SEPARATOR, 1)[-1]

    def removing_prefix(self, prefix: str) -> Path:
        return Path(trim_prefix(self.raw, prefix))

    def appending_suffix(self, suffix: str) -> Path:
        return Path(ensure_suffix(self.raw, suffix))

    def joining(self, child: Path | str) -> Path:
        """Append ``child`` to this folder path, dropping its leading separator."""
        child_raw = child.raw if isinstance(child, Path) else child
        base = ensure_suffix(self.raw, SEPARATOR) if self.raw else self.raw
        return Path(base + trim_prefix(child_raw, SEPARATOR))

    # --- Well-known locations ---

    @classmethod
    def root(cls) -> Path:
        return cls(SEPARATOR)

    @classmethod
    def home(cls) -> Path:
        """The user's home folder, taken from ``$HOME`` when set."""
        value = os.environ.get("HOME") or os.path.expanduser(HOME_MARKER)
        return cls(ensure_suffix(value, SEPARATOR))

    @classmethod
    def current(cls) -> Path:
        return cls(ensure_suffix(os.getcwd(), SEPARATOR))

    @classmethod
    def temporary(cls) -> Path:
        return cls(ensure_suffix(tempfile.gettempdir(), SEPARATOR))

    @classmethod
    def documents(cls) -> Path:
        return cls.home().joining("Documents/")

    @classmethod
    def downloads(cls) -> Path:
        return cls.home().joining("Downloads/")

    @classmethod
    def desktop(cls) -> Path:
        return cls.home().joining("Desktop/")

    @classmethod
    def library(cls) -> Path:
        return cls.home().joining("Library/")


def as_path(value: Path | str) -> Path:
    """Coerce a raw string into a ``Path``."""
    return value if isinstance(value, Path) else Path(value)


__all__ = [
    "HOME_MARKER",
    "PARENT_REFERENCE",
    "SEPARATOR",
    "Path",
    "as_path",
    "ensure_suffix",
    "trim_prefix",
]
