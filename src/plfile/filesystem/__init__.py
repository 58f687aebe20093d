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

"""Filesystem access capability and its backends.

This module provides the ``Filesystem`` protocol that ``File`` and ``Folder``
handles perform every operation through, so handle code never couples to a
specific storage implementation.

Example usage::

    from plfile.filesystem import Filesystem, InMemoryFilesystem

    def tree_size(fs: Filesystem, folder: str) -> int:
        return sum(fs.attributes(folder + n).size_bytes for n in fs.list_names(folder))

    tree_size(InMemoryFilesystem(), "/")

Backends:

- ``HostFilesystem``: the host OS, optionally sandboxed under a root
- ``InMemoryFilesystem``: dict-backed tree for tests and sandboxes
"""

from __future__ import annotations

from ._host import HostFilesystem
from ._memory import InMemoryFilesystem
from ._protocol import Filesystem
from ._types import (
    DEFAULT_DIRECTORY_MODE,
    DEFAULT_FILE_MODE,
    ChangeCallback,
    EntryAttributes,
    EntryStatus,
    EntryType,
    Subscription,
)
from ._watch import CallbackSubscription, PollingSubscription

__all__ = [
    "DEFAULT_DIRECTORY_MODE",
    "DEFAULT_FILE_MODE",
    "CallbackSubscription",
    "ChangeCallback",
    "EntryAttributes",
    "EntryStatus",
    "EntryType",
    "Filesystem",
    "HostFilesystem",
    "InMemoryFilesystem",
    "PollingSubscription",
    "Subscription",
]
