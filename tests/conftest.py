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

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path as HostPath

import pytest

from plfile import Folder
from plfile.dbc import dbc_enabled
from plfile.filesystem import HostFilesystem, InMemoryFilesystem

MEMORY_WORKSPACE = "/workspace"


@pytest.fixture(autouse=True)
def contracts_active() -> Iterator[None]:
    """Run every test with design-by-contract checks enforced."""
    with dbc_enabled():
        yield


@pytest.fixture
def memory_fs() -> InMemoryFilesystem:
    fs = InMemoryFilesystem()
    fs.create_directory(MEMORY_WORKSPACE)
    return fs


@pytest.fixture
def memory_root(memory_fs: InMemoryFilesystem) -> Folder:
    """Empty folder on a fresh in-memory tree."""
    return Folder(MEMORY_WORKSPACE, filesystem=memory_fs)


@pytest.fixture
def host_fs() -> HostFilesystem:
    return HostFilesystem(poll_interval=3600)


@pytest.fixture
def host_root(tmp_path: HostPath, host_fs: HostFilesystem) -> Folder:
    """Empty folder on the host, under pytest's temporary directory."""
    return Folder(str(tmp_path), filesystem=host_fs)
