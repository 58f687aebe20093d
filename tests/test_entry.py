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

"""Tests for behaviour shared by file and folder handles."""

from __future__ import annotations

from pathlib import Path as HostPath

import pytest
from hypothesis import given, settings, strategies as st

from plfile import (
    CreateFolderError,
    EntryKind,
    File,
    Folder,
    HostFilesystem,
    InMemoryFilesystem,
    MissingEntryError,
    Path,
    Store,
    default_filesystem,
)


class TestConstruction:
    def test_default_filesystem_is_shared_host(self, tmp_path: HostPath) -> None:
        (tmp_path / "a.txt").write_text("")
        file = File(str(tmp_path / "a.txt"))
        assert file.filesystem is default_filesystem()
        assert isinstance(file.filesystem, HostFilesystem)

    def test_from_store_wraps_without_io(self, memory_root: Folder) -> None:
        store = memory_root.store
        assert Folder.from_store(store).store is store

    def test_from_store_rejects_other_kind(self, memory_root: Folder) -> None:
        with pytest.raises(TypeError, match="requires a file store"):
            File.from_store(memory_root.store)

    def test_kind_class_attribute(self) -> None:
        assert File.kind is EntryKind.FILE
        assert Folder.kind is EntryKind.FOLDER

    def test_repr(self, memory_root: Folder) -> None:
        file = memory_root.create_file("r.txt")
        assert repr(file) == "File(name: r.txt, path: /workspace/r.txt)"


class TestIdentity:
    def test_file_and_folder_never_equal(self, memory_fs: InMemoryFilesystem) -> None:
        memory_fs.write_file("/workspace/x", b"")
        memory_fs.create_directory("/other/x")
        file = File("/workspace/x", filesystem=memory_fs)
        folder = Folder("/other/x", filesystem=memory_fs)
        assert file != folder
        assert (file == "not a handle") is False

    def test_handles_usable_in_sets(self, memory_root: Folder) -> None:
        a = memory_root.create_file("a")
        again = memory_root.file("a")
        assert {a, again} == {a}

    def test_move_changes_description(self, memory_root: Folder) -> None:
        target = memory_root.create_subfolder("target")
        file = memory_root.create_file("f.txt")
        file.move(target)
        assert file.description == "(name: f.txt, path: /workspace/target/f.txt)"


class TestManagedBy:
    def test_same_path_on_other_backend(self, memory_root: Folder) -> None:
        other = InMemoryFilesystem()
        other.create_directory("/workspace")
        other.write_file("/workspace/shared.txt", b"other")
        file = memory_root.create_file("shared.txt", contents=b"mine")
        moved = file.managed_by(other)
        assert moved.filesystem is other
        assert moved.read() == b"other"
        assert file.read() == b"mine"

    def test_missing_on_other_backend(self, memory_root: Folder) -> None:
        file = memory_root.create_file("only-here.txt")
        with pytest.raises(MissingEntryError):
            file.managed_by(InMemoryFilesystem())


class TestFolderCreation:
    def test_create_subfolder_through_file_fails(self, memory_root: Folder) -> None:
        memory_root.create_file("blocker")
        with pytest.raises(CreateFolderError) as excinfo:
            memory_root.create_subfolder("blocker/child")
        assert excinfo.value.path == Path("/workspace/blocker/child")
        assert isinstance(excinfo.value.cause, FileExistsError)

    def test_create_file_through_file_fails(self, memory_root: Folder) -> None:
        memory_root.create_file("blocker")
        with pytest.raises(CreateFolderError):
            memory_root.create_file("blocker/child.txt")

    def test_create_subfolder_existing_returns_same(self, memory_root: Folder) -> None:
        first = memory_root.create_subfolder("same")
        assert memory_root.create_subfolder("same") == first

    def test_empty_folder_is_working_directory(self) -> None:
        fs = InMemoryFilesystem(current_directory="/home/me")
        assert Folder(filesystem=fs).path == Path("/home/me/")

    def test_dangling_symbolic_link_has_no_handle(self, memory_root: Folder) -> None:
        with pytest.raises(MissingEntryError):
            memory_root.create_symbolic_link("dangling", "/nowhere")
        assert memory_root.filesystem.read_symbolic_link("/workspace/dangling") == (
            "/nowhere"
        )

    def test_subfolder_and_file_lookup(self, memory_root: Folder) -> None:
        memory_root.create_file("a/b.txt")
        assert memory_root.subfolder("a").path == Path("/workspace/a/")
        assert memory_root.file("a/b.txt").path == Path("/workspace/a/b.txt")
        with pytest.raises(MissingEntryError):
            memory_root.subfolder("a/b.txt")


class TestWellKnownFolders:
    def test_home_folder(
        self, memory_fs: InMemoryFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", "/workspace")
        home = Folder("~", filesystem=memory_fs)
        assert home.path == Path("/workspace/")
        assert home == Folder(Path.home(), filesystem=memory_fs)

    def test_store_built_from_path_value(self, memory_root: Folder) -> None:
        store = Store(Path("/workspace"), EntryKind.FOLDER, memory_root.filesystem)
        assert Folder.from_store(store) == memory_root


@settings(max_examples=50, deadline=None)
@given(
    name=st.text(alphabet="abcdefgh0123456789-_", min_size=1, max_size=12),
    payload=st.binary(max_size=256),
)
def test_written_bytes_read_back(name: str, payload: bytes) -> None:
    fs = InMemoryFilesystem()
    root = Folder("/", filesystem=fs)
    file = root.create_file_if_needed(f"{name}.bin")
    file.write(payload)
    assert file.read() == payload
    assert root.file(f"{name}.bin") == file


@settings(max_examples=50, deadline=None)
@given(text=st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=64))
def test_text_survives_utf8(text: str) -> None:
    fs = InMemoryFilesystem()
    file = Folder("/", filesystem=fs).create_file("t.txt")
    file.write_text(text)
    assert file.read_text() == text
