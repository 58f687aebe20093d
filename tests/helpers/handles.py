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

"""Backend-independent validation suite for ``File`` and ``Folder`` handles.

Subclasses provide a ``root`` fixture returning an empty ``Folder``; every
test creates what it needs below it. The same suite runs against the
in-memory backend and against the host under ``tmp_path``.
"""

from __future__ import annotations

from abc import abstractmethod

import pytest

from plfile import (
    CreateFileError,
    EmptyPathError,
    EncodingError,
    File,
    Folder,
    MissingEntryError,
    MoveError,
    ReadError,
)


class HandleValidationSuite:
    """Abstract suite exercising handles through a concrete backend."""

    @pytest.fixture
    @abstractmethod
    def root(self) -> Folder:
        """Provide an empty folder to work in."""
        ...

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def test_folder_path_ends_with_separator(self, root: Folder) -> None:
        assert root.path.raw.endswith("/")
        plain = Folder(root.path.raw.rstrip("/"), filesystem=root.filesystem)
        assert plain.path == root.path

    def test_file_requires_existing_file(self, root: Folder) -> None:
        with pytest.raises(MissingEntryError):
            File(root.path.raw + "missing.txt", filesystem=root.filesystem)

    def test_file_rejects_directory(self, root: Folder) -> None:
        root.create_subfolder("dir")
        with pytest.raises(MissingEntryError):
            File(root.path.raw + "dir", filesystem=root.filesystem)

    def test_folder_rejects_file(self, root: Folder) -> None:
        root.create_file("file.txt")
        with pytest.raises(MissingEntryError):
            Folder(root.path.raw + "file.txt", filesystem=root.filesystem)

    def test_empty_file_path_rejected(self, root: Folder) -> None:
        with pytest.raises(EmptyPathError):
            File("", filesystem=root.filesystem)

    def test_parent_reference_resolves(self, root: Folder) -> None:
        root.create_subfolder("a/b")
        root.create_subfolder("a/c")
        folder = Folder(root.path.raw + "a/b/../c", filesystem=root.filesystem)
        assert folder.path.raw == root.path.raw + "a/c/"

    def test_parent_reference_through_missing_folder(self, root: Folder) -> None:
        root.create_subfolder("a/c")
        with pytest.raises(MissingEntryError):
            Folder(root.path.raw + "a/b/../c", filesystem=root.filesystem)

    def test_file_parent_reference_resolves(self, root: Folder) -> None:
        root.create_subfolder("a/b")
        root.create_file("a/f.txt")
        file = File(root.path.raw + "a/b/../f.txt", filesystem=root.filesystem)
        assert file.path.raw == root.path.raw + "a/f.txt"

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    def test_name_and_extension(self, root: Folder) -> None:
        file = root.create_file("archive.tar.gz")
        assert file.name == "archive.tar.gz"
        assert file.extension == "gz"
        assert root.create_file(".bashrc").extension is None
        assert root.create_file("README").extension is None

    def test_folder_name(self, root: Folder) -> None:
        folder = root.create_subfolder("docs")
        assert folder.name == "docs"
        assert folder.description == f"(name: docs, path: {root.path.raw}docs/)"
        assert str(folder) == folder.description

    def test_equality_by_description(self, root: Folder) -> None:
        created = root.create_file("same.txt")
        looked_up = root.file("same.txt")
        assert created == looked_up
        assert hash(created) == hash(looked_up)
        assert created != root

    # -------------------------------------------------------------------------
    # Creation and Lookup
    # -------------------------------------------------------------------------

    def test_create_file_with_intermediate_folders(self, root: Folder) -> None:
        file = root.create_file("a/b/c.txt", contents=b"deep")
        assert file.read() == b"deep"
        assert root.subfolder("a/b").exists() is True

    def test_create_subfolder_empty_path(self, root: Folder) -> None:
        with pytest.raises(EmptyPathError):
            root.create_subfolder("")

    def test_create_file_empty_path(self, root: Folder) -> None:
        with pytest.raises(EmptyPathError):
            root.create_file("")

    def test_create_file_over_folder_fails(self, root: Folder) -> None:
        root.create_subfolder("taken")
        with pytest.raises(CreateFileError):
            root.create_file("taken")

    def test_lookup_ignores_leading_separator(self, root: Folder) -> None:
        root.create_file("x.txt")
        assert root.file("/x.txt") == root.file("x.txt")

    def test_if_needed_is_idempotent(self, root: Folder) -> None:
        first = root.create_file_if_needed("notes.txt", contents=b"original")
        second = root.create_file_if_needed("notes.txt", contents=b"ignored")
        assert first == second
        assert second.read() == b"original"

        folder = root.create_subfolder_if_needed("cache")
        folder.create_file("kept.txt")
        again = root.create_subfolder_if_needed("cache")
        assert again == folder
        assert again.file("kept.txt").exists() is True

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    def test_text_round_trip(self, root: Folder) -> None:
        file = root.create_file("text.txt")
        file.write_text("héllo")
        assert file.read_text() == "héllo"
        assert file.read() == "héllo".encode()

    def test_append(self, root: Folder) -> None:
        file = root.create_file("log.txt", contents=b"one")
        file.append(b"+two")
        file.append_text("+three")
        assert file.read_text() == "one+two+three"

    def test_write_text_unencodable(self, root: Folder) -> None:
        file = root.create_file("ascii.txt", contents=b"keep")
        with pytest.raises(EncodingError):
            file.write_text("snowman ☃", encoding="ascii")
        assert file.read() == b"keep"

    def test_read_text_undecodable(self, root: Folder) -> None:
        file = root.create_file("binary.bin", contents=b"\xff\xfe\xfd")
        with pytest.raises(ReadError):
            file.read_text()

    def test_read_after_external_delete(self, root: Folder) -> None:
        file = root.create_file("gone.txt")
        root.filesystem.remove(file.path.raw)
        with pytest.raises(ReadError):
            file.read()

    # -------------------------------------------------------------------------
    # Rename, Move, Copy, Delete
    # -------------------------------------------------------------------------

    def test_rename_keeps_extension(self, root: Folder) -> None:
        file = root.create_file("draft.md", contents=b"x")
        file.rename("final")
        assert file.name == "final.md"
        assert file.read() == b"x"
        assert root.files.names() == ["final.md"]

    def test_rename_without_keeping_extension(self, root: Folder) -> None:
        file = root.create_file("data.csv")
        file.rename("data.json", keep_extension=False)
        assert file.name == "data.json"

    def test_rename_folder(self, root: Folder) -> None:
        folder = root.create_subfolder("old")
        folder.create_file("inside.txt")
        folder.rename("new")
        assert folder.path.raw == root.path.raw + "new/"
        assert folder.file("inside.txt").exists() is True

    def test_move_into_folder(self, root: Folder) -> None:
        target = root.create_subfolder("target")
        file = root.create_file("moving.txt", contents=b"m")
        file.move(target)
        assert file.path.raw == target.path.raw + "moving.txt"
        assert target.file("moving.txt").read() == b"m"
        assert root.files.names() == []

    def test_move_conflict_keeps_path(self, root: Folder) -> None:
        target = root.create_subfolder("target")
        target.create_file("clash.txt")
        file = root.create_file("clash.txt")
        before = file.path
        with pytest.raises(MoveError):
            file.move(target)
        assert file.path == before
        assert file.exists() is True

    def test_copy_returns_new_handle(self, root: Folder) -> None:
        target = root.create_subfolder("copies")
        original = root.create_file("source.txt", contents=b"dup")
        copy = original.copy(target)
        assert copy.path.raw == target.path.raw + "source.txt"
        assert copy.read() == b"dup"
        assert original.exists() is True

    def test_copy_folder(self, root: Folder) -> None:
        source = root.create_subfolder("tree")
        source.create_file("leaf.txt", contents=b"leaf")
        target = root.create_subfolder("backup")
        copy = source.copy(target)
        assert isinstance(copy, Folder)
        assert copy.file("leaf.txt").read() == b"leaf"

    def test_delete_then_exists(self, root: Folder) -> None:
        file = root.create_file("doomed.txt")
        folder = root.create_subfolder("doomed")
        file.delete()
        folder.delete()
        assert file.exists() is False
        assert folder.exists() is False

    def test_managed_by_same_backend(self, root: Folder) -> None:
        file = root.create_file("shared.txt")
        assert file.managed_by(root.filesystem) == file

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    def test_hidden_entries_filtered(self, root: Folder) -> None:
        root.create_file("a.txt")
        root.create_file(".b.txt")
        assert root.files.names() == ["a.txt"]
        assert root.files.including_hidden().names() == [".b.txt", "a.txt"]

    def test_recursive_files_in_level_order(self, root: Folder) -> None:
        root.create_file("f1")
        root.create_file("sub1/f2")
        root.create_file("sub1/sub2/f3")
        assert root.files.names() == ["f1"]
        assert root.files.recursive().names() == ["f1", "f2", "f3"]

    def test_recursive_folders(self, root: Folder) -> None:
        root.create_subfolder("a/x")
        root.create_subfolder("b")
        root.create_subfolder(".hidden/inner")
        assert root.subfolders.names() == ["a", "b"]
        assert root.subfolders.recursive().names() == ["a", "b", "x"]
        assert root.subfolders.recursive().including_hidden().names() == [
            ".hidden",
            "a",
            "b",
            "inner",
            "x",
        ]

    def test_all_files_and_folders(self, root: Folder) -> None:
        root.create_file("top.txt")
        root.create_file("nested/deep.txt")
        assert [f.name for f in root.all_files()] == ["top.txt"]
        assert [f.name for f in root.all_files(recursive=True)] == [
            "top.txt",
            "deep.txt",
        ]
        assert [f.name for f in root.all_folders()] == ["nested"]

    def test_empty_respects_hidden(self, root: Folder) -> None:
        root.create_file("visible.txt")
        root.create_file(".hidden.txt")
        root.empty()
        assert root.files.including_hidden().names() == [".hidden.txt"]
        root.empty(include_hidden=True)
        assert root.files.including_hidden().names() == []

    def test_empty_removes_subfolders(self, root: Folder) -> None:
        root.create_file("sub/inner.txt")
        root.create_file("top.txt")
        root.empty()
        assert root.subfolders.names() == []
        assert root.files.names() == []
        assert root.exists() is True

    def test_move_contents(self, root: Folder) -> None:
        source = root.create_subfolder("source")
        target = root.create_subfolder("target")
        source.create_file("a.txt")
        source.create_file("sub/b.txt")
        source.create_file(".hidden")
        source.move_contents(target)
        assert target.files.names() == ["a.txt"]
        assert target.subfolders.names() == ["sub"]
        assert source.files.including_hidden().names() == [".hidden"]

    def test_sequence_bulk_delete(self, root: Folder) -> None:
        root.create_file("one.txt")
        root.create_file("two.txt")
        root.create_subfolder("keep")
        root.files.delete()
        assert root.files.names() == []
        assert root.subfolders.names() == ["keep"]

    def test_sequence_description(self, root: Folder) -> None:
        first = root.create_file("1.txt")
        second = root.create_file("2.txt")
        assert str(root.files) == f"{first.description}\n{second.description}"

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def test_dates_available(self, root: Folder) -> None:
        file = root.create_file("dated.txt")
        assert file.modification_date is not None
        assert file.creation_date is not None

    def test_permissions_round_trip(self, root: Folder) -> None:
        file = root.create_file("private.txt")
        file.set_permissions(0o600)
        assert file.permissions() == 0o600

    def test_symbolic_link_to_file(self, root: Folder) -> None:
        target = root.create_file("target.txt", contents=b"via link")
        link = root.create_symbolic_link("link.txt", target.path)
        assert isinstance(link, File)
        assert link.is_symbolic_link() is True
        assert link.symbolic_link_destination() == target.path
        assert link.read() == b"via link"
        assert target.is_symbolic_link() is False
        assert target.symbolic_link_destination() is None

    def test_symbolic_link_to_folder(self, root: Folder) -> None:
        target = root.create_subfolder("real")
        target.create_file("inside.txt")
        link = root.create_symbolic_link("alias", target.path)
        assert isinstance(link, Folder)
        assert link.path.raw == root.path.raw + "alias/"
        assert link.is_symbolic_link() is True
        assert link.files.names() == ["inside.txt"]
