import pytest

from tag_vault import VaultDocumentStore, VaultMetadata, build_tag_index
from tag_vault.core.vault_operations import construct_note_path, resolve_document_path


@pytest.fixture
def vault(tmp_path):
    vault_path = tmp_path / "vault"
    vault_path.mkdir()
    return VaultMetadata(name="test", path=vault_path, description="", exists=True)


def test_construct_preserves_dot_in_basename():
    """Dots within the note name are preserved before the .md suffix."""
    assert construct_note_path("v1.4 Release Notes").as_posix() == "v1.4 Release Notes.md"


def test_construct_nested_path():
    assert construct_note_path("Journal/2024/2024-01-15").as_posix() == "Journal/2024/2024-01-15.md"


def test_resolve_rejects_directory_traversal(vault):
    """Paths escaping the vault root are rejected."""
    with pytest.raises(ValueError, match="escapes vault"):
        resolve_document_path(vault, "../outside.md")


def test_list_documents_sorted_and_markdown_only(vault):
    (vault.path / "b.md").write_text("b", encoding="utf-8")
    (vault.path / "a.md").write_text("a", encoding="utf-8")
    (vault.path / "notes.txt").write_text("skip", encoding="utf-8")
    (vault.path / "Journal").mkdir()
    (vault.path / "Journal" / "2024-01-15.md").write_text("j", encoding="utf-8")

    assert VaultDocumentStore(vault).list_documents() == ["Journal/2024-01-15.md", "a.md", "b.md"]


def test_read_preserves_line_endings(vault):
    (vault.path / "a.md").write_bytes(b"#a\r\nline\r\n")
    assert VaultDocumentStore(vault).read("a.md") == "#a\r\nline\r\n"


def test_write_replaces_whole_file(vault):
    store = VaultDocumentStore(vault)
    (vault.path / "a.md").write_text("old content that is longer", encoding="utf-8")

    store.write("a.md", "new\r\n")

    assert (vault.path / "a.md").read_bytes() == b"new\r\n"


def test_byte_order_mark_file_is_indexed(vault):
    (vault.path / "2024-01-15.md").write_bytes(b"\xef\xbb\xbf#work\nfinish report\n")
    store = VaultDocumentStore(vault)

    index = build_tag_index(store.iter_documents())

    assert store.read("2024-01-15.md").startswith("\ufeff")
    assert index.tags == ["#work"]
    assert index.hits_for("#work")[0].section.content == "finish report"
