"""Tests for tag aggregation and deletion across a vault."""

from pathlib import Path

import pytest

from tag_vault import (
    DeleteResult,
    DocumentReadError,
    DocumentWriteError,
    InvalidTagError,
    TaggedContent,
    TagService,
    VaultDocumentStore,
    VaultMetadata,
    parse_tagged_sections,
)
from tag_vault.core.tag_operations import (
    delete_tag_content,
    get_tag_content,
    list_vault_tags,
    parse_tagged_note,
    refresh_vault_tags,
    reset_tag_services,
    search_vault_tags,
)

DAILY = "#work\nfinish report\n---\n#home\nbuy milk\n"


def _write(vault: VaultMetadata, name: str, content: str) -> Path:
    path = vault.path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
    return path


def _read(vault: VaultMetadata, name: str) -> str:
    return (vault.path / name).read_bytes().decode("utf-8")


@pytest.fixture(autouse=True)
def _fresh_services():
    reset_tag_services()
    yield
    reset_tag_services()


@pytest.fixture
def vault(tmp_path) -> VaultMetadata:
    vault_path = tmp_path / "vault"
    vault_path.mkdir()
    return VaultMetadata(name="test", path=vault_path, description="Test vault", exists=True)


@pytest.fixture
def daily_vault(vault) -> VaultMetadata:
    _write(vault, "2024-01-15.md", DAILY)
    return vault


def _service(vault: VaultMetadata) -> TagService:
    return TagService(VaultDocumentStore(vault))


class TestReads:
    """list_tags / get_content over the index snapshot."""

    def test_list_tags(self, daily_vault):
        assert _service(daily_vault).list_tags() == ["#work", "#home"]

    def test_get_content(self, daily_vault):
        assert _service(daily_vault).get_content("#work") == [
            TaggedContent(date="2024-01-15", file_path="2024-01-15.md", content="finish report")
        ]

    def test_status_does_not_build_index(self, daily_vault):
        service = _service(daily_vault)
        assert service.status() == {"indexed": False, "notes": None, "tags": None}

        service.list_tags()

        assert service.is_indexed
        assert service.status() == {"indexed": True, "notes": 1, "tags": 2}

    def test_valid_but_unused_tag_returns_empty(self, daily_vault):
        assert _service(daily_vault).get_content("#nonexistent-but-valid") == []

    @pytest.mark.parametrize("tag", ["work", "#bad tag", "", "#"])
    def test_invalid_tag_rejected(self, daily_vault, tag):
        with pytest.raises(InvalidTagError):
            _service(daily_vault).get_content(tag)

    def test_content_ordered_by_path_then_position(self, vault):
        _write(vault, "2024-01-16.md", "#log\nsecond day\n")
        _write(vault, "2024-01-15.md", "#log\nfirst day a\n---\n#log\nfirst day b\n")
        _write(vault, "projects/alpha.md", "#log\nundated\n")

        entries = _service(vault).get_content("#log")

        assert [(e.date, e.file_path, e.content) for e in entries] == [
            ("2024-01-15", "2024-01-15.md", "first day a"),
            ("2024-01-15", "2024-01-15.md", "first day b"),
            ("2024-01-16", "2024-01-16.md", "second day"),
            (None, "projects/alpha.md", "undated"),
        ]

    def test_tags_are_case_sensitive(self, vault):
        _write(vault, "a.md", "#Work\nupper\n#work\nlower\n")
        service = _service(vault)

        assert service.list_tags() == ["#Work", "#work"]
        assert [e.content for e in service.get_content("#work")] == ["lower"]

    def test_search_tags(self, vault):
        _write(vault, "a.md", "#project-a\nx\n#home\ny\n#Project-B\nz\n")
        assert _service(vault).search_tags("PROJ") == ["#project-a", "#Project-B"]

    def test_tag_counts(self, vault):
        _write(vault, "a.md", "#a\n1\n#b\n2\n")
        _write(vault, "b.md", "#a\n3\n")
        assert _service(vault).tag_counts() == {"#a": 2, "#b": 1}

    def test_index_is_a_snapshot_until_refresh(self, daily_vault):
        service = _service(daily_vault)
        assert service.list_tags() == ["#work", "#home"]

        _write(daily_vault, "later.md", "#errands\npost office\n")
        assert service.list_tags() == ["#work", "#home"]

        service.refresh()
        assert service.list_tags() == ["#work", "#home", "#errands"]

    def test_failed_refresh_keeps_previous_index(self, daily_vault):
        service = _service(daily_vault)
        service.refresh()
        (daily_vault.path / "broken.md").write_bytes(b"#x\n\xff\xfe not utf-8\n")

        with pytest.raises(DocumentReadError, match="broken.md"):
            service.refresh()

        assert service.list_tags() == ["#work", "#home"]


class TestDeleteContent:
    """Removing every section under a tag."""

    def test_delete_scenario(self, daily_vault):
        service = _service(daily_vault)

        result = service.delete_content("#work")

        assert result == DeleteResult(files_modified=["2024-01-15.md"], sections_deleted=1)
        assert _read(daily_vault, "2024-01-15.md") == "#home\nbuy milk\n"

    def test_index_rebuilt_after_delete(self, daily_vault):
        service = _service(daily_vault)
        service.delete_content("#work")

        assert service.list_tags() == ["#home"]
        assert service.get_content("#work") == []

    def test_delete_absent_tag_changes_nothing(self, daily_vault):
        before = (daily_vault.path / "2024-01-15.md").read_bytes()

        result = _service(daily_vault).delete_content("#absent")

        assert result.files_modified == []
        assert result.sections_deleted == 0
        assert (daily_vault.path / "2024-01-15.md").read_bytes() == before

    def test_delete_invalid_tag_rejected(self, daily_vault):
        before = _read(daily_vault, "2024-01-15.md")

        with pytest.raises(InvalidTagError):
            _service(daily_vault).delete_content("work")

        assert _read(daily_vault, "2024-01-15.md") == before

    def test_delete_across_files(self, vault):
        _write(vault, "a.md", "#x\none\n#keep\nstay\n#x\ntwo\n")
        _write(vault, "b.md", "#keep\nonly keep\n")
        _write(vault, "c.md", "#x\nthree\n")

        result = _service(vault).delete_content("#x")

        assert result.files_modified == ["a.md", "c.md"]
        assert result.sections_deleted == 3
        assert _read(vault, "a.md") == "#keep\nstay\n"
        assert _read(vault, "b.md") == "#keep\nonly keep\n"
        assert _read(vault, "c.md") == ""

    def test_retained_sections_survive_reparse(self, vault):
        content = (
            "intro line\n"
            "#a\n"
            "alpha one\n"
            "#b\n"
            "beta\n"
            "---\n"
            "loose text\n"
            "#a\n"
            "alpha two\n"
            "\n"
            "#c\n"
            "gamma\n"
            "---\n"
            "---\n"
            "#b\n"
            "beta two\n"
        )
        _write(vault, "mixed.md", content)

        result = _service(vault).delete_content("#b")

        rewritten = _read(vault, "mixed.md")
        assert result.sections_deleted == 2
        assert rewritten == (
            "intro line\n"
            "#a\n"
            "alpha one\n"
            "---\n"
            "loose text\n"
            "#a\n"
            "alpha two\n"
            "\n"
            "#c\n"
            "gamma\n"
            "---\n"
            "---\n"
        )
        before = [
            (s.tag, s.content)
            for s in parse_tagged_sections(content, "mixed.md").sections
            if s.tag != "#b"
        ]
        after = [(s.tag, s.content) for s in parse_tagged_sections(rewritten, "mixed.md").sections]
        assert after == before

    def test_separator_kept_after_dangling_tag(self, vault):
        _write(vault, "a.md", "#empty\n#a\nx\n---\nz\n")

        _service(vault).delete_content("#a")

        rewritten = _read(vault, "a.md")
        assert rewritten == "#empty\n---\nz\n"
        assert parse_tagged_sections(rewritten, "a.md").sections == ()

    def test_middle_section_takes_its_separator(self, vault):
        _write(vault, "a.md", "#a\nx\n---\n#b\ny\n---\n#c\nz\n")

        _service(vault).delete_content("#b")

        assert _read(vault, "a.md") == "#a\nx\n---\n#c\nz\n"

    def test_last_section_keeps_trailing_newline(self, vault):
        _write(vault, "a.md", "#home\nmilk\n---\n#work\nreport\n")

        _service(vault).delete_content("#work")

        assert _read(vault, "a.md") == "#home\nmilk\n---\n"

    def test_crlf_preserved_in_untouched_lines(self, vault):
        _write(vault, "a.md", "#a\r\nx\r\n#b\r\ny\r\n")

        _service(vault).delete_content("#a")

        assert _read(vault, "a.md") == "#b\r\ny\r\n"

    def test_failed_write_not_reported(self, vault):
        _write(vault, "a.md", "#x\none\n")
        _write(vault, "b.md", "#x\ntwo\n")

        class FailingStore(VaultDocumentStore):
            def write(self, relative_path, content):
                if relative_path == "b.md":
                    raise DocumentWriteError(relative_path, "disk full")
                super().write(relative_path, content)

        service = TagService(FailingStore(vault))
        result = service.delete_content("#x")

        assert result == DeleteResult(files_modified=["a.md"], sections_deleted=1)
        assert _read(vault, "b.md") == "#x\ntwo\n"
        assert [e.file_path for e in service.get_content("#x")] == ["b.md"]

    def test_note_edited_after_indexing_is_deleted(self, vault):
        _write(vault, "a.md", "#x\none\n#y\nkeep\n")
        service = _service(vault)
        service.refresh()
        _write(vault, "a.md", "#x\nedited elsewhere\n#y\nkeep\n")

        result = service.delete_content("#x")

        assert result == DeleteResult(files_modified=["a.md"], sections_deleted=1)
        assert _read(vault, "a.md") == "#y\nkeep\n"

    def test_note_added_after_indexing_is_deleted(self, vault):
        _write(vault, "a.md", "#x\none\n")
        service = _service(vault)
        assert service.list_tags() == ["#x"]
        _write(vault, "b.md", "#x\nnew note\n")

        result = service.delete_content("#x")

        assert result == DeleteResult(files_modified=["a.md", "b.md"], sections_deleted=2)
        assert _read(vault, "b.md") == ""
        assert service.list_tags() == []

    def test_failed_rebuild_aborts_delete(self, vault):
        _write(vault, "a.md", "#x\none\n")
        service = _service(vault)
        service.refresh()
        (vault.path / "broken.md").write_bytes(b"#x\n\xff\xfe\n")

        with pytest.raises(DocumentReadError):
            service.delete_content("#x")

        assert _read(vault, "a.md") == "#x\none\n"
        assert [e.file_path for e in service.get_content("#x")] == ["a.md"]

    def test_note_changed_during_delete_is_skipped(self, vault):
        _write(vault, "a.md", "#x\none\n")

        class RacingStore(VaultDocumentStore):
            reads = 0

            def read(self, relative_path):
                content = super().read(relative_path)
                self.reads += 1
                if self.reads == 2:
                    _write(vault, relative_path, "#x\nedited elsewhere\n")
                    return super().read(relative_path)
                return content

        result = TagService(RacingStore(vault)).delete_content("#x")

        assert result.files_modified == []
        assert _read(vault, "a.md") == "#x\nedited elsewhere\n"

    def test_byte_order_mark_survives_deleting_first_section(self, vault):
        _write(vault, "a.md", "\ufeff#work\nx\n#home\ny\n")

        result = _service(vault).delete_content("#work")

        assert result.sections_deleted == 1
        assert _read(vault, "a.md") == "\ufeff#home\ny\n"

    def test_no_temporary_files_left_behind(self, daily_vault):
        _service(daily_vault).delete_content("#work")
        assert sorted(p.name for p in daily_vault.path.iterdir()) == ["2024-01-15.md"]


class TestVaultOperations:
    """Dict-returning operations used by the MCP tools."""

    def test_list_vault_tags(self, daily_vault):
        assert list_vault_tags(daily_vault) == {"vault": "test", "tags": ["#work", "#home"]}

    def test_list_vault_tags_with_counts(self, daily_vault):
        result = list_vault_tags(daily_vault, include_counts=True)
        assert result["tags"] == [{"tag": "#work", "count": 1}, {"tag": "#home", "count": 1}]

    def test_get_tag_content(self, daily_vault):
        assert get_tag_content(daily_vault, "#home") == {
            "vault": "test",
            "tag": "#home",
            "count": 1,
            "entries": [
                {"date": "2024-01-15", "file_path": "2024-01-15.md", "content": "buy milk"}
            ],
        }

    def test_delete_then_list_uses_shared_service(self, daily_vault):
        result = delete_tag_content(daily_vault, "#work")

        assert result == {
            "vault": "test",
            "tag": "#work",
            "files_modified": ["2024-01-15.md"],
            "sections_deleted": 1,
        }
        assert list_vault_tags(daily_vault)["tags"] == ["#home"]

    def test_refresh_vault_tags(self, daily_vault):
        assert refresh_vault_tags(daily_vault) == {
            "vault": "test",
            "notes": 1,
            "tags": 2,
            "status": "refreshed",
        }

    def test_search_vault_tags_rejects_blank_query(self, daily_vault):
        with pytest.raises(ValueError, match="cannot be empty"):
            search_vault_tags(daily_vault, "   ")

    def test_search_vault_tags(self, daily_vault):
        assert search_vault_tags(daily_vault, "wor")["matches"] == ["#work"]

    def test_parse_tagged_note(self, daily_vault):
        result = parse_tagged_note(daily_vault, "2024-01-15")

        assert result["file_path"] == "2024-01-15.md"
        assert result["date"] == "2024-01-15"
        assert result["tags"] == ["#work", "#home"]
        assert result["sections"][0] == {
            "tag": "#work",
            "content": "finish report",
            "start_line": 1,
            "end_line": 1,
        }

    def test_parse_missing_note(self, daily_vault):
        with pytest.raises(FileNotFoundError, match="missing"):
            parse_tagged_note(daily_vault, "missing")

    def test_missing_vault_directory(self, tmp_path):
        missing = VaultMetadata(
            name="gone", path=tmp_path / "gone", description="", exists=False
        )
        with pytest.raises(FileNotFoundError, match="not accessible"):
            list_vault_tags(missing)
