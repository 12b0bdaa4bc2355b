"""Core vault file access: path resolution, enumeration and write-back."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from tag_vault.constants import NOTE_GLOB
from tag_vault.data_models import VaultMetadata
from tag_vault.errors import DocumentReadError, DocumentWriteError

logger = logging.getLogger(__name__)


def ensure_vault_ready(vault: VaultMetadata) -> None:
    """Ensure the target vault directory is accessible before performing operations.

    Raises:
        FileNotFoundError: If the vault path does not exist or is not a directory.
    """
    if not vault.path.is_dir():
        raise FileNotFoundError(f"Vault '{vault.name}' is not accessible at {vault.path}")


def construct_note_path(identifier: str) -> Path:
    """Construct a relative ``.md`` path from a pre-validated note identifier.

    Validation (empty, traversal, absolute paths) happens in the Pydantic input
    models; this only appends the extension.

    Examples:
        >>> construct_note_path("2024-01-15")
        PosixPath('2024-01-15.md')
        >>> construct_note_path("Journal/2024-01-15")
        PosixPath('Journal/2024-01-15.md')
    """
    parts = identifier.split("/")
    leaf = f"{parts[-1]}.md"
    if len(parts) == 1:
        return Path(leaf)
    return Path(*parts[:-1]) / leaf


def resolve_document_path(vault: VaultMetadata, relative_path: str) -> Path:
    """Resolve a vault-relative document path, enforcing the vault sandbox.

    Raises:
        ValueError: If the resolved path escapes the vault root.
    """
    candidate = (vault.path / Path(relative_path)).resolve(strict=False)
    vault_root = vault.path.resolve(strict=False)
    if not candidate.is_relative_to(vault_root):
        raise ValueError(f"Document '{relative_path}' escapes vault '{vault.name}'.")
    return candidate


def document_display_path(vault: VaultMetadata, path: Path) -> str:
    """Convert an absolute document path into a forward-slash, vault-relative path."""
    relative = path.resolve(strict=False).relative_to(vault.path.resolve(strict=False))
    return relative.as_posix()


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` so readers see either the old or the new file."""
    with tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        encoding="utf-8",
        newline="",
    ) as tmp:
        tmp.write(text)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_path = Path(tmp.name)
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class VaultDocumentStore:
    """Reads and rewrites the markdown documents of one vault.

    Documents are addressed by vault-relative POSIX paths including the ``.md``
    suffix, e.g. ``"Journal/2024-01-15.md"``.
    """

    def __init__(self, vault: VaultMetadata) -> None:
        self.vault = vault

    def list_documents(self) -> list[str]:
        """Return every document path in the vault, sorted."""
        ensure_vault_ready(self.vault)
        paths = [
            document_display_path(self.vault, path)
            for path in self.vault.path.rglob(NOTE_GLOB)
            if path.is_file()
        ]
        return sorted(paths)

    def iter_documents(self) -> Iterator[tuple[str, str]]:
        """Yield ``(path, content)`` for every document in sorted path order.

        Raises:
            DocumentReadError: As soon as any document cannot be read.
        """
        for relative_path in self.list_documents():
            yield relative_path, self.read(relative_path)

    def read(self, relative_path: str) -> str:
        """Return the full text of one document.

        Raises:
            DocumentReadError: If the file is missing, unreadable or not UTF-8.
        """
        path = resolve_document_path(self.vault, relative_path)
        try:
            with path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentReadError(relative_path, exc) from exc

    def write(self, relative_path: str, content: str) -> None:
        """Atomically replace the full text of one document.

        Raises:
            DocumentWriteError: If the replacement could not be written.
        """
        path = resolve_document_path(self.vault, relative_path)
        try:
            atomic_write_text(path, content)
        except OSError as exc:
            raise DocumentWriteError(relative_path, exc) from exc
        logger.debug("Rewrote '%s' in vault '%s'", relative_path, self.vault.name)
