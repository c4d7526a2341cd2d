from pathlib import Path

import pytest

from typescript_to_code.errors import TranslationError
from typescript_to_code.writer import AtomicWriter


class TestAtomicWriter:
    def test_write(self, tmp_path):
        path = tmp_path / "out" / "sample.py"
        AtomicWriter().write(path, "x = 1\n", "python")
        assert path.read_text() == "x = 1\n"

    def test_invalid_python_rejected(self, tmp_path):
        path = tmp_path / "sample.py"
        path.write_text("original = True\n")
        with pytest.raises(TranslationError, match="not valid"):
            AtomicWriter().write(path, "def (:\n", "python")
        assert path.read_text() == "original = True\n"
        assert [p.name for p in tmp_path.iterdir()] == ["sample.py"]

    def test_validation_disabled(self, tmp_path):
        path = tmp_path / "sample.py"
        AtomicWriter().write(path, "<class_declaration class Foo {}>\n", "python", validate=False)
        assert path.exists()

    def test_other_languages_not_validated(self, tmp_path):
        path = tmp_path / "doc.md"
        AtomicWriter().write(path, "# def (:\n")
        assert path.read_text() == "# def (:\n"

    def test_custom_validator(self, tmp_path):
        def reject(content: str) -> None:
            raise TranslationError("rejected")

        with pytest.raises(TranslationError, match="rejected"):
            AtomicWriter(validate_python=reject).write(Path(tmp_path / "a.py"), "x = 1\n", "python")
