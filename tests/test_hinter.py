"""Tests for extension-based MIME improvement and the file-type probe."""

from unittest.mock import MagicMock, patch

import magic
import pytest

from molthumb.mime import (
    CHEMICAL_EXTENSIONS,
    ExtensionMimeResolver,
    MOLFILE,
    RDFILE,
    RGFILE,
    RXNFILE,
    SDFILE,
    guess_mime,
    improve_from_extension,
    is_chem_file_extension,
)

from conftest import FILES_DIR


# ── is_chem_file_extension ──────────────────────────────────────────


class TestIsChemFileExtension:
    @pytest.mark.parametrize("ext", ["mol", "sdf", "rxn", "rd", "rg"])
    def test_known(self, ext):
        assert is_chem_file_extension(ext)

    @pytest.mark.parametrize("ext", ["MOL", "Sdf", ".rxn"])
    def test_case_and_dot_insensitive(self, ext):
        assert is_chem_file_extension(ext)

    @pytest.mark.parametrize("ext", ["", "txt", "cml", "mol2", "pdb"])
    def test_unknown(self, ext):
        assert not is_chem_file_extension(ext)


# ── ExtensionMimeResolver ───────────────────────────────────────────


class TestExtensionMimeResolver:
    def test_chemical_extensions_registered(self):
        resolver = ExtensionMimeResolver()
        for ext, mime in CHEMICAL_EXTENSIONS.items():
            assert resolver.guess_types_for_extension(ext) == mime

    def test_upper_case(self):
        assert ExtensionMimeResolver().guess_types_for_extension("RXN") == RXNFILE

    def test_standard_types_still_known(self):
        assert ExtensionMimeResolver().guess_types_for_extension("png") == "image/png"

    def test_empty_extension(self):
        assert ExtensionMimeResolver().guess_types_for_extension("") is None


# ── improve_from_extension ──────────────────────────────────────────


class TestImproveFromExtension:
    def test_plain_text_mol(self):
        assert improve_from_extension("text/plain", "mol") == MOLFILE

    def test_plain_text_upper_case(self):
        assert improve_from_extension("text/plain", "MOL") == MOLFILE

    @pytest.mark.parametrize(
        "ext, expected",
        [("sdf", SDFILE), ("rxn", RXNFILE), ("rd", RDFILE), ("rg", RGFILE)],
    )
    def test_other_extensions(self, ext, expected):
        assert improve_from_extension("text/plain", ext) == expected

    def test_non_plain_text_unchanged(self):
        assert improve_from_extension("image/png", "mol") == "image/png"

    def test_content_result_is_authoritative(self):
        assert improve_from_extension(SDFILE, "mol") == SDFILE

    def test_none_unchanged(self):
        assert improve_from_extension(None, "mol") is None

    def test_other_extension_unchanged(self):
        assert improve_from_extension("text/plain", "txt") == "text/plain"

    def test_resolver_not_consulted_for_other_extension(self):
        resolver = MagicMock()
        improve_from_extension("text/plain", "txt", resolver)
        resolver.guess_types_for_extension.assert_not_called()

    def test_uses_given_resolver(self):
        resolver = MagicMock()
        resolver.guess_types_for_extension.return_value = "chemical/x-custom"
        assert improve_from_extension("text/plain", "mol", resolver) == "chemical/x-custom"
        resolver.guess_types_for_extension.assert_called_once_with("mol")

    def test_resolver_without_answer_keeps_input(self):
        resolver = MagicMock()
        resolver.guess_types_for_extension.return_value = None
        assert improve_from_extension("text/plain", "rd", resolver) == "text/plain"


# ── guess_mime ──────────────────────────────────────────────────────


class TestGuessMime:
    def test_molfile_by_content(self, molfile_path):
        guess = guess_mime(molfile_path)
        assert guess.by_content == MOLFILE
        assert guess.by_extension is None
        assert guess.mime == MOLFILE

    def test_content_wins_over_extension(self, tmp_path):
        path = tmp_path / "reaction.mol"
        path.write_bytes(b"$RXN\n\n  Mrv0541\n\n  1  1\n")
        assert guess_mime(path).mime == RXNFILE

    def test_extension_improves_plain_text(self, tmp_path):
        path = tmp_path / "broken.mol"
        path.write_text("not really a molecule\n")
        guess = guess_mime(path)
        assert guess.generic == "text/plain"
        assert guess.by_content is None
        assert guess.by_extension == MOLFILE
        assert guess.mime == MOLFILE

    def test_plain_text_other_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello\n")
        guess = guess_mime(path)
        assert guess.mime == "text/plain"
        assert guess.by_extension is None

    def test_binary_not_improved(self, tmp_path):
        path = tmp_path / "blob.mol"
        path.write_bytes(b"\x00\x01\x02\xff")
        assert guess_mime(path).mime == "application/octet-stream"

    def test_utf8_text_is_plain(self, tmp_path):
        path = tmp_path / "umlaut.rd"
        path.write_text("Bestandteil: Äthanol\n", encoding="utf-8")
        assert guess_mime(path).mime == RDFILE

    def test_accepts_str_path(self, molfile_path):
        assert guess_mime(str(molfile_path)).mime == MOLFILE

    def test_resolver_passed_through(self, tmp_path):
        path = tmp_path / "x.sdf"
        path.write_text("nothing\n")
        resolver = MagicMock()
        resolver.guess_types_for_extension.return_value = SDFILE
        assert guess_mime(path, resolver).mime == SDFILE
        resolver.guess_types_for_extension.assert_called_once_with("sdf")

    def test_latin1_text_still_improved(self, tmp_path):
        path = tmp_path / "aethanal.mol"
        path.write_bytes(b"\xc4thanal, Entwurf ohne Z\xe4hlzeile\nnoch keine Atome\n")
        guess = guess_mime(path)
        assert guess.generic == "text/plain"
        assert guess.by_content is None
        assert guess.mime == MOLFILE

    def test_generic_guess_from_libmagic(self, tmp_path):
        path = tmp_path / "scan.mol"
        path.write_text("anything\n")
        with patch("molthumb.mime.detect.magic.from_buffer", return_value="image/png") as fb:
            guess = guess_mime(path)
        fb.assert_called_once_with(b"anything\n", mime=True)
        assert guess.mime == "image/png"

    def test_libmagic_error_is_binary(self, tmp_path):
        path = tmp_path / "odd.mol"
        path.write_text("anything\n")
        err = magic.MagicException("no magic files loaded")
        with patch("molthumb.mime.detect.magic.from_buffer", side_effect=err):
            assert guess_mime(path).mime == "application/octet-stream"

    def test_empty_file_is_plain_text(self, tmp_path):
        path = tmp_path / "empty.sdf"
        path.write_bytes(b"")
        assert guess_mime(path).mime == SDFILE


# ── Fixture files: content and extension must agree ─────────────────


def _fixture_files():
    return sorted(FILES_DIR.glob("*.test.pass.*"))


def test_fixture_files_present():
    assert {p.suffix for p in _fixture_files()} == {".mol", ".sdf", ".rxn", ".rd", ".rg"}


@pytest.mark.parametrize("path", _fixture_files(), ids=lambda p: p.name)
def test_content_matches_extension(path):
    guess = guess_mime(path)
    assert guess.by_content is not None, f"{path.name} not recognized by content"
    assert guess.mime == CHEMICAL_EXTENSIONS[path.suffix.lstrip(".")]

