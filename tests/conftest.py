"""Shared test fixtures for molthumb."""

import json
import shlex
from pathlib import Path

import pytest

from molthumb.config.models import ConverterSettings, MolThumbConfig
from molthumb.converter.models import ConversionFailure, RasterImage
from molthumb.converter.shell import ShellResult
from molthumb.storage import FilesystemRepository, LocalMediaFile

FILES_DIR = Path(__file__).parent / "files"

MOLFILE = (
    b"ethanal\n"
    b"  Mrv0541 06121312002D          \n"
    b"\n"
    b"  3  2  0  0  0  0            999 V2000\n"
    b"   -0.7145    0.4125    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0\n"
    b"    0.0000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0\n"
    b"    0.7145    0.4125    0.0000 O   0  0  0  0  0  0  0  0  0  0  0  0\n"
    b"  1  2  1  0  0  0  0\n"
    b"  2  3  2  0  0  0  0\n"
    b"M  END\n"
)

SVG = (
    b'<?xml version="1.0"?>\n'
    b'<svg xmlns="http://www.w3.org/2000/svg" width="120" height="80">'
    b'<line x1="10" y1="10" x2="110" y2="70" stroke="black"/></svg>\n'
)


class FakeRasterizer:
    """VectorRasterizer double that records calls and writes a stub PNG."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.rasterized: list[tuple[str, str, int, int]] = []
        self.svg_seen: list[bytes] = []

    def rasterize(self, svg_path, dst_path, width, height):
        self.rasterized.append((svg_path, dst_path, width, height))
        self.svg_seen.append(Path(svg_path).read_bytes())
        if self.fail:
            return ConversionFailure(width=width, height=height, message="rasterizer broke")
        Path(dst_path).write_bytes(b"\x89PNG fake")
        return RasterImage(path=dst_path, width=width, height=height)

    def get_metadata(self, svg_path):
        assert Path(svg_path).stat().st_size > 0
        return json.dumps({"width": 120, "height": 80, "version": 1})

    def get_long_desc(self, metadata, size_bytes):
        return f"{metadata.get('width')}x{metadata.get('height')} ({size_bytes} bytes)"


class FakeRunner:
    """Stands in for run_with_limits: writes SVG output to the last command argument."""

    def __init__(self, returncode: int = 0, svg: bytes | None = SVG, output: str = "") -> None:
        self.returncode = returncode
        self.svg = svg
        self.output = output
        self.calls: list[tuple[str, int, int]] = []

    def __call__(self, command: str, memory_kib: int, timeout: int) -> ShellResult:
        self.calls.append((command, memory_kib, timeout))
        if self.svg is not None:
            Path(shlex.split(command)[-1]).write_bytes(self.svg)
        return ShellResult(returncode=self.returncode, output=self.output)

    def output_path(self, call: int = 0) -> str:
        return shlex.split(self.calls[call][0])[-1]


@pytest.fixture
def sample_config():
    return MolThumbConfig()


@pytest.fixture
def local_config(tmp_path):
    """Converters resolved via PATH, repository inside tmp_path."""
    return MolThumbConfig(
        converter=ConverterSettings(tool_dir=""),
        repository={"root": str(tmp_path / "repo")},
    )


@pytest.fixture
def fake_rasterizer():
    return FakeRasterizer()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def molfile_path(tmp_path):
    path = tmp_path / "Ethanal.mol"
    path.write_bytes(MOLFILE)
    return path


@pytest.fixture
def repo(local_config):
    return FilesystemRepository(local_config.repository.root)


@pytest.fixture
def media_file(molfile_path, repo):
    return LocalMediaFile(
        str(molfile_path), repo, metadata=json.dumps({"width": 120, "height": 80})
    )
