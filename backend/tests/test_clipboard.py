"""Tests for clipboard delivery through platform tools."""

import sys

import pytest

from passbridge import clipboard as clipboard_module
from passbridge.clipboard import (
    ClipboardError,
    ClipboardUnavailableError,
    MemoryClipboard,
    SystemClipboard,
)


def _python_tool(tmp_path, body: str) -> list[str]:
    script = tmp_path / "tool.py"
    script.write_text(body)
    return [sys.executable, str(script)]


class TestSystemClipboard:
    @pytest.mark.asyncio
    async def test_pipes_text_to_tool(self, tmp_path) -> None:
        out = tmp_path / "clip.txt"
        command = _python_tool(
            tmp_path,
            f"import sys\nopen({str(out)!r}, 'w').write(sys.stdin.read())\n",
        )

        await SystemClipboard(command).write("s3cr3t\n")

        assert out.read_text() == "s3cr3t\n"

    @pytest.mark.asyncio
    async def test_tool_failure_raises(self, tmp_path) -> None:
        command = _python_tool(
            tmp_path,
            "import sys\nsys.stdin.read()\nsys.stderr.write('no display')\nsys.exit(1)\n",
        )
        with pytest.raises(ClipboardError, match="no display"):
            await SystemClipboard(command).write("x")

    @pytest.mark.asyncio
    async def test_missing_tool_raises(self, tmp_path) -> None:
        with pytest.raises(ClipboardError, match="Could not start"):
            await SystemClipboard([str(tmp_path / "missing")]).write("x")

    @pytest.mark.asyncio
    async def test_no_tool_installed(self, monkeypatch) -> None:
        monkeypatch.setattr(clipboard_module.shutil, "which", lambda name: None)
        with pytest.raises(ClipboardUnavailableError):
            await SystemClipboard().write("x")


class TestMemoryClipboard:
    @pytest.mark.asyncio
    async def test_keeps_last_write(self) -> None:
        clip = MemoryClipboard()
        await clip.write("a")
        await clip.write("b")
        assert clip.text == "b"
        assert clip.writes == 2
