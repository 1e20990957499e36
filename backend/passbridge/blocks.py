"""Finds `passwordmanager` code blocks in a markdown document."""

import re
from dataclasses import dataclass

from .vault.models import Property

BLOCK_LANGUAGE = "passwordmanager"

_FENCE_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*" + BLOCK_LANGUAGE + r"[ \t]*\n(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)


@dataclass(frozen=True)
class PasswordBlock:
    source: str
    line: int

    @property
    def label(self) -> str:
        return f"🔒 {self.source}"

    @property
    def buttons(self) -> tuple[str, ...]:
        return tuple(p.label for p in Property)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "line": self.line,
            "label": self.label,
            "buttons": list(self.buttons),
        }


def find_blocks(markdown: str) -> list[PasswordBlock]:
    """Return one block per non-empty fenced `passwordmanager` block, in document order."""
    blocks = []
    for match in _FENCE_RE.finditer(markdown):
        source = match.group("body").strip()
        if not source:
            continue
        line = markdown.count("\n", 0, match.start()) + 1
        blocks.append(PasswordBlock(source=source, line=line))
    return blocks
