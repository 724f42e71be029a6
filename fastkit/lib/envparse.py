"""
Parser for kit.env settings files.

Reads KEY=value lines without any shell evaluation. Values that look like
shell expansion or command chaining are rejected outright, since kit.env is
commonly copied around between machines and sourced by hand.
"""

import re
from pathlib import Path

__all__ = ["load_env", "EnvSyntaxError"]

FORBIDDEN_PATTERNS = [
    re.compile(r'`'),
    re.compile(r'\$\('),
    re.compile(r'\$\{'),
    re.compile(r';'),
    re.compile(r'&&'),
    re.compile(r'\|'),
]

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


class EnvSyntaxError(ValueError):
    """A kit.env line could not be parsed."""

    def __init__(self, path: Path, lineno: int, message: str):
        self.path = path
        self.lineno = lineno
        super().__init__(f"{path}:{lineno}: {message}")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def load_env(path: Path) -> dict[str, str]:
    """
    Parse a KEY=value file into a dict.

    Blank lines and lines starting with '#' are ignored. An optional leading
    'export ' is accepted so the same file can be sourced by a shell.

    Raises:
        FileNotFoundError: if the file doesn't exist
        EnvSyntaxError: on a malformed line or forbidden value
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    result: dict[str, str] = {}
    for lineno, raw in enumerate(path.read_text().splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('export '):
            line = line[len('export '):].lstrip()

        key, sep, value = line.partition('=')
        if not sep:
            raise EnvSyntaxError(path, lineno, "expected KEY=value")

        key = key.strip()
        if not KEY_PATTERN.match(key):
            raise EnvSyntaxError(path, lineno, f"invalid key '{key}'")

        value = _unquote(value.strip())
        if any(p.search(value) for p in FORBIDDEN_PATTERNS):
            raise EnvSyntaxError(path, lineno, f"forbidden pattern in value of {key}")

        result[key] = value

    return result
