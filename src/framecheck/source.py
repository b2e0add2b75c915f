"""
Source loading: parse a module once and expose everything rules need.

Architecture::

    Python file (.py) / source string
          │
          ▼
    ast.parse() ──► tree ──► parents map
          │                 ├─► ImportAliases
          │                 └─► FrameInference
          ▼
    tokenize ──► suppression comments  (# framecheck: ignore[...])
          │
          ▼
    ParsedModule

Guardrails:
    - Do NOT parse non-Python files: ``load_module`` checks the suffix.
    - Do NOT assume files are valid Python: decoding and syntax errors
      become :class:`SourceParseError`.
"""

from __future__ import annotations

import ast
import fnmatch
import io
import re
import tokenize
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from framecheck.errors import SourceParseError
from framecheck.inference import FrameInference, ImportAliases, build_parents, collect_aliases
from framecheck.logging import get_logger
from framecheck.settings import FramecheckSettings

logger = get_logger(__name__)

_SUPPRESS_RE = re.compile(r"#\s*framecheck:\s*ignore(?![\w-])(?P<rest>.*)", re.IGNORECASE)
_CODES_RE = re.compile(r"\s*\[(?P<codes>[^\]]*)\]")
_CODE_RE = re.compile(r"^[A-Z]+[0-9]+$")

#: Sentinel stored for a bare ``# framecheck: ignore``.
ALL_CODES = "*"


@dataclass
class ParsedModule:
    """A parsed source file plus derived facts.

    Attributes:
        source: Full source text.
        tree: Parsed module.
        path: Source file (``None`` for in-memory snippets).
        aliases: pandas/numpy import aliases.
        frames: Frame inference for the module.
        parents: Child -> parent node map.
        suppressions: Line number -> suppressed codes (``{"*"}`` for all).
        settings: Settings the module was loaded with.
    """

    source: str
    tree: ast.Module
    path: Path | None
    aliases: ImportAliases
    frames: FrameInference
    parents: dict[ast.AST, ast.AST]
    settings: FramecheckSettings
    suppressions: dict[int, set[str]] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return str(self.path) if self.path is not None else "<source>"

    def parent(self, node: ast.AST) -> ast.AST | None:
        return self.parents.get(node)

    def is_frame(self, expr: ast.AST) -> bool:
        """True if ``expr`` evaluates to a DataFrame in its own scope."""
        return self.frames.is_frame(expr, self.frames.scope_of(expr))

    def is_suppressed(self, line: int, code: str) -> bool:
        codes = self.suppressions.get(line)
        if not codes:
            return False
        return ALL_CODES in codes or code in codes

    def walk(self) -> Iterator[ast.AST]:
        return ast.walk(self.tree)


def _suppressed_codes(rest: str) -> set[str] | None:
    """Codes named after ``ignore``; ``None`` when the code list is malformed."""
    if not rest.lstrip().startswith("["):
        return {ALL_CODES}
    bracket = _CODES_RE.match(rest)
    if bracket is None:
        return None
    codes = [c.strip().upper() for c in bracket.group("codes").split(",") if c.strip()]
    if not codes or not all(_CODE_RE.match(c) for c in codes):
        return None
    return set(codes)


def parse_suppressions(source: str) -> dict[int, set[str]]:
    """Map line numbers to the codes suppressed by comments on that line."""
    result: dict[int, set[str]] = {}
    tokens = tokenize.generate_tokens(io.StringIO(source).readline)
    try:
        for token in tokens:
            if token.type != tokenize.COMMENT:
                continue
            match = _SUPPRESS_RE.search(token.string)
            if match is None:
                continue
            codes = _suppressed_codes(match.group("rest"))
            if codes is None:
                logger.debug("malformed_suppression", line=token.start[0], comment=token.string)
                continue
            result.setdefault(token.start[0], set()).update(codes)
    except (tokenize.TokenError, SyntaxError):
        # ast.parse already accepted the source; keep what was collected.
        logger.debug("suppression_scan_incomplete")
    return result


def parse_module(
    source: str,
    path: Path | None = None,
    settings: FramecheckSettings | None = None,
) -> ParsedModule:
    """Parse ``source`` into a :class:`ParsedModule`.

    Raises:
        SourceParseError: If the source is not valid Python.
    """
    settings = settings or FramecheckSettings()
    filename = str(path) if path is not None else "<source>"
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise SourceParseError(
            f"Failed to parse {filename}: {e.msg}",
            path=path,
            line=e.lineno,
            column=e.offset,
            cause=e,
        ) from e

    parents = build_parents(tree)
    aliases = collect_aliases(tree)
    frames = FrameInference(
        tree,
        aliases,
        parents,
        name_patterns=settings.compiled_frame_patterns(),
    )
    return ParsedModule(
        source=source,
        tree=tree,
        path=path,
        aliases=aliases,
        frames=frames,
        parents=parents,
        settings=settings,
        suppressions=parse_suppressions(source),
    )


def load_module(path: Path, settings: FramecheckSettings | None = None) -> ParsedModule:
    """Read and parse a Python file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a ``.py`` file
        SourceParseError: If the file cannot be decoded or parsed
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix != ".py":
        raise ValueError(f"Not a Python file: {path}")

    try:
        source = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceParseError(f"Failed to decode {path}: {e.reason}", path=path, cause=e) from e

    return parse_module(source, path=path, settings=settings)


def is_excluded(path: Path, exclude: Iterable[str]) -> bool:
    """True if any path component (or the whole path) matches an exclude glob."""
    patterns = list(exclude)
    posix = path.as_posix()
    for pattern in patterns:
        if fnmatch.fnmatch(posix, pattern):
            return True
        if any(fnmatch.fnmatch(part, pattern) for part in path.parts):
            return True
    return False


def iter_python_files(paths: Iterable[Path | str], exclude: Iterable[str] = ()) -> Iterator[Path]:
    """Yield Python files under ``paths`` in a stable order.

    Files named explicitly are always yielded, even when they match an
    exclude pattern. Directories are walked recursively and pruned by
    ``exclude``.

    Raises:
        FileNotFoundError: If a given path does not exist
    """
    patterns = list(exclude)
    seen: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")
        if path.is_file():
            candidates: Iterable[Path] = [path]
        else:
            candidates = (
                p for p in sorted(path.rglob("*.py"))
                if not is_excluded(p.relative_to(path), patterns)
            )
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            yield candidate
