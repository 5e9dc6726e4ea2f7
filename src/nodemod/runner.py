"""Applying a recipe to files on disk.

Discovers source files under the given paths, runs the recipe on each one and
writes the result back (or, for a dry run, only reports a unified diff).
A file that cannot be read or parsed is recorded as a failure and the run
continues with the next one.
"""

from __future__ import annotations

import difflib
import hashlib
import os
from collections.abc import Iterable, Iterator
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from nodemod.config.models import RunnerConfig
from nodemod.core.errors import InternalError, NodemodError, ParseError
from nodemod.core.logging import end_run, get_logger, start_run
from nodemod.recipes.base import Recipe
from nodemod.syntax.tree import TreeSitterParser

log = get_logger(__name__)


@dataclass
class FileChange:
    """A file the recipe rewrote (or would rewrite, for a dry run)."""

    path: str
    old_hash: str
    new_hash: str
    insertions: int = 0
    deletions: int = 0
    unified_diff: str | None = None


@dataclass
class FileFailure:
    """A file that could not be processed."""

    path: str
    code: int
    message: str


@dataclass
class RunResult:
    """Outcome of one recipe run."""

    run_id: str
    recipe: str
    dry_run: bool
    files_scanned: int = 0
    files_skipped: int = 0
    changes: list[FileChange] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def files_changed(self) -> int:
        return len(self.changes)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["files_changed"] = self.files_changed
        return data


class RecipeRunner:
    """Runs recipes over files and directories.

    Usage::

        runner = RecipeRunner(load_config().runner)
        result = runner.run(get_recipe("util-log"), [Path("src")], dry_run=True)
    """

    def __init__(self, config: RunnerConfig | None = None, *, parser: TreeSitterParser | None = None) -> None:
        self._config = config or RunnerConfig()
        self._parser = parser or TreeSitterParser()
        self._extensions = set(self._config.extensions)
        self._excluded = set(self._config.excluded_dirs)

    def discover(self, paths: Iterable[Path]) -> Iterator[Path]:
        """Source files under ``paths``, each directory walked in sorted order.

        Files named explicitly are yielded when their extension is supported,
        even inside an excluded directory.
        """
        seen: set[Path] = set()
        for path in paths:
            if path.is_file():
                candidates: Iterable[Path] = [path]
            elif path.is_dir():
                candidates = self._walk(path)
            else:
                log.warning("path_not_found", path=str(path))
                continue
            for candidate in candidates:
                if candidate.suffix.lower() not in self._extensions:
                    continue
                resolved = candidate.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                yield candidate

    def _walk(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self._excluded)
            for name in sorted(filenames):
                yield Path(dirpath) / name

    def run(self, recipe: Recipe, paths: Iterable[Path], *, dry_run: bool = False) -> RunResult:
        """Apply ``recipe`` to every discovered file.

        Args:
            recipe: Recipe to apply.
            paths: Files and directories to process.
            dry_run: Report unified diffs instead of writing files.

        Returns:
            RunResult listing changed files and failures.
        """
        run_id = start_run(recipe.name)
        result = RunResult(run_id=run_id, recipe=recipe.name, dry_run=dry_run)
        log.info("run_started", dry_run=dry_run)
        try:
            for path in self.discover(paths):
                self._process(recipe, path, result)
        finally:
            log.info(
                "run_finished",
                scanned=result.files_scanned,
                changed=result.files_changed,
                skipped=result.files_skipped,
                failed=len(result.failures),
            )
            end_run()
        return result

    def _process(self, recipe: Recipe, path: Path, result: RunResult) -> None:
        limit = self._config.max_file_size_kb * 1024
        try:
            size = path.stat().st_size
        except OSError as e:
            result.files_scanned += 1
            self._fail(result, path, ParseError.read_error(str(path), e.strerror or str(e)))
            return
        if size > limit:
            log.info("file_skipped", path=str(path), reason="too_large", size=size)
            result.files_skipped += 1
            return

        result.files_scanned += 1
        encoding = self._config.encoding
        try:
            try:
                old_text = path.read_bytes().decode(encoding)
            except UnicodeDecodeError as e:
                raise ParseError.decode_error(str(path), encoding) from e
            except OSError as e:
                raise ParseError.read_error(str(path), e.strerror or str(e)) from e
            source = self._parser.parse(old_text, path)
        except NodemodError as e:
            self._fail(result, path, e)
            return

        if source.has_errors:
            log.debug("file_has_syntax_errors", path=str(path))

        try:
            new_text = recipe.transform(source)
        except NodemodError:
            raise
        except Exception as e:
            log.error("recipe_failed", path=str(path), error=str(e))
            self._fail(result, path, InternalError.unexpected(f"{recipe.name} failed: {e}", path=str(path)))
            return

        if new_text is None or new_text == old_text:
            log.debug("file_unchanged", path=str(path))
            return

        diff_lines = list(
            difflib.unified_diff(
                old_text.splitlines(keepends=True),
                new_text.splitlines(keepends=True),
                fromfile=f"a/{path.as_posix()}",
                tofile=f"b/{path.as_posix()}",
            )
        )
        change = FileChange(
            path=str(path),
            old_hash=_hash_content(old_text),
            new_hash=_hash_content(new_text),
            insertions=sum(1 for line in diff_lines if line.startswith("+") and not line.startswith("+++")),
            deletions=sum(1 for line in diff_lines if line.startswith("-") and not line.startswith("---")),
            unified_diff="".join(diff_lines) if result.dry_run else None,
        )
        if not result.dry_run:
            try:
                path.write_bytes(new_text.encode(encoding))
            except OSError as e:
                error = InternalError.unexpected(f"cannot write {path}: {e.strerror or e}", path=str(path))
                self._fail(result, path, error)
                return
        result.changes.append(change)
        log.info(
            "file_rewritten" if not result.dry_run else "file_would_change",
            path=str(path),
            insertions=change.insertions,
            deletions=change.deletions,
        )

    def _fail(self, result: RunResult, path: Path, error: NodemodError) -> None:
        log.warning("file_failed", path=str(path), error=error.error_name, message=error.message)
        result.failures.append(FileFailure(path=str(path), code=error.code.value, message=error.message))


def _hash_content(content: str) -> str:
    """Hash content for change tracking."""
    return hashlib.sha256(content.encode()).hexdigest()[:12]
