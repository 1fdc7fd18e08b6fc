"""Content ideas: explore a project directory and ask the model for end-user tutorial video ideas."""

import asyncio
import fnmatch
import json
import logging
from pathlib import Path
from typing import Callable, List, Sequence, Set, Tuple, Union

from pydantic import Field, ValidationError

from .client import ChatClient
from .errors import ExtractionError
from .models import ContentCategory, ContentIdea, ExistingContent, WireModel
from .prompts import CONTENT_SYSTEM_PROMPT, content_user_prompt

logger = logging.getLogger(__name__)

STANDARD_IGNORES: Set[str] = {"node_modules", ".git", "dist", "out", ".claude", "__pycache__", ".venv"}
READABLE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".json", ".md", ".py", ".swift")
README_NAMES = ("README.md", "readme.md", "README.MD", "README.rst")
MAX_FILE_BYTES = 100_000
FILE_EXCERPT_CHARS = 2000
README_EXCERPT_CHARS = 1000
DUPLICATE_THRESHOLD = 0.6


class IdeaBatch(WireModel):
    categories: List[ContentCategory] = Field(default_factory=list)


# ── Exploration ──────────────────────────────────────────


def ignore_predicate(root: Path) -> Callable[[str], bool]:
    """
    Build an ``is_ignored(relative_posix_path)`` predicate.

    Standard directories are always ignored. ``.gitignore`` patterns are
    matched with ``fnmatch`` against the whole path and against each path
    component; a trailing ``/`` restricts a pattern to directory components.
    """
    patterns: List[str] = []
    gitignore = root / ".gitignore"
    if gitignore.is_file():
        for line in gitignore.read_text(encoding="utf-8", errors="replace").splitlines():
            line = line.strip()
            if line and not line.startswith(("#", "!")):
                patterns.append(line.lstrip("/"))

    def is_ignored(rel_path: str) -> bool:
        parts = rel_path.split("/")
        if any(part in STANDARD_IGNORES for part in parts):
            return True
        for pattern in patterns:
            if pattern.endswith("/"):
                dir_pattern = pattern.rstrip("/")
                if any(fnmatch.fnmatch(part, dir_pattern) for part in parts[:-1]) or \
                        fnmatch.fnmatch(rel_path, dir_pattern) or rel_path.startswith(dir_pattern + "/"):
                    return True
            elif fnmatch.fnmatch(rel_path, pattern) or any(fnmatch.fnmatch(p, pattern) for p in parts):
                return True
        return False

    return is_ignored


def _manifest_summary(root: Path) -> List[str]:
    findings = []
    package_json = root / "package.json"
    if package_json.is_file():
        try:
            pkg = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠ Could not read package.json: {e}")
        else:
            deps = ", ".join(pkg.get("dependencies") or {})
            findings.append(
                f"## Package Information\n- Name: {pkg.get('name')}\n"
                f"- Description: {pkg.get('description') or 'N/A'}\n- Dependencies: {deps}"
            )
            logger.info("✓ Read package.json")
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        text = pyproject.read_text(encoding="utf-8", errors="replace")
        findings.append(f"## pyproject.toml\n{text[:README_EXCERPT_CHARS]}")
        logger.info("✓ Read pyproject.toml")
    for name in README_NAMES:
        readme = root / name
        if readme.is_file():
            text = readme.read_text(encoding="utf-8", errors="replace")
            findings.append(f"## README\n{text[:README_EXCERPT_CHARS]}")
            logger.info(f"✓ Read {name}")
            break
    return findings


def explore_codebase(root: Union[str, Path], max_depth: int = 3, max_files: int = 20) -> str:
    """
    Summarize a project for the content model.

    Walks the tree breadth-first with an explicit worklist, listing every
    non-ignored entry down to ``max_depth`` and quoting the first
    characters of up to ``max_files`` small source files.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Project directory not found: {root}")
    logger.info(f"Exploring codebase at {root}")

    findings = _manifest_summary(root)
    is_ignored = ignore_predicate(root)
    excerpts: List[Tuple[str, str]] = []

    worklist: List[Tuple[Path, int]] = [(root, 0)]
    while worklist:
        directory, depth = worklist.pop(0)
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {directory}: {e}")
            continue

        for entry in entries:
            rel = entry.relative_to(root).as_posix()
            if is_ignored(rel):
                continue
            try:
                if entry.is_dir():
                    findings.append(f"📁 {rel}/")
                    if depth < max_depth:
                        worklist.append((entry, depth + 1))
                    continue
                size = entry.stat().st_size
            except OSError:
                continue
            findings.append(f"📄 {rel} ({size} bytes)")
            if len(excerpts) < max_files and entry.suffix in READABLE_SUFFIXES and size < MAX_FILE_BYTES:
                try:
                    text = entry.read_text(encoding="utf-8", errors="replace")
                except OSError:
                    continue
                excerpts.append((rel, text[:FILE_EXCERPT_CHARS]))

    summary = "# Codebase Exploration Results\n\n" + "\n".join(findings)
    summary += "\n\n## Key File Contents\n\n"
    for rel, text in excerpts:
        summary += f"### {rel}\n```\n{text}\n```\n\n"

    logger.info(f"✓ Explored {len(findings)} items, read {len(excerpts)} files")
    return summary


# ── Generation ───────────────────────────────────────────


def title_similarity(a: str, b: str) -> float:
    """Shared words over the larger word set."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / max(len(words_a), len(words_b))


def deduplicate(ideas: Sequence[ContentIdea], existing: Sequence[ExistingContent]) -> List[ContentIdea]:
    return [
        idea for idea in ideas
        if not any(title_similarity(idea.title, item.title) > DUPLICATE_THRESHOLD for item in existing)
    ]


class ContentCreator:
    """Generates categorized tutorial ideas for a project with one JSON-mode request."""

    def __init__(self, client: ChatClient, model: str):
        self.client = client
        self.model = model

    async def generate_ideas(
        self,
        project_path: Union[str, Path],
        existing: Sequence[ExistingContent] = (),
        max_ideas: int = 10,
        max_categories: int = 3,
    ) -> List[ContentCategory]:
        logger.info(f"Target: {max_ideas} ideas in {max_categories} categories")
        exploration = await asyncio.to_thread(explore_codebase, project_path)
        logger.info(f"Exploration summary length: {len(exploration)} chars")

        messages = [
            {"role": "system", "content": CONTENT_SYSTEM_PROMPT},
            {"role": "user", "content": content_user_prompt(exploration, existing, max_ideas, max_categories)},
        ]
        data = await self.client.chat_json(self.model, messages)
        try:
            batch = IdeaBatch.model_validate(data)
        except ValidationError as e:
            raise ExtractionError(f"Content ideas JSON does not match the expected shape: {e}") from e

        for i, category in enumerate(batch.categories, 1):
            logger.info(f'Category {i}: "{category.name}" with {len(category.content)} ideas')

        categories = []
        for category in batch.categories:
            kept = deduplicate(category.content, existing)
            if kept:
                categories.append(category.model_copy(update={"content": kept}))

        logger.info(f"✅ After deduplication: {len(categories)} categories")
        return categories[:max_categories]
