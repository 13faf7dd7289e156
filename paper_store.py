"""Paper persistence: idempotent upsert keyed by external id (or title)."""

from __future__ import annotations

import csv
import json
import logging
import os
import tempfile
import threading
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from errors import NotFoundError
from models import Paper, RawResult

LOGGER = logging.getLogger(__name__)

# Cross-process lock on the CSV file. A lock older than the stale limit is
# left over from a crashed writer and is removed.
LOCK_TIMEOUT_SECONDS = 30.0
LOCK_STALE_SECONDS = 300.0
_LOCK_POLL_SECONDS = 0.05

CSV_COLUMNS = [
    "paper_id",
    "topic",
    "external_id",
    "title",
    "authors",           # JSON list, order preserved
    "abstract_raw",      # feed text as first seen; never overwritten
    "abstract_display",  # refreshed on every re-discovery
    "pdf_url",
    "source_url",
    "published_at",
    "ai_summary",
    "ai_summary_at",
    "created_at",
]


class PaperStore:
    """Repository interface shared by the storage engines.

    Subclasses provide ``_load`` / ``_write``; resolution and merge rules live
    here so every engine behaves the same. Every write re-reads the current
    state and changes one paper under ``_locked``, so writes are
    last-write-wins per paper with no cross-paper transaction.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Paper]:
        raise NotImplementedError

    def _write(self, papers: dict[str, Paper]) -> None:
        raise NotImplementedError

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def upsert(self, candidate: RawResult, topic: str) -> Paper:
        """Create or refresh the record for a candidate and return the stored copy."""
        with self._locked():
            papers = self._load()
            existing = _resolve(papers, candidate)

            if existing is None:
                paper = Paper(
                    paper_id=uuid.uuid4().hex,
                    topic=topic,
                    external_id=candidate.external_id,
                    title=candidate.title,
                    authors=list(candidate.authors),
                    abstract_raw=candidate.abstract,
                    abstract_display=candidate.abstract,
                    pdf_url=candidate.pdf_url,
                    source_url=candidate.source_url,
                    published_at=candidate.published_at,
                    created_at=datetime.now(UTC),
                )
                papers[paper.paper_id] = paper
                LOGGER.info("Created paper_id=%s external_id=%s", paper.paper_id, paper.external_id)
            else:
                paper = existing
                paper.topic = topic
                paper.title = candidate.title
                paper.abstract_display = candidate.abstract
                paper.authors = list(candidate.authors)
                paper.pdf_url = candidate.pdf_url
                paper.published_at = candidate.published_at
                paper.source_url = candidate.source_url
                if not paper.abstract_raw:
                    paper.abstract_raw = candidate.abstract
                LOGGER.info("Refreshed paper_id=%s external_id=%s", paper.paper_id, paper.external_id)

            self._write(papers)

        stored = self.get(paper.paper_id)
        if stored is None:
            raise RuntimeError(f"Paper vanished after write: {paper.paper_id}")
        return stored

    def get(self, paper_id: str) -> Paper | None:
        paper = self._load().get(paper_id)
        return paper.copy() if paper is not None else None

    def find_by_ids(self, ids: list[str]) -> list[Paper]:
        """Return existing papers in request order; unknown ids are skipped."""
        papers = self._load()
        found: list[Paper] = []
        seen: set[str] = set()
        for paper_id in ids:
            if paper_id in seen or paper_id not in papers:
                continue
            seen.add(paper_id)
            found.append(papers[paper_id].copy())
        return found

    def save_summary(self, paper_id: str, ai_summary: str, ai_summary_at: datetime) -> None:
        """Persist a generated summary; the only write path for summary fields."""
        with self._locked():
            papers = self._load()
            paper = papers.get(paper_id)
            if paper is None:
                raise NotFoundError(f"Paper not found: {paper_id}")
            paper.ai_summary = ai_summary
            paper.ai_summary_at = ai_summary_at
            self._write(papers)

    def all(self) -> list[Paper]:
        return [paper.copy() for paper in self._load().values()]


class InMemoryPaperStore(PaperStore):
    """Dict-backed store; state lives for the life of the object."""

    def __init__(self) -> None:
        super().__init__()
        self._papers: dict[str, Paper] = {}

    def _load(self) -> dict[str, Paper]:
        return {paper_id: paper.copy() for paper_id, paper in self._papers.items()}

    def _write(self, papers: dict[str, Paper]) -> None:
        self._papers = {paper_id: paper.copy() for paper_id, paper in papers.items()}


class CsvPaperStore(PaperStore):
    """CSV-file store; the whole file is rewritten on every write.

    Several processes may share one file: each write holds a sibling
    ``.lock`` file for its read-modify-write.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.lock_path = self.path.with_name(f".{self.path.name}.lock")

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            fd = _acquire_file_lock(self.lock_path)
            try:
                yield
            finally:
                os.close(fd)
                self.lock_path.unlink(missing_ok=True)

    def _load(self) -> dict[str, Paper]:
        if not self.path.exists():
            return {}

        with self.path.open(newline="", encoding="utf-8") as fh:
            reader = csv.DictReader(fh)
            papers = [_row_to_paper(row) for row in reader]
        return {paper.paper_id: paper for paper in papers}

    def _write(self, papers: dict[str, Paper]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as fh:
                writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
                writer.writeheader()
                for paper in papers.values():
                    writer.writerow(_paper_to_row(paper))
            os.replace(tmp_name, self.path)
        finally:
            Path(tmp_name).unlink(missing_ok=True)
        LOGGER.debug("Wrote %s papers to %s", len(papers), self.path)


def _acquire_file_lock(lock_path: Path) -> int:
    """Create ``lock_path`` exclusively, waiting for another writer to release it."""
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + LOCK_TIMEOUT_SECONDS
    while True:
        try:
            return os.open(lock_path, os.O_CREAT | os.O_WRONLY | os.O_EXCL)
        except FileExistsError:
            if _lock_is_stale(lock_path):
                LOGGER.warning("Removing stale store lock: %s", lock_path)
                lock_path.unlink(missing_ok=True)
                continue
            if time.monotonic() >= deadline:
                raise RuntimeError(f"Timed out waiting for store lock: {lock_path}") from None
            time.sleep(_LOCK_POLL_SECONDS)


def _lock_is_stale(lock_path: Path) -> bool:
    try:
        age = time.time() - lock_path.stat().st_mtime
    except FileNotFoundError:
        return False
    return age > LOCK_STALE_SECONDS


def _resolve(papers: dict[str, Paper], candidate: RawResult) -> Paper | None:
    """Find the record a candidate refers to: external id first, else exact title."""
    if candidate.external_id:
        for paper in papers.values():
            if paper.external_id == candidate.external_id:
                return paper
        return None
    for paper in papers.values():
        if paper.title == candidate.title:
            return paper
    return None


def _paper_to_row(paper: Paper) -> dict[str, str]:
    return {
        "paper_id": paper.paper_id,
        "topic": paper.topic,
        "external_id": paper.external_id or "",
        "title": paper.title,
        "authors": json.dumps(paper.authors, ensure_ascii=False),
        "abstract_raw": paper.abstract_raw,
        "abstract_display": paper.abstract_display,
        "pdf_url": paper.pdf_url,
        "source_url": paper.source_url,
        "published_at": _format_datetime(paper.published_at),
        "ai_summary": paper.ai_summary or "",
        "ai_summary_at": _format_datetime(paper.ai_summary_at),
        "created_at": _format_datetime(paper.created_at),
    }


def _row_to_paper(row: dict[str, str]) -> Paper:
    ai_summary = row.get("ai_summary") or None
    ai_summary_at = _parse_datetime(row.get("ai_summary_at"))
    if ai_summary is None or ai_summary_at is None:
        ai_summary, ai_summary_at = None, None

    return Paper(
        paper_id=row["paper_id"],
        topic=row.get("topic") or "",
        external_id=row.get("external_id") or None,
        title=row.get("title") or "",
        authors=_parse_authors(row.get("authors")),
        abstract_raw=row.get("abstract_raw") or "",
        abstract_display=row.get("abstract_display") or "",
        pdf_url=row.get("pdf_url") or "",
        source_url=row.get("source_url") or "",
        published_at=_parse_datetime(row.get("published_at")),
        ai_summary=ai_summary,
        ai_summary_at=ai_summary_at,
        created_at=_parse_datetime(row.get("created_at")),
    )


def _parse_authors(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Ignoring malformed authors cell: %r", raw)
        return []
    return [str(name) for name in value] if isinstance(value, list) else []


def _format_datetime(value: datetime | None) -> str:
    return value.isoformat() if value is not None else ""


def _parse_datetime(raw: str | None) -> datetime | None:
    if not raw:
        return None
    parsed = datetime.fromisoformat(raw)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
