"""
Parse pasted or uploaded content into documents.

Three formats are recognised: a JSON array of objects, CSV with a header row,
and plain text with one document per line.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal, TypeAlias

from .data import BUILTIN_DOCS
from .errors import IngestError
from .models import Document

SourceMode: TypeAlias = Literal["builtin", "paste", "upload"]


@dataclass(frozen=True)
class FieldChain:
    """Ordered source fields for one document attribute, with a fallback."""

    keys: tuple[str, ...]
    fallback: Callable[[int, str], Any]

    def resolve(self, row: dict[str, Any], index: int, raw: str = "") -> Any:
        for key in self.keys:
            value = row.get(key)
            if value is not None:
                return value
        return self.fallback(index, raw)


def _title_fallback(index: int, raw: str) -> str:
    return f"Document {index}"


JSON_FIELDS: dict[str, FieldChain] = {
    "id": FieldChain(("id",), lambda index, raw: f"paste-{index}"),
    "title": FieldChain(("title", "name"), _title_fallback),
    "text": FieldChain(("text", "content"), lambda index, raw: ""),
    "tags": FieldChain(("tags",), lambda index, raw: []),
}

CSV_FIELDS: dict[str, FieldChain] = {
    "id": FieldChain(("id",), lambda index, raw: f"csv-{index}"),
    "title": FieldChain(("title", "name"), _title_fallback),
    "text": FieldChain(("text", "content"), lambda index, raw: raw),
    "tags": FieldChain(("tags",), lambda index, raw: None),
}


def to_document_list(source_mode: SourceMode, content: str | None = None) -> list[Document]:
    """Return documents for a source mode, parsing ``content`` when not builtin."""
    if source_mode == "builtin":
        return [doc.model_copy() for doc in BUILTIN_DOCS]
    if not content:
        return []
    trimmed = content.strip()
    if not trimmed:
        return []
    if trimmed.startswith("["):
        return parse_json_documents(trimmed)
    if "," in trimmed:
        return parse_csv_documents(trimmed)
    return parse_text_documents(trimmed)


def load_documents(path: str) -> list[Document]:
    """Read a file and parse it as uploaded content."""
    content = Path(path).expanduser().read_text(encoding="utf-8")
    return to_document_list("upload", content)


def parse_json_documents(content: str) -> list[Document]:
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise IngestError(f"Invalid JSON document list: {exc}") from exc
    if not isinstance(parsed, list):
        raise IngestError("JSON input must be an array of objects.")

    documents: list[Document] = []
    for index, item in enumerate(parsed, start=1):
        if not isinstance(item, dict):
            raise IngestError(f"JSON item {index} is not an object.")
        tags = JSON_FIELDS["tags"].resolve(item, index)
        documents.append(
            Document(
                id=str(JSON_FIELDS["id"].resolve(item, index)),
                title=str(JSON_FIELDS["title"].resolve(item, index)),
                text=str(JSON_FIELDS["text"].resolve(item, index)),
                tags=[str(tag) for tag in tags] if isinstance(tags, list) else [str(tags)],
            )
        )
    return documents


def parse_csv_documents(content: str) -> list[Document]:
    header_line, *lines = content.splitlines()
    headers = [header.strip() for header in header_line.split(",")]

    documents: list[Document] = []
    rows = [line for line in lines if line.strip()]
    for index, line in enumerate(rows, start=1):
        values = next(csv.reader(io.StringIO(line)), [])
        row = {
            header: values[position].strip()
            for position, header in enumerate(headers)
            if position < len(values)
        }
        raw_tags = CSV_FIELDS["tags"].resolve(row, index, line)
        documents.append(
            Document(
                id=CSV_FIELDS["id"].resolve(row, index, line),
                title=CSV_FIELDS["title"].resolve(row, index, line),
                text=CSV_FIELDS["text"].resolve(row, index, line),
                tags=raw_tags.split("|") if raw_tags else [],
            )
        )
    return documents


def parse_text_documents(content: str) -> list[Document]:
    return [
        Document(id=f"txt-{index}", title=f"Document {index}", text=line, tags=[])
        for index, line in enumerate(content.splitlines(), start=1)
    ]
