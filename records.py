"""
Output records for a scraping run.

An ExtractionRecord is created for each lesson that yielded a media id (or,
optionally, a saved text page). The records are collected into a single
OutputDocument that is written once at the end of the run.
"""
import json
import os

from url_utils import build_label

import logger
log = logger

DEFAULT_OUTPUT_DIR = "jsons"

VIDEO = "video"
TEXT = "text"


class ExtractionRecord:
    """One scraped lesson, keyed by its original position in the manifest."""

    def __init__(self, index, name, media_id=None, downloaded=False, kind=VIDEO):
        self.index = index
        self.media_id = media_id
        self.downloaded = downloaded
        self.label = build_label(index, name)
        self.kind = kind

    def to_dict(self):
        item = {"index": self.index}
        if self.media_id is not None:
            item["dynamic-part"] = self.media_id
        item["downloaded"] = self.downloaded
        item["name"] = self.label
        item["type"] = self.kind
        return item

    @classmethod
    def from_dict(cls, item):
        record = cls(item["index"], "", media_id=item.get("dynamic-part"),
                     downloaded=item.get("downloaded", False), kind=item.get("type", VIDEO))
        # Labels are stored whole; keep them as written
        record.label = item["name"]
        return record

    def __eq__(self, other):
        if not isinstance(other, ExtractionRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"ExtractionRecord({self.to_dict()!r})"


class OutputDocument:
    """Course name plus the ordered records; item_count always matches items."""

    def __init__(self, course_name, items):
        self.course_name = course_name
        self.items = tuple(items)

    @property
    def item_count(self):
        return len(self.items)

    def to_dict(self):
        return {
            "name": self.course_name,
            "item-count": self.item_count,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data["name"], [ExtractionRecord.from_dict(item) for item in data.get("items", [])])

    def __eq__(self, other):
        if not isinstance(other, OutputDocument):
            return NotImplemented
        return self.to_dict() == other.to_dict()


def build_output_path(course_name, output_dir=DEFAULT_OUTPUT_DIR):
    """Return the path of the output file for a course."""
    return os.path.join(output_dir, f"{course_name}.json")


def write_output_document(document, output_dir=DEFAULT_OUTPUT_DIR):
    """
    Write the output document as pretty-printed JSON, replacing any previous file.

    Args:
        document (OutputDocument): The document to write
        output_dir (str): Directory for the output file, created if missing

    Returns:
        str: Path of the written file
    """
    os.makedirs(output_dir, exist_ok=True)
    path = build_output_path(document.course_name, output_dir)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)

    log.info(f"Saved {document.item_count} items to {path}")
    return path


def read_output_document(path):
    """Read an output file back into an OutputDocument."""
    with open(path, "r", encoding="utf-8") as f:
        return OutputDocument.from_dict(json.load(f))
