"""Load the static FAQ dataset."""

import json
import logging
from pathlib import Path
from typing import Any

from supportdesk.kb.models import FaqCategory, FaqEntry

logger = logging.getLogger(__name__)


class DatasetError(Exception):
    """Raised when the FAQ dataset cannot be parsed."""

    pass


def parse_faq_records(records: list[dict[str, Any]]) -> list[FaqEntry]:
    """Turn raw dataset records into FAQ entries.

    Ids are assigned by position ("faq_1", "faq_2", ...) so they stay stable
    as long as the dataset order does not change.

    Args:
        records: Dicts with question, answer, category and optional keywords.

    Returns:
        Entries in dataset order.

    Raises:
        DatasetError: If a record is missing a field or names an unknown category.
    """
    entries: list[FaqEntry] = []

    for index, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise DatasetError(f"FAQ record {index} must be an object, got {type(record).__name__}")
        try:
            question = record["question"]
            answer = record["answer"]
            category = FaqCategory(record["category"])
        except KeyError as e:
            raise DatasetError(f"FAQ record {index} is missing field {e}") from e
        except ValueError as e:
            raise DatasetError(
                f"FAQ record {index} has unknown category {record['category']!r}"
            ) from e

        if not isinstance(question, str) or not isinstance(answer, str):
            raise DatasetError(f"FAQ record {index} must have string question and answer")
        keywords = record.get("keywords") or []
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise DatasetError(f"FAQ record {index} keywords must be a list of strings")

        entries.append(
            FaqEntry(
                id=f"faq_{index}",
                question=question,
                answer=answer,
                category=category,
                keywords=list(keywords),
            )
        )

    return entries


def load_faq_entries(path: Path) -> list[FaqEntry]:
    """Load FAQ entries from a JSON file holding a list of records.

    Args:
        path: Path to the JSON dataset.

    Returns:
        Entries in dataset order.

    Raises:
        DatasetError: If the file is not valid JSON or not a list of records.
    """
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DatasetError(f"Cannot read FAQ dataset {path}: {e}") from e

    if not isinstance(records, list):
        raise DatasetError(f"FAQ dataset {path} must contain a JSON list")

    entries = parse_faq_records(records)
    categories = {entry.category for entry in entries}
    logger.info(f"Loaded {len(entries)} FAQ entries across {len(categories)} categories")
    return entries
