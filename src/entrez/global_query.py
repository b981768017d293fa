"""Count hits for a term across all Entrez databases (EGQuery)."""

from __future__ import annotations

import logging
from typing import Any
from xml.etree import ElementTree

from entrez.document import check_xml_errors, first_text, parse_count, parse_document
from entrez.eutils import make_entrez_query
from entrez.models import DatabaseCountMap, MalformedResponseError

logger = logging.getLogger(__name__)


def parse_global_query(document: ElementTree.Element) -> DatabaseCountMap:
    """Map each database in an EGQuery document to its hit count.

    If a database is listed twice, the first listing wins.
    """
    counts: DatabaseCountMap = {}
    for item in document.iter("ResultItem"):
        name = first_text(item, "DbName")
        if not name:
            raise MalformedResponseError("ResultItem without a DbName")
        if name in counts:
            continue
        raw = first_text(item, "Count")
        if raw is None:
            raise MalformedResponseError(f"No Count for database {name}")
        counts[name] = parse_count(raw, f"Count for database {name}")
    return counts


def entrez_global_query(term: str, **extra: Any) -> DatabaseCountMap:
    """See how many hits ``term`` has in every Entrez database."""
    content = make_entrez_query("egquery", term=term, **extra)
    record = parse_document(content)
    check_xml_errors(record)
    counts = parse_global_query(record)
    logger.debug("egquery '%s' returned counts for %d databases", term, len(counts))
    return counts
