"""Data models for ELink and EGQuery results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union
from xml.etree import ElementTree


class EntrezError(Exception):
    """Base class for errors raised while talking to E-utilities."""


class UpstreamError(EntrezError):
    """The service reported a fault, or the request could not be completed."""


class MalformedResponseError(EntrezError):
    """A response is missing a required element or holds an unparseable value."""


class LinkMode(str, Enum):
    """The ``cmd`` values ELink understands."""

    NEIGHBOR = "neighbor"
    NEIGHBOR_SCORE = "neighbor_score"
    NEIGHBOR_HISTORY = "neighbor_history"
    ACHECK = "acheck"
    NCHECK = "ncheck"
    LCHECK = "lcheck"
    LLINKS = "llinks"
    LLINKSLIB = "llinkslib"
    PRLINKS = "prlinks"

    @classmethod
    def lookup(cls, value: str) -> Optional[LinkMode]:
        try:
            return cls(value)
        except ValueError:
            return None


# A free-form record converted from an XML sub-tree: field name -> text,
# nested record, or a list of those when the child tag repeats.
Record = dict[str, Any]

DatabaseCountMap = dict[str, int]


@dataclass(frozen=True)
class Linkout:
    """An external link for one record, with its provider."""

    provider: str
    url: str
    fields: Record = field(default_factory=dict)


@dataclass(frozen=True)
class NeighborLinks:
    links: dict[str, list[str]]
    scores: Optional[dict[str, list[int]]] = None


@dataclass(frozen=True)
class HistoryLinks:
    web_env: str
    query_keys: dict[str, str]


@dataclass(frozen=True)
class LinkedDatabases:
    linked_databases: dict[str, Record]


@dataclass(frozen=True)
class LinkCheck:
    check: dict[str, bool]


@dataclass(frozen=True)
class Linkouts:
    linkouts: dict[str, list[Linkout]]


@dataclass(frozen=True)
class RawDocument:
    document: ElementTree.Element


LinkData = Union[NeighborLinks, HistoryLinks, LinkedDatabases, LinkCheck, Linkouts, RawDocument]


@dataclass(frozen=True)
class LinkResult:
    """A parsed ELink response.

    ``data`` holds the mode-specific payload and ``content`` a short
    description of its fields, used when printing the result. Recoverable
    problems found while parsing are listed in ``warnings``.
    """

    mode: str
    data: LinkData
    content: str
    warnings: tuple[str, ...] = ()
    document: Optional[ElementTree.Element] = None

    @property
    def is_raw(self) -> bool:
        return isinstance(self.data, RawDocument)
