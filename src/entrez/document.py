"""XML helpers shared by the ELink and EGQuery parsers."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Union
from xml.etree import ElementTree

import xmltodict

from entrez.models import MalformedResponseError, Record, UpstreamError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def parse_document(content: Union[bytes, str]) -> ElementTree.Element:
    """Parse a response body into its root element."""
    try:
        return ElementTree.fromstring(content)
    except ElementTree.ParseError as e:
        raise MalformedResponseError(f"Response is not valid XML: {e}") from e


def check_xml_errors(document: ElementTree.Element) -> None:
    """Raise UpstreamError if the service reported any ERROR in the document."""
    messages = [
        (el.text or "").strip()
        for el in document.iter("ERROR")
        if el.text and el.text.strip()
    ]
    if messages:
        raise UpstreamError("; ".join(messages))


def _text(el: ElementTree.Element) -> str:
    return (el.text or "").strip()


def find_texts(document: ElementTree.Element, path: str) -> list[str]:
    """Text of every element matching ``path``, in document order."""
    return [_text(el) for el in document.findall(path)]


def first_text(document: ElementTree.Element, path: str) -> Optional[str]:
    el = document.find(path)
    if el is None:
        return None
    return _text(el)


def distinct(values: list[str]) -> list[str]:
    """Drop repeats, keeping the first occurrence of each value."""
    return list(dict.fromkeys(values))


def linked_elements(
    document: ElementTree.Element,
    link_name: str,
    element: str,
) -> list[Optional[str]]:
    """Values of ``Link/<element>`` in every LinkSetDb named ``link_name``.

    A link without the element contributes ``None`` so the result stays
    aligned with the links themselves.
    """
    values: list[Optional[str]] = []
    for link_set_db in document.iter("LinkSetDb"):
        if first_text(link_set_db, "LinkName") != link_name:
            continue
        for link in link_set_db.findall("Link"):
            values.append(first_text(link, element))
    return values


def element_to_record(element: ElementTree.Element) -> Union[Record, str, None]:
    """Convert an element sub-tree with xmltodict.

    Leaf elements without attributes become their text (``None`` when
    empty), attributes are ``@name`` keys, text next to attributes is under
    ``#text`` and repeated child tags collect into a list.
    """
    return xmltodict.parse(ElementTree.tostring(element, encoding="unicode"))[element.tag]


def record_text(value: Any) -> Optional[str]:
    """Text held by a converted field, whether plain or carrying attributes."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("#text", "")
    return None


def parse_count(raw: str, what: str) -> int:
    """Parse a plain run of ASCII digits, as E-utilities sends counts and scores."""
    if not _DIGITS.fullmatch(raw):
        raise MalformedResponseError(f"{what} {raw!r} is not a non-negative integer")
    return int(raw)
