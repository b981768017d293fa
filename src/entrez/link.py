"""Parse ELink responses.

ELink returns very different XML depending on the ``cmd`` it was called
with, so each family of commands gets its own parser. ``parse_link`` looks
the command up in ``_PARSERS`` and falls back to returning the raw document
(with a warning) for commands it does not know.

Each parser returns the payload, a short description of the payload's
fields, and any warnings raised while parsing.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Union
from xml.etree import ElementTree

from entrez.document import (
    check_xml_errors,
    distinct,
    element_to_record,
    find_texts,
    first_text,
    linked_elements,
    parse_count,
    parse_document,
    record_text,
)
from entrez.eutils import make_entrez_query
from entrez.models import (
    HistoryLinks,
    LinkCheck,
    LinkData,
    LinkedDatabases,
    LinkMode,
    LinkResult,
    Linkout,
    Linkouts,
    MalformedResponseError,
    NeighborLinks,
    RawDocument,
)

logger = logging.getLogger(__name__)

ParseOutput = tuple[LinkData, str, list[str]]

NOT_FOUND_ID = "-1"


def _parse_neighbors(x: ElementTree.Element, scores: bool = False) -> ParseOutput:
    warnings = []
    if NOT_FOUND_ID in find_texts(x, ".//IdList/Id"):
        warnings.append("Some IDs not found")

    db_names = distinct(find_texts(x, ".//LinkSetDb/LinkName"))
    links = {}
    for name in db_names:
        ids = linked_elements(x, name, "Id")
        if any(not i for i in ids):
            raise MalformedResponseError(f"Link in {name} has no Id")
        links[name] = ids

    content = " links: IDs for linked records from NCBI\n"
    if not scores:
        return NeighborLinks(links=links), content, warnings

    nscores = {}
    for name in db_names:
        values = []
        for raw in linked_elements(x, name, "Score"):
            if raw is None:
                raise MalformedResponseError(f"Link in {name} has no Score")
            values.append(parse_count(raw, f"Score in {name}"))
        nscores[name] = values
    content += " scores: weighted neighbouring scores for each hit in links\n"
    return NeighborLinks(links=links, scores=nscores), content, warnings


def _parse_history(x: ElementTree.Element) -> ParseOutput:
    web_env = first_text(x, ".//WebEnv")
    if not web_env:
        raise MalformedResponseError("neighbor_history response has no WebEnv")

    qks = find_texts(x, ".//LinkSetDbHistory/QueryKey")
    names = find_texts(x, ".//LinkSetDbHistory/LinkName")
    if len(qks) != len(names):
        raise MalformedResponseError(
            f"Found {len(qks)} QueryKeys for {len(names)} LinkNames in LinkSetDbHistory"
        )
    warnings = []
    repeated = [name for name in distinct(names) if names.count(name) > 1]
    if repeated:
        # One LinkSet per ID (by_id) repeats each LinkName; the last QueryKey wins.
        warnings.append(
            f"LinkName repeated in history: {', '.join(repeated)}; keeping the last QueryKey of each"
        )
    content = (
        " web_env: a WebEnv (cookie) value\n"
        " query_keys: a QueryKey for each included database\n"
    )
    return HistoryLinks(web_env=web_env, query_keys=dict(zip(names, qks))), content, warnings


def _parse_acheck(x: ElementTree.Element) -> ParseOutput:
    db_info = {}
    for info in x.iter("LinkInfo"):
        record = element_to_record(info)
        name = record.get("LinkName") if isinstance(record, dict) else None
        if not isinstance(name, str) or not name:
            raise MalformedResponseError("LinkInfo without a LinkName")
        db_info[name] = record
    content = " linked_databases: summary data from each database with linked records\n"
    return LinkedDatabases(linked_databases=db_info), content, []


def _parse_check(x: ElementTree.Element, attr: str) -> ParseOutput:
    # Identifiers are assumed unique; a repeated Id keeps its last value.
    check = {(el.text or "").strip(): el.get(attr) == "Y" for el in x.iter("Id")}
    content = " check: True/False for whether each ID has links\n"
    return LinkCheck(check=check), content, []


def _to_linkout(obj_url: ElementTree.Element) -> Linkout:
    record = element_to_record(obj_url)
    if not isinstance(record, dict):
        raise MalformedResponseError("Empty ObjUrl in linkout response")
    url = record_text(record.get("Url"))
    provider = record.get("Provider")
    name = record_text(provider.get("Name")) if isinstance(provider, dict) else None
    if not url:
        raise MalformedResponseError("ObjUrl without a Url")
    if not name:
        raise MalformedResponseError(f"ObjUrl for {url} has no Provider/Name")
    return Linkout(provider=name, url=url, fields=record)


def _parse_linkouts(x: ElementTree.Element) -> ParseOutput:
    linkouts = {}
    for per_id in x.findall(".//IdUrlList/IdUrlSet"):
        record_id = first_text(per_id, "Id")
        if not record_id:
            raise MalformedResponseError("IdUrlSet without an Id")
        linkouts[f"ID_{record_id}"] = [_to_linkout(o) for o in per_id.findall("ObjUrl")]
    content = " linkouts: links to external websites\n"
    return Linkouts(linkouts=linkouts), content, []


def _parse_default(x: ElementTree.Element, cmd: str) -> ParseOutput:
    warning = f"Don't know how to deal with cmd {cmd}, returning xml file"
    content = f" document: the unparsed XML response for cmd {cmd}\n"
    return RawDocument(document=x), content, [warning]


_PARSERS: dict[LinkMode, Callable[[ElementTree.Element], ParseOutput]] = {
    LinkMode.NEIGHBOR: _parse_neighbors,
    LinkMode.NEIGHBOR_SCORE: lambda x: _parse_neighbors(x, scores=True),
    LinkMode.NEIGHBOR_HISTORY: _parse_history,
    LinkMode.ACHECK: _parse_acheck,
    LinkMode.NCHECK: lambda x: _parse_check(x, "HasNeighbor"),
    LinkMode.LCHECK: lambda x: _parse_check(x, "HasLinkOut"),
    LinkMode.LLINKS: _parse_linkouts,
    LinkMode.LLINKSLIB: _parse_linkouts,
    LinkMode.PRLINKS: _parse_linkouts,
}


def parse_link(document: ElementTree.Element, mode: Union[LinkMode, str]) -> LinkResult:
    """Turn an error-checked ELink document into a LinkResult for ``mode``."""
    cmd = mode.value if isinstance(mode, LinkMode) else str(mode)
    link_mode = LinkMode.lookup(cmd)
    if link_mode is None:
        data, content, warnings = _parse_default(document, cmd)
    else:
        data, content, warnings = _PARSERS[link_mode](document)

    for w in warnings:
        logger.warning(w)
    return LinkResult(
        mode=cmd,
        data=data,
        content=content,
        warnings=tuple(warnings),
        document=document,
    )


def entrez_link(
    *,
    dbfrom: str,
    db: str = "",
    cmd: Union[LinkMode, str] = LinkMode.NEIGHBOR,
    ids: Optional[Iterable[Any]] = None,
    web_env: Optional[str] = None,
    query_key: Optional[Union[int, str]] = None,
    by_id: bool = False,
    **extra: Any,
) -> LinkResult:
    """Find records related to ``ids`` (or a WebEnv search) in ``db``.

    With ``by_id`` each identifier is sent as its own ``id`` parameter and
    the service links every identifier separately.
    """
    cmd = cmd.value if isinstance(cmd, LinkMode) else cmd
    id_list = [str(i) for i in ids] if ids is not None else None
    content = make_entrez_query(
        "elink",
        db=db,
        dbfrom=dbfrom,
        cmd=cmd,
        id=id_list or None,
        WebEnv=web_env,
        query_key=query_key,
        require_one_of=("id", "WebEnv"),
        repeated=("id",) if by_id else (),
        **extra,
    )
    record = parse_document(content)
    check_xml_errors(record)
    return parse_link(record, cmd)
