"""EMBUDO — Import Pipeline Orchestrator.

Runs the full data flow for every entry point:
  (fetch) → parse → store raw payload → store records

A failed fetch or parse leaves the stored collection untouched.
"""

from typing import Optional

import httpx
from sqlmodel import Session

from embudo.connectors.sheet.client import SheetClient
from embudo.ingest.parser import ParseResult, parse_text
from embudo.ingest.tokenizer import CSV_DELIMITERS
from embudo.store.repository import log_import, save_collection
from embudo.core.logging import get_logger

logger = get_logger("analyzer.pipeline")


def _store(session: Session, source: str, result: ParseResult, text: str, replace: bool) -> None:
    """Audit row and records go out in one commit."""
    try:
        log_import(session, source, result, text)
        save_collection(session, result.records, replace=replace)
    except Exception:
        session.rollback()
        raise


def import_text(
    session: Session,
    text: str,
    source: str,
    delimiters: str = CSV_DELIMITERS,
    replace: bool = True,
) -> ParseResult:
    """Parse sheet text and persist the records.

    Parsing happens before any write, so a SheetParseError leaves the
    database as it was.
    """
    result = parse_text(text, delimiters)
    _store(session, source, result, text, replace)
    logger.info(
        f"Imported {len(result.records)} records from {source} ({result.layout.value})",
        extra={"source": source, "layout": result.layout.value, "records": len(result.records)},
    )
    return result


async def run_sync(
    session: Session,
    url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ParseResult:
    """Fetch the published sheet and replace the stored collection with it.

    Raises SheetFetchError / SheetParseError; nothing is written in that case.
    """
    client = SheetClient(url=url, transport=transport)
    try:
        text, result = await client.fetch_and_parse()
    finally:
        await client.close()

    _store(session, "remote", result, text, replace=True)
    logger.info(
        f"Synced {len(result.records)} records from remote sheet",
        extra={"source": "remote", "layout": result.layout.value, "records": len(result.records)},
    )
    return result
