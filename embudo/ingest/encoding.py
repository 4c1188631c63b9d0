"""EMBUDO — Upload decoding.

Spreadsheet exports arrive as UTF-8 (with or without BOM) or, from older
Excel installs, in a legacy single-byte encoding.
"""

from charset_normalizer import from_bytes

from embudo.core.logging import get_logger

logger = get_logger("ingest.encoding")


def decode_upload(raw: bytes) -> str:
    """Decode uploaded bytes, best-effort.

    - UTF-8 (a BOM is kept; the tokenizer skips it) is tried first.
    - Otherwise the charset-normalizer best guess is used.
    - Last resort: UTF-8 with replacement characters.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is not None:
        logger.info(f"Upload decoded as {match.encoding}")
        return str(match)

    logger.warning("Could not detect upload encoding, decoding with replacement characters")
    return raw.decode("utf-8", errors="replace")
