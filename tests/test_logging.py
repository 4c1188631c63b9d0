import json
import logging

from embudo.core.logging import JSONFormatter, get_logger


def _format(**extra):
    record = logging.LogRecord("embudo.test", logging.INFO, __file__, 1, "Importé %s", ("Inversión",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(JSONFormatter().format(record))


def test_import_context_becomes_top_level_keys():
    entry = _format(source="paste", layout="daily", records=2, unrelated="x")
    assert entry["message"] == "Importé Inversión"
    assert entry["source"] == "paste"
    assert entry["layout"] == "daily"
    assert entry["records"] == 2
    assert "unrelated" not in entry


def test_get_logger_is_namespaced_and_attaches_one_handler():
    logger = get_logger("tests.logging")
    assert logger.name == "embudo.tests.logging"
    assert get_logger("tests.logging").handlers == logger.handlers
    assert len(logger.handlers) == 1
