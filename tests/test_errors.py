from __future__ import annotations

import logging

from dxfgeo.errors import DxfGeoError, EntityValidationError, ErrorReporter, InvalidGeometryError, Severity


def test_reporter_collects_messages_in_order() -> None:
    reporter = ErrorReporter()
    reporter.add_warning("first", "W1", {"handle": "A"})
    reporter.add_error("second", "E1")
    reporter.add_info("third", "I1")

    assert len(reporter) == 3
    assert [m.code for m in reporter.messages] == ["W1", "E1", "I1"]
    assert reporter.codes(Severity.WARNING) == ["W1"]
    assert [m.message for m in reporter.errors] == ["second"]
    assert reporter.warnings[0].context == {"handle": "A"}
    assert reporter.has_errors()

    reporter.clear()
    assert len(reporter) == 0
    assert not reporter.has_errors()


def test_reporter_copies_context() -> None:
    reporter = ErrorReporter()
    context = {"x": 1}
    reporter.add_warning("w", "W", context)
    context["x"] = 2
    assert reporter.warnings[0].context == {"x": 1}


def test_reporter_logs_at_matching_level(caplog) -> None:
    reporter = ErrorReporter(logging.getLogger("dxfgeo.test"))
    with caplog.at_level(logging.INFO, logger="dxfgeo.test"):
        reporter.add_warning("careful", "W")
        reporter.add_error("broken", "E")
    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.WARNING, logging.ERROR]
    assert "careful [W]" in caplog.records[0].getMessage()


def test_exception_hierarchy() -> None:
    geometry_error = InvalidGeometryError("bad", "Polygon", {"ring": 0})
    assert isinstance(geometry_error, DxfGeoError)
    assert isinstance(geometry_error, ValueError)
    assert geometry_error.details == {"geometry_type": "Polygon", "ring": 0}

    validation_error = EntityValidationError("invalid", "CIRCLE", "2F")
    assert validation_error.code == "VALIDATION_ERROR"
    assert validation_error.details["handle"] == "2F"
    assert str(validation_error) == "invalid"
