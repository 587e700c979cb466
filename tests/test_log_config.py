from __future__ import annotations

import logging

from booking_core.core.log_config import ContextFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="booking_core.application.use_cases.conflict_resolver",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Appointment does not align to a slot boundary",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_misaligned_appointment_log_names_the_appointment():
    """The misaligned warning must say which appointment and local start it saw."""
    formatter = ContextFormatter("%(levelname)s %(message)s")
    line = formatter.format(
        _record(
            appointment_id="appt_7",
            provider_id="barber_1",
            reason="misaligned",
            local_start="2026-03-02T10:15:00-08:00",
        )
    )

    assert line.startswith("WARNING Appointment does not align to a slot boundary | ")
    assert "appointment_id=appt_7" in line
    assert "local_start=2026-03-02T10:15:00-08:00" in line
    assert "reason=misaligned" in line


def test_search_and_funnel_context_is_rendered():
    formatter = ContextFormatter("%(message)s")
    assert formatter.format(_record(found=0, policy="legacy")) == (
        "Appointment does not align to a slot boundary | policy=legacy found=0"
    )


def test_plain_record_has_no_context_suffix():
    formatter = ContextFormatter("%(message)s")
    assert formatter.format(_record()) == "Appointment does not align to a slot boundary"
    assert formatter.format(_record(error="")) == "Appointment does not align to a slot boundary"
