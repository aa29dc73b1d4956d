"""Tests for ServiceResult formatting in JSON, quiet, and rich modes."""

from __future__ import annotations

import json

from udpcomm.output.formatters import OutputSettings, format_result
from udpcomm.services.result import ServiceError, ServiceResult

UNROLL = ServiceResult(
    ok=True,
    op="unroll",
    data={
        "script": "poll.txt",
        "count": 2,
        "commands": [{"kind": "write", "argument": "ping"}, {"kind": "read", "argument": ""}],
    },
)

FAILED = ServiceResult(
    ok=False,
    op="run_script",
    error=ServiceError(code="PARSE_ERROR", message="Invalid delay-ms duration 'x'", detail={"index": 4}),
)


class TestJson:
    def test_full_payload(self) -> None:
        payload = json.loads(format_result(UNROLL, settings=OutputSettings(json_output=True)))
        assert payload["ok"] is True
        assert payload["data"]["count"] == 2


class TestQuiet:
    def test_ok(self) -> None:
        assert format_result(UNROLL, settings=OutputSettings(quiet=True)) == "OK: unroll"

    def test_error(self) -> None:
        text = format_result(FAILED, settings=OutputSettings(quiet=True))
        assert text.startswith("ERROR: run_script")
        assert "Invalid delay-ms" in text


class TestRich:
    def test_unroll_listing(self) -> None:
        lines = format_result(UNROLL).splitlines()
        assert lines[0] == "OK  unroll"
        assert "  script: poll.txt" in lines
        assert "  1  write ping" in lines
        assert "  2  read" in lines

    def test_session_summary(self) -> None:
        result = ServiceResult(
            ok=True,
            op="session",
            data={"mode": "synchronous", "sent": 3, "received": 2, "reason": "interrupted"},
        )
        text = format_result(result)
        assert "sent: 3" in text
        assert "ended: interrupted" in text
        assert "errors:" not in text

    def test_session_summary_reports_channel_errors(self) -> None:
        result = ServiceResult(
            ok=True,
            op="session",
            data={"mode": "receive-only", "sent": 0, "received": 4, "errors": 2, "reason": "interrupted"},
        )
        assert "errors: 2" in format_result(result)

    def test_run_summary(self) -> None:
        result = ServiceResult(
            ok=True,
            op="run",
            data={"scripts": [{"script": "a.txt", "ok": True, "executed": 2, "total": 2}], "failed": 0},
        )
        assert "a.txt  2/2" in format_result(result)

    def test_generic_fields(self) -> None:
        text = format_result(ServiceResult(ok=True, op="other", data={"answer": 42}))
        assert "answer: 42" in text

    def test_error_hides_detail_unless_verbose(self) -> None:
        terse = format_result(FAILED)
        assert "code: PARSE_ERROR" in terse
        assert "index" not in terse
        assert "index: 4" in format_result(FAILED, settings=OutputSettings(verbose=True))
