"""LLM sanity check for imported program times."""

from __future__ import annotations

import json
from typing import Any

from confprog.program_import.errors import ScheduleValidationError
from confprog.program_import.models import (
    ParsedSession,
    ValidationIssue,
    ValidationResult,
)


SEVERITIES = ("error", "warning", "info")


class ScheduleValidator:
    """Ask Gemini to flag AM/PM mix-ups and implausible session times."""

    def __init__(self, client: Any) -> None:
        """Initialize validator.

        Args:
            client: Object exposing generate_json(prompt, response_schema)
        """
        self.client = client

    def validate(self, sessions: list[ParsedSession]) -> ValidationResult:
        if not sessions:
            return ValidationResult(summary="No sessions to validate.", issues=[])

        prompt = self._build_prompt(sessions)
        try:
            response = self.client.generate_json(
                prompt, response_schema=self._build_response_schema()
            )
        except ValueError as e:
            raise ScheduleValidationError(str(e)) from e

        return self._parse_response(response)

    def _build_prompt(self, sessions: list[ParsedSession]) -> str:
        payload = [
            {
                "session_name": s.session_name,
                "session_date": s.session_date,
                "start_time": s.start_time,
                "end_time": s.end_time,
                "hall": s.hall,
            }
            for s in sessions
        ]
        return f"""You are checking a conference program imported from a spreadsheet.

Look for:
- AM/PM confusion (e.g. a lecture at 02:00 that clearly belongs at 14:00)
- Sessions ending before they start, or implausibly long/short sessions
- Times that break the day's sequence in the same hall

Only report real problems. For each, give the session name, the current start
time (HH:MM), a suggested start time (HH:MM) and a short reason. Use severity
"error" for certain mistakes, "warning" for likely ones and "info" otherwise.

Sessions (JSON):
{json.dumps(payload, indent=2)}"""

    def _build_response_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "summary": {"type": "string"},
                "issues": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "severity": {"type": "string", "enum": list(SEVERITIES)},
                            "session_name": {"type": "string"},
                            "current_time": {"type": "string"},
                            "suggested_time": {"type": "string"},
                            "reason": {"type": "string"},
                        },
                        "required": ["severity", "session_name", "reason"],
                    },
                },
            },
            "required": ["summary", "issues"],
        }

    def _parse_response(self, response: Any) -> ValidationResult:
        if not isinstance(response, dict):
            raise ScheduleValidationError("Schedule validator returned a non-object")

        raw_issues = response.get("issues")
        if not isinstance(raw_issues, list):
            raw_issues = []

        issues: list[ValidationIssue] = []
        for item in raw_issues:
            if not isinstance(item, dict):
                continue
            name = str(item.get("session_name", "") or "").strip()
            if not name:
                continue
            severity = str(item.get("severity", "") or "").strip().lower()
            if severity not in SEVERITIES:
                severity = "info"
            issues.append(
                ValidationIssue(
                    severity=severity,
                    session_name=name,
                    current_time=str(item.get("current_time", "") or "").strip(),
                    suggested_time=str(item.get("suggested_time", "") or "").strip(),
                    reason=str(item.get("reason", "") or "").strip(),
                )
            )

        summary = str(response.get("summary", "") or "").strip()
        return ValidationResult(summary=summary, issues=issues)
