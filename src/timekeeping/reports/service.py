from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_hours
from ..core.exceptions import ValidationError
from ..records.repository import TimeRecordRepository


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class TimesheetReportService:
    def __init__(self, records: TimeRecordRepository):
        self._records = records

    def build_summary(
        self,
        *,
        start: date,
        end: date,
        actor_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        query_rows = self._records.get_report_rows(
            start_date=start, end_date=end, actor_id=actor_id, project_id=project_id
        )

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = int(r.duration_minutes)
            out_rows.append(
                {
                    "record_id": r.record_id,
                    "actor_id": r.actor_id,
                    "actor_name": r.actor_name,
                    "project_name": r.project_name,
                    "date": r.start_time.strftime("%Y-%m-%d"),
                    "start": r.start_time.strftime("%H:%M"),
                    "end": r.end_time.strftime("%H:%M"),
                    "duration_minutes": minutes,
                    "worked_hours": format_hours(minutes),
                    "lunch_deducted": r.lunch_deducted,
                }
            )

            s = summary_map.get(r.actor_id)
            if not s:
                s = {"actor_id": r.actor_id, "actor_name": r.actor_name, "total_minutes": 0}
                summary_map[r.actor_id] = s
            s["total_minutes"] += minutes

        summary = [
            {
                "actor_id": s["actor_id"],
                "actor_name": s["actor_name"],
                "total_minutes": s["total_minutes"],
                "total_hours": format_hours(s["total_minutes"]),
            }
            for s in summary_map.values()
        ]
        summary.sort(key=lambda x: x["total_minutes"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)
