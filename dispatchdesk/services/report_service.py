"""Weekly report: per-project work done within a date range, plus TSV export."""

from __future__ import annotations

from datetime import date, timedelta

from dispatchdesk.models.project import Project

TSV_HEADER = "项目名称\t项目阶段\t本周工作内容\t负责人"
CONTENT_SEPARATOR = "; "


def current_week(today: date | None = None) -> tuple[date, date]:
    """Monday through Sunday of the week containing ``today``."""
    today = today or date.today()
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def weekly_rows(start: date, end: date, projects=None) -> list[dict]:
    """
    One row per project with at least one entry dated within [start, end].

    ``content`` lists the in-range entries newest first as ``[MM-DD] text``.
    """
    if projects is None:
        projects = Project.query.order_by(Project.id.desc()).all()

    rows = []
    for project in projects:
        entries = [e for e in project.history if start <= e.date <= end]
        if not entries:
            continue
        entries.sort(key=lambda e: e.date, reverse=True)
        rows.append({
            "project_id": project.id,
            "project_name": project.name,
            "stage": project.current_stage,
            "stage_label": project.stage_label,
            "content": CONTENT_SEPARATOR.join(f"[{e.date.strftime('%m-%d')}] {e.content}" for e in entries),
            "manager": project.manager,
        })
    return rows


def to_tsv(rows: list[dict]) -> str:
    lines = [f"{r['project_name']}\t{r['stage_label']}\t{r['content']}\t{r['manager']}" for r in rows]
    return TSV_HEADER + "\n" + "\n".join(lines)
