"""
Project Dispatch Desk
Workload Scorer.

Pure functions: how busy is a user over the last 10 days, and what
0-3 workload score does that translate to. Fewer recent entries means a
higher score (more capacity).
"""

from datetime import date, timedelta

WORKLOAD_WINDOW_DAYS = 10


def is_authored_by(entry, user) -> bool:
    """Entries carry ``author_id`` when created by a known user; older ones match on name."""
    if entry.author_id is not None:
        return entry.author_id == user.id
    return entry.author == user.name


def entries_by(user, projects) -> list:
    """Every history entry across ``projects`` written by ``user``."""
    return [e for p in projects for e in p.history if is_authored_by(e, user)]


def count_recent_entries(user, projects, cutoff: date) -> int:
    return sum(1 for e in entries_by(user, projects) if e.date >= cutoff)


def workload_score(count: int) -> int:
    """0-1 entries → 3, 2-4 → 2, 5 or more → 1."""
    if count <= 1:
        return 3
    if count <= 4:
        return 2
    return 1


def compute_workload_scores(candidates, projects, today: date | None = None) -> dict[str, int]:
    """Map str(user.id) → workload score for each candidate."""
    cutoff = (today or date.today()) - timedelta(days=WORKLOAD_WINDOW_DAYS)
    return {
        str(user.id): workload_score(count_recent_entries(user, projects, cutoff))
        for user in candidates
    }
