"""
Small formatting helpers.

Used by the CLI to print compact summaries of trail progress.
"""

from __future__ import annotations

from trailquest.domain.models import TrailStats


def one_line_summary(stats: TrailStats) -> str:
    """Render a compact single-line summary for trail stats."""
    parts = [
        f"trail={stats.trail_id}",
        f"{stats.discovered_spots}/{stats.total_spots} ({stats.progress_percentage}%)",
        stats.completion_status,
    ]
    if stats.rank:
        parts.append(f"rank={stats.rank}/{stats.total_discoverers}")
    else:
        parts.append(f"unranked ({stats.total_discoverers} discoverers)")
    if stats.average_time_between_discoveries is not None:
        parts.append(f"avg_gap={stats.average_time_between_discoveries:.0f}s")
    return " | ".join(parts)
