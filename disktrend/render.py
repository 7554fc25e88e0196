"""
disktrend.render
AUTHOR: carter-vin

Compact text rendering for the CLI (json output goes through model.report_to_json)
"""

from __future__ import annotations

from disktrend.model import MonitorReport


def format_gb(bytes_value: int | float | None) -> str:
    if bytes_value is None:
        return "n/a"
    gb = bytes_value / (1000 ** 3)
    if abs(gb) >= 10:
        return f"{gb:.0f}G"
    return f"{gb:.1f}G"


def format_rate(bytes_per_day: float | None) -> str:
    if bytes_per_day is None:
        return "n/a"
    # shrinking free space reads as "-X/day"
    sign = "-" if bytes_per_day > 0 else "+"
    return f"{sign}{format_gb(abs(bytes_per_day))}/day"


def format_days(days: int | None) -> str:
    if days is None:
        return "-"
    return f"{days}d"


def render_table(report: MonitorReport) -> str:
    headers = [
        "MOUNT",
        "NAME",
        "STATUS",
        "FREE",
        "FREE%",
        "TREND",
        "FULL_IN",
        "OUTLOOK",
    ]

    rows = [headers]
    for item in report.volumes:
        trend = item.trend
        rows.append(
            [
                item.volume.mount_point,
                item.volume.name,
                item.status.value,
                format_gb(item.volume.free_bytes),
                f"{item.volume.free_percent:.1f}",
                format_rate(trend.bytes_per_day) if trend else "n/a",
                format_days(trend.days_until_full) if trend else "-",
                trend.outlook.value if trend else "-",
            ]
        )

    if len(rows) == 1:
        return "no volumes"

    widths = [max(len(row[i]) for row in rows) for i in range(len(headers))]
    lines: list[str] = []

    for row in rows:
        padded = [row[i].ljust(widths[i]) for i in range(len(headers))]
        lines.append("  ".join(padded).rstrip())

    return "\n".join(lines)
