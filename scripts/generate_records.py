"""
Sample data generator for fieldledger.

Emits deterministic pseudo-random jobs (technician, job source, payment
terms, status, scheduled date) as a JSON array that both `fieldledger
summary` and `fieldledger calendar` accept.
"""

from __future__ import annotations

import json
import random
import sys
import time
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List

import typer

app = typer.Typer(help="Generate sample field-service jobs as JSON.")

TECHNICIANS = {
    "Alex Turner": ("percentage", 40.0),
    "Maria Lopez": ("percentage", 35.0),
    "Sam Patel": ("flatPerJob", 120.0),
    "Jordan Lee": ("flatPerJob", 95.0),
}
JOB_SOURCES = ["Google Ads", "Referral", "HomeAdvisor", "Website", "Thumbtack"]
SERVICES = ["Garage Door Repair", "HVAC Tune-up", "Water Heater Install", "Drain Cleaning"]
CLIENTS = ["Smith", "Johnson", "Williams", "Brown", "Garcia", "Miller", "Davis"]
STATUSES = ["scheduled", "in-progress", "completed", "completed", "paid", "cancelled"]


def _generate_jobs(rows: int, start: date, days: int, seed: int) -> List[Dict[str, Any]]:
    rng = random.Random(seed)
    technicians = sorted(TECHNICIANS)
    jobs: List[Dict[str, Any]] = []
    for i in range(rows):
        technician = rng.choice(technicians)
        basis, rate = TECHNICIANS[technician]
        scheduled = datetime.combine(
            start + timedelta(days=rng.randrange(days)),
            datetime.min.time(),
        ) + timedelta(hours=rng.choice([8, 9, 10, 11, 13, 14, 15, 16]))
        jobs.append(
            {
                "id": f"JOB-{i + 1:05d}",
                "title": rng.choice(SERVICES),
                "client_name": rng.choice(CLIENTS),
                "technician": technician,
                "job_source": rng.choice(JOB_SOURCES),
                "group_key": technician,
                "amount": round(rng.uniform(90, 2_500), 2),
                "payment_basis": basis,
                "rate": rate,
                "status": rng.choice(STATUSES),
                "occurs_at": scheduled.isoformat(),
            }
        )
    return jobs


@app.command()
def main(
    rows: int = typer.Option(200, "--rows", "-r", help="Number of jobs to generate."),
    start: str = typer.Option(
        date.today().replace(day=1).isoformat(),
        "--start",
        help="First possible scheduled date (ISO-8601).",
    ),
    days: int = typer.Option(60, "--days", help="Spread jobs over this many days."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    output: Path = typer.Option(Path("jobs.json"), "--output", "-o", help="Output JSON path."),
) -> None:
    """
    Generate sample jobs and write them to a JSON file.
    """
    began = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)
    jobs = _generate_jobs(rows, date.fromisoformat(start), max(days, 1), seed)
    with output.open("w", encoding="utf-8") as f:
        json.dump(jobs, f, indent=2)
    typer.echo(f"Wrote {len(jobs):,} jobs -> {output} in {time.perf_counter() - began:.2f}s (seed={seed})")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
