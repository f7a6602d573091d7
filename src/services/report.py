"""
Report generation service.

Builds the summary, monthly, per-cycle and symptom reports from a user's
history snapshot, and renders the downloadable CSV health report.

Typical usage:
    history = repository.load_history(user_id)
    summary = build_summary_report(profile, history)
    csv_text = render_health_report_csv(profile, history)
"""
import csv
import io
from collections import Counter, OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from aws_lambda_powertools import Logger

from src.models.cycle import CycleRecord
from src.models.phase import SymptomPhase
from src.models.profile import ProfileParameters, UserProfile
from src.services.constants import (
    LUTEAL_PHASE_DAYS,
    SYMPTOM_CYCLE_MARGIN_DAYS,
    UNKNOWN_BUCKET,
    UNKNOWN_SYMPTOM,
    UNSPECIFIED_MOOD,
)
from src.services.cycle import average_cycle_length
from src.services.history import CycleHistory
from src.services.statistics import (
    aggregate_period_days,
    calculate_period_summaries,
    intensity_distribution,
    period_days_between,
)
from src.services.utils import month_bounds, month_key, round_half_up

logger = Logger()

HEALTH_REPORT_HEADER = [
    "Record Type", "Date", "End Date", "Notes", "Symptom Type",
    "Symptom Severity", "Daily Note Content", "Daily Note Mood",
    "Is Period Day", "Pads Used", "Period Intensity", "Period Notes", "Profile Key Info"
]


def _value(enum_or_none) -> str:
    if enum_or_none is None:
        return ""
    return getattr(enum_or_none, "value", enum_or_none)


def build_summary_report(profile: Optional[UserProfile], history: CycleHistory) -> Dict:
    """
    Whole-history summary: counts, breakdowns and averages.

    Returns:
        Dictionary containing totals, mood/symptom/intensity breakdowns,
        average cycle length (when at least two cycles exist) and average
        pads per period day (when any period day exists)
    """
    observations = history.observations
    symptoms = history.symptoms
    cycles = history.most_recent_first()
    period_days = [obs for obs in observations if obs.is_period_day]
    total_pads = sum(obs.pads_used for obs in period_days)

    summary = {
        "profile": profile,
        "total_cycles": len(cycles),
        "total_symptoms": len(symptoms),
        "total_notes": len(observations),
        "period_days": len(period_days),
        "total_pads_used": total_pads,
        "symptom_breakdown": dict(Counter(s.symptom_type or UNKNOWN_SYMPTOM for s in symptoms)),
        "mood_breakdown": dict(Counter(obs.mood or UNSPECIFIED_MOOD for obs in observations)),
        "period_intensity_breakdown": intensity_distribution(observations),
        "period_summaries": calculate_period_summaries(cycles, observations)["periods"],
    }

    avg_length = average_cycle_length(cycles)
    if avg_length is not None:
        summary["average_cycle_length"] = avg_length
    if period_days:
        summary["average_pads_per_day"] = round_half_up(total_pads / len(period_days), 2)

    return summary


def _overlaps(cycle: CycleRecord, start: date, end: date) -> bool:
    if start <= cycle.start_date <= end:
        return True
    if cycle.end_date is not None and start <= cycle.end_date <= end:
        return True
    return cycle.start_date <= start and (cycle.end_date is None or cycle.end_date >= end)


def build_monthly_report(history: CycleHistory, year: int, month: int) -> Dict:
    """
    Everything recorded in one calendar month with per-month distributions.

    Raises:
        InvalidRangeError: If month is outside 1-12
    """
    start, end = month_bounds(year, month)
    notes = history.observations_between(start, end)
    symptoms = [s for s in history.symptoms if start <= s.date <= end]
    cycles = [cycle for cycle in history.cycles if _overlaps(cycle, start, end)]
    period_days = [obs for obs in notes if obs.is_period_day]

    period_stats = {
        "total_days": len(period_days),
        "total_pads": sum(obs.pads_used for obs in period_days),
        "intensity_distribution": dict(Counter(
            _value(obs.intensity) or UNKNOWN_BUCKET for obs in period_days
        )),
    }

    return {
        "month": f"{year}-{month:02d}",
        "start_date": start,
        "end_date": end,
        "total_days": (end - start).days + 1,
        "notes": notes,
        "symptoms": symptoms,
        "cycles": cycles,
        "statistics": {
            "period": period_stats,
            "aggregate": aggregate_period_days(notes, start, end),
            "symptoms": dict(Counter(s.symptom_type or UNKNOWN_BUCKET for s in symptoms)),
            "mood": dict(Counter(obs.mood or UNKNOWN_BUCKET for obs in notes)),
            "total_notes": len(notes),
            "total_symptoms": len(symptoms),
        },
    }


def build_cycle_report(history: CycleHistory) -> List[Dict]:
    """
    Per-cycle breakdown of symptoms and period days, newest cycle first.

    Symptoms count towards a cycle when they fall strictly within two days
    either side of its range; period days must fall inside the range.
    """
    margin = timedelta(days=SYMPTOM_CYCLE_MARGIN_DAYS)
    observations = history.observations
    symptoms = history.symptoms
    report = []

    for number, cycle in enumerate(history.most_recent_first(), start=1):
        end = cycle.end_date or cycle.start_date
        cycle_symptoms = [
            s for s in symptoms
            if cycle.start_date - margin < s.date < end + margin
        ]
        period_days = period_days_between(observations, cycle.start_date, end)

        report.append({
            "cycle_number": number,
            "start_date": cycle.start_date,
            "end_date": cycle.end_date,
            "duration": cycle.duration,
            "notes": cycle.notes,
            "symptoms": cycle_symptoms,
            "total_symptoms": len(cycle_symptoms),
            "period_days": len(period_days),
            "period_dates": [obs.date for obs in period_days],
            "total_pads_used": sum(obs.pads_used for obs in period_days),
            "period_intensities": [_value(obs.intensity) or None for obs in period_days],
            "period_notes": [obs.notes for obs in period_days if obs.notes],
        })

    return report


def symptom_phase(days_since_start: int, params: ProfileParameters) -> SymptomPhase:
    """Coarse phase of a day counted from its cycle start."""
    if days_since_start <= params.bleeding_duration:
        return SymptomPhase.MENSTRUATION
    if days_since_start <= params.cycle_length - LUTEAL_PHASE_DAYS:
        return SymptomPhase.FOLLICULAR
    return SymptomPhase.LUTEAL


def build_symptom_analysis(
    history: CycleHistory,
    params: ProfileParameters,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> Dict:
    """
    Symptom occurrence analysis.

    Returns:
        Dictionary containing:
        - symptoms_analysis: per (type, severity) counts with first/last dates
          and distinct notes, most frequent first
        - symptoms_by_phase: per (type, severity, phase) counts
        - monthly_trends: per (month, type) counts, newest month first
    """
    in_range = [
        s for s in history.symptoms
        if (start is None or s.date >= start) and (end is None or s.date <= end)
    ]

    groups: Dict = OrderedDict()
    for symptom in in_range:
        key = (symptom.symptom_type, symptom.severity)
        group = groups.setdefault(key, {
            "symptom_type": symptom.symptom_type,
            "severity": symptom.severity,
            "occurrence_count": 0,
            "first_occurrence": symptom.date,
            "last_occurrence": symptom.date,
            "notes": [],
        })
        group["occurrence_count"] += 1
        group["first_occurrence"] = min(group["first_occurrence"], symptom.date)
        group["last_occurrence"] = max(group["last_occurrence"], symptom.date)
        if symptom.notes and symptom.notes not in group["notes"]:
            group["notes"].append(symptom.notes)

    analysis = sorted(groups.values(), key=lambda g: g["occurrence_count"], reverse=True)
    for group in analysis:
        group["all_notes"] = " | ".join(group.pop("notes")) or None

    # Phase buckets use the whole history, like the monthly trends below
    phase_counts: Counter = Counter()
    for symptom in history.symptoms:
        cycle = (
            history.get_cycle(symptom.cycle_start_date)
            if symptom.cycle_start_date else history.cycle_for_day(symptom.date)
        )
        if cycle is None:
            phase = SymptomPhase.UNKNOWN
        else:
            phase = symptom_phase((symptom.date - cycle.start_date).days, params)
        phase_counts[(symptom.symptom_type, symptom.severity, phase)] += 1

    by_phase = [
        {"symptom_type": t, "severity": s, "cycle_phase": p, "count": c}
        for (t, s, p), c in sorted(phase_counts.items(), key=lambda item: (item[0][2].value, -item[1]))
    ]

    trend_counts = Counter((month_key(s.date), s.symptom_type) for s in history.symptoms)
    # Newest month first, most frequent first, ties by symptom type
    by_type = sorted(trend_counts.items(), key=lambda item: item[0][1])
    trends = [
        {"month": m, "symptom_type": t, "occurrence_count": c}
        for (m, t), c in sorted(by_type, key=lambda item: (item[0][0], item[1]), reverse=True)
    ]

    return {
        "symptoms_analysis": analysis,
        "symptoms_by_phase": by_phase,
        "monthly_trends": trends,
    }


def health_report_filename(user_id: str, generated_at: datetime) -> str:
    return f"health_report_{user_id}_{generated_at.strftime('%Y%m%d_%H%M%S')}.csv"


def build_health_report_rows(profile: Optional[UserProfile], history: CycleHistory) -> List[Dict]:
    """
    Rows of the downloadable health report keyed by column name.

    The profile row comes first; cycles, symptoms and notes follow newest
    first, then one summary row per recorded period. Missing columns are
    left blank by the writer.
    """
    rows: List[Dict] = [{
        "Record Type": "PROFILE_INFO",
        "Profile Key Info": profile.summary_line() if profile else "",
    }]

    cycles = history.most_recent_first()
    for cycle in cycles:
        rows.append({
            "Record Type": "CYCLE",
            "Date": cycle.start_date.isoformat(),
            "End Date": cycle.end_date.isoformat() if cycle.end_date else "",
            "Notes": cycle.notes or "",
        })

    for symptom in reversed(history.symptoms):
        rows.append({
            "Record Type": "SYMPTOM",
            "Date": symptom.date.isoformat(),
            "Notes": symptom.notes or "",
            "Symptom Type": symptom.symptom_type,
            "Symptom Severity": symptom.severity or "",
        })

    for obs in reversed(history.observations):
        rows.append({
            "Record Type": "NOTE",
            "Date": obs.date.isoformat(),
            "Daily Note Content": obs.content or "",
            "Daily Note Mood": obs.mood or "",
            "Is Period Day": "Yes" if obs.is_period_day else "No",
            "Pads Used": obs.pads_used,
            "Period Intensity": _value(obs.intensity),
            "Period Notes": obs.notes or "",
        })

    for period in calculate_period_summaries(cycles, history.observations)["periods"]:
        duration = period.duration_days if period.end_date else "N/A"
        rows.append({
            "Record Type": "PERIOD_SUMMARY",
            "Date": period.start_date.isoformat(),
            "End Date": period.end_date.isoformat() if period.end_date else "",
            "Notes": period.notes or "",
            "Pads Used": period.total_pads_used,
            "Period Intensity": _value(period.dominant_intensity),
            "Profile Key Info": f"Period Duration: {duration} days",
        })

    return rows


def render_health_report_csv(profile: Optional[UserProfile], history: CycleHistory) -> str:
    """Render the health report as CSV text, header row first."""
    rows = build_health_report_rows(profile, history)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=HEALTH_REPORT_HEADER, restval="", lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    logger.info("Health report rendered", extra={"rows": len(rows)})
    return buffer.getvalue()


def build_custom_report(
    history: CycleHistory,
    start: date,
    end: date,
    include_notes: bool = True,
    include_symptoms: bool = True,
    include_cycles: bool = True,
    include_periods: bool = True
) -> Dict:
    """
    Report over an arbitrary date range with optional sections.

    Cycles are selected by start date, periods by the same bounds used for
    the period summaries. Pad totals are only reported alongside notes.
    """
    report: Dict = {
        "date_range": {
            "start_date": start,
            "end_date": end,
            "total_days": (end - start).days + 1,
        }
    }
    summary: Dict = {}

    if include_notes:
        notes = history.observations_between(start, end)
        period_days = [obs for obs in notes if obs.is_period_day]
        total_pads = sum(obs.pads_used for obs in period_days)
        report["notes"] = notes
        summary["total_notes"] = len(notes)
        summary["period_days"] = len(period_days)
        summary["total_pads_used"] = total_pads
        summary["average_pads_per_day"] = (
            round_half_up(total_pads / len(period_days), 2) if period_days else 0
        )
    if include_symptoms:
        symptoms = [s for s in history.symptoms if start <= s.date <= end]
        report["symptoms"] = symptoms
        summary["total_symptoms"] = len(symptoms)
    if include_cycles:
        cycles = [c for c in history.most_recent_first() if start <= c.start_date <= end]
        report["cycles"] = cycles
        summary["total_cycles"] = len(cycles)
    if include_periods:
        periods = calculate_period_summaries(
            history.most_recent_first(), history.observations, start, end
        )
        report["period_summaries"] = periods["periods"]
        summary["period_statistics"] = periods["statistics"]

    report["summary"] = summary
    return report
