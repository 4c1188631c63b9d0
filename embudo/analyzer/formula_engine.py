"""EMBUDO — Derived Formula Engine.

Merges manually entered funnel counts onto a day's record and recomputes
every dependent metric from the merged base values, replicating the
formulas of the team's reporting sheet. Any division by zero yields 0.
"""

from typing import Dict, Mapping, Optional, Union

from embudo.core.metric_registry import FieldKey
from embudo.models.record_models import DailyRecord

UpdateKey = Union[FieldKey, str]

# camelCase alias -> field name ("agendasAut" -> "agendas_aut")
_ALIASES: Dict[str, str] = {
    info.alias: name for name, info in DailyRecord.model_fields.items() if info.alias
}


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def resolve_updates(updates: Mapping[UpdateKey, float]) -> Dict[str, float]:
    """Normalize update keys to field names; unknown fields raise ValueError."""
    resolved: Dict[str, float] = {}
    for key, value in updates.items():
        name = key.value if isinstance(key, FieldKey) else str(key)
        name = _ALIASES.get(name, name)
        if name == "date":
            continue
        if name not in DailyRecord.model_fields:
            raise ValueError(f"Unknown metric field: {key}")
        resolved[name] = float(value or 0)
    return resolved


def compute_derived(values: Mapping[str, float]) -> Dict[str, float]:
    """Every derived field, from the base values of one record."""
    spend = values.get("spend", 0.0)
    leads = values.get("leads", 0.0)

    # Agendas
    agendas_total = values.get("agendas_aut", 0.0) + values.get("agendas_set", 0.0)
    ag_cualificado = values.get("ag_cualificado", 0.0)

    # Assistance
    asistencias = values.get("asistencias", 0.0)

    # Closings & sales
    cierres = values.get("cierres", 0.0)
    ventas = values.get("ventas", 0.0)

    # Financials: facturado wins over revenue
    revenue = values.get("facturado", 0.0) or values.get("revenue", 0.0) or 0.0
    beneficio = revenue - spend

    return {
        "agendas_total": agendas_total,
        "cpl": _ratio(spend, leads),
        "cpl_cualificado": _ratio(spend, ag_cualificado),
        "asis_rate": _ratio(asistencias, agendas_total) * 100,
        "asis_cash": _ratio(spend, asistencias),
        "cc_rate": _ratio(cierres, asistencias) * 100,
        "lc_rate": _ratio(cierres, leads) * 100,
        "cpa": _ratio(spend, ventas),
        "revenue": revenue,
        "facturado": revenue,
        "beneficio": beneficio,
        "bfacturado": beneficio,
        "roas": _ratio(revenue, spend),
        "roi": _ratio(beneficio, spend) * 100,
        "c_roi": _ratio(beneficio, spend),
    }


def recompute(
    record: Optional[DailyRecord],
    updates: Optional[Mapping[UpdateKey, float]] = None,
    *,
    date: Optional[str] = None,
) -> DailyRecord:
    """Shallow-merge `updates` onto `record` and return a fully recomputed copy.

    With no existing record a zeroed record for `date` is the merge base.
    The input record is never modified.
    """
    if record is None:
        if date is None:
            raise ValueError("A date is required when there is no existing record")
        base = DailyRecord(date=date).model_dump()
    else:
        base = record.model_dump()

    base.update(resolve_updates(updates or {}))
    base.update(compute_derived(base))
    return DailyRecord.model_validate(base)
