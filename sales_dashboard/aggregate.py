"""
aggregate.py — Group sales records and bind the grouped series to a plotly figure.

Category keys keep first-seen order; date keys (UTC calendar date of
created_at) are sorted ascending before they reach the trend line.
"""

from datetime import timezone

import plotly.graph_objects as go

from sales_dashboard.theme import BLUE, CHART_LAYOUT, GRAY, PIE_COLORS

CHART_MODES = {
    "bar": "Product sales",
    "pie": "Sales distribution",
    "line": "Sales trend",
}


def group_sum(records, key_fn):
    """key -> summed value, in order of first occurrence. Records whose key is None are skipped."""
    out = {}
    for rec in records:
        key = key_fn(rec)
        if key is None:
            continue
        out[key] = out.get(key, 0) + rec.value
    return out


def _name_key(rec):
    return rec.name


def _date_key(rec):
    if rec.created_at is None:
        return None
    return rec.created_at.astimezone(timezone.utc).date().isoformat()


def by_name(records):
    return group_sum(records, _name_key)


def by_date(records):
    grouped = group_sum(records, _date_key)
    return {k: grouped[k] for k in sorted(grouped)}


def empty_figure(message="No sales data yet"):
    fig = go.Figure()
    fig.add_annotation(text=message, showarrow=False, font=dict(size=14, color=GRAY),
                       xref="paper", yref="paper", x=0.5, y=0.5)
    fig.update_layout(**CHART_LAYOUT, height=360,
                      xaxis=dict(visible=False), yaxis=dict(visible=False))
    return fig


def build_figure(records, mode):
    """Aggregate `records` for `mode` and return a styled figure."""
    if mode not in CHART_MODES:
        raise ValueError(f"Unknown chart mode: {mode!r}")
    if not records:
        return empty_figure()

    if mode == "line":
        series = by_date(records)
        fig = go.Figure(go.Scatter(
            x=list(series), y=list(series.values()), mode="lines+markers",
            name="Sales trend", line=dict(color=BLUE, width=2),
        ))
    elif mode == "pie":
        series = by_name(records)
        fig = go.Figure(go.Pie(
            labels=list(series), values=list(series.values()),
            marker=dict(colors=PIE_COLORS), hole=0.35,
        ))
    else:
        series = by_name(records)
        fig = go.Figure(go.Bar(
            x=list(series), y=list(series.values()), name="Sales", marker_color=BLUE,
        ))
    fig.update_layout(**CHART_LAYOUT, height=400, title=CHART_MODES[mode])
    return fig


def _fingerprint(records):
    return tuple((r.id, r.name, r.value, r.created_at) for r in records)


class ChartBinding:
    """Holds the figure currently bound to a view.

    bind() re-aggregates only when the record set or the mode changed, and
    disposes the previous figure before binding the new one. It never
    mutates the records it is given.
    """

    def __init__(self):
        self.figure = None
        self.mode = None
        self._key = None
        self.disposed = 0

    def dispose(self):
        if self.figure is not None:
            self.figure.data = []
            self.figure = None
            self.disposed += 1

    def bind(self, records, mode):
        key = (_fingerprint(records), mode)
        if self.figure is not None and key == self._key:
            return self.figure
        figure = build_figure(records, mode)
        self.dispose()
        self.figure = figure
        self.mode = mode
        self._key = key
        return figure
