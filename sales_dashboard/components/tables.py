"""Reusable table builders."""
from dash import html, dcc
import dash_bootstrap_components as dbc
from sales_dashboard.theme import *
from sales_dashboard.config import FILE_CATEGORIES, CATEGORY_ALL
from sales_dashboard.components.cards import money, empty_state
from sales_dashboard.controllers.files import format_size, is_previewable

_TH = {"color": GRAY, "fontSize": "11px", "textTransform": "uppercase", "letterSpacing": "1px"}
_TD = {"fontSize": "13px", "verticalAlign": "middle"}


def sales_table(records, searching=False):
    """ID / name / amount rows with edit and delete actions."""
    if not records:
        return empty_state("No matching records" if searching else "No sales data yet")
    header = html.Thead(html.Tr([
        html.Th("ID", style=_TH), html.Th("Name", style=_TH),
        html.Th("Amount", style=_TH), html.Th("", style=_TH),
    ]))
    rows = []
    for rec in records:
        rows.append(html.Tr([
            html.Td(rec.id, style={**_TD, "color": DARKGRAY}),
            html.Td(rec.name, style={**_TD, "color": WHITE, "fontWeight": "500"}),
            html.Td(money(rec.value), style={**_TD, "fontFamily": "monospace"}),
            html.Td([
                dbc.Button("Edit", id={"type": "sales-edit", "index": rec.id},
                           color="link", size="sm", className="me-2"),
                dbc.Button("Delete", id={"type": "sales-delete", "index": rec.id},
                           color="link", size="sm", style={"color": RED}),
            ], style={**_TD, "textAlign": "right"}),
        ]))
    return dbc.Table([header, html.Tbody(rows)], hover=True, size="sm", className="mb-0")


def import_preview_table(batch, limit=10):
    """First rows of a parsed import batch."""
    shown = batch.preview(limit)
    return html.Div([
        html.P(f"Previewing {len(shown)} of {len(batch)} rows "
               f"({money(batch.total)} total) from {batch.source or 'upload'}",
               style={"color": GRAY, "fontSize": "12px"}),
        dbc.Table([
            html.Thead(html.Tr([html.Th("Name", style=_TH), html.Th("Amount", style=_TH)])),
            html.Tbody([
                html.Tr([html.Td(r.name, style=_TD),
                         html.Td(money(r.value), style={**_TD, "fontFamily": "monospace"})])
                for r in shown
            ]),
        ], size="sm", className="mb-2"),
    ])


def files_table(files):
    """File repository listing: name, category, size, age and actions."""
    if not files:
        return empty_state("No files found")
    header = html.Thead(html.Tr([
        html.Th("Name", style=_TH), html.Th("Category", style=_TH),
        html.Th("Size", style=_TH), html.Th("Uploaded", style=_TH), html.Th("", style=_TH),
    ]))
    choices = [c for c in FILE_CATEGORIES if c != CATEGORY_ALL]
    rows = []
    for f in files:
        actions = [
            html.A("Download", href=f.url, target="_blank", className="me-2",
                   style={"fontSize": "12px"}),
        ]
        if is_previewable(f):
            actions.append(dbc.Button("Preview", id={"type": "file-preview", "index": f.id},
                                      color="link", size="sm", className="me-2"))
        actions.append(dbc.Button("Delete", id={"type": "file-delete", "index": f.id},
                                  color="link", size="sm", style={"color": RED}))
        rows.append(html.Tr([
            html.Td(f.name, style={**_TD, "color": WHITE}),
            html.Td(dcc.Dropdown(
                id={"type": "file-category", "index": f.id},
                options=[{"label": c, "value": c} for c in choices],
                value=f.category, clearable=False, style={"minWidth": "170px", "color": "#111"},
            ), style=_TD),
            html.Td(format_size(f.size), style={**_TD, "fontFamily": "monospace"}),
            html.Td(f.created_at.strftime("%Y-%m-%d %H:%M") if f.created_at else "",
                    style={**_TD, "color": GRAY}),
            html.Td(actions, style={**_TD, "textAlign": "right", "whiteSpace": "nowrap"}),
        ], style={"borderLeft": f"3px solid {CATEGORY_COLORS.get(f.category, DARKGRAY)}"}))
    return dbc.Table([header, html.Tbody(rows)], hover=True, size="sm", className="mb-0")


def bucket_listing(entries):
    """Plain list of objects in the user-files bucket with download buttons."""
    if not entries:
        return empty_state("No files yet.")
    return html.Div([
        html.Div([
            html.Span("\U0001f4c4 ", style={"fontSize": "12px"}),
            html.Span(e["name"], style={"color": WHITE, "fontSize": "12px"}),
            dbc.Button("Download", id={"type": "user-file-download", "index": e["name"]},
                       color="link", size="sm", className="ms-2"),
        ], style={"padding": "2px 0"})
        for e in entries
    ])
