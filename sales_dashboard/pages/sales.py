"""Sales page — spreadsheet import, KPI pills, record form and searchable table."""
from dash import html, dcc
import dash_bootstrap_components as dbc

from sales_dashboard.theme import *
from sales_dashboard.components.cards import section
from sales_dashboard.components.kpi import sales_kpis


def _import_zone():
    return section("IMPORT SPREADSHEET", [
        html.P("Columns: name, value. CSV or XLSX; rows are checked before anything is saved.",
               style={"color": GRAY, "fontSize": "12px"}),
        dcc.Upload(
            id="import-upload",
            children=html.Div([
                html.Span("Drag & Drop or "),
                html.A("Click to Browse", style={"color": CYAN, "textDecoration": "underline"}),
            ], style={"color": GRAY, "fontSize": "13px"}),
            style={
                "width": "100%", "borderWidth": "2px", "borderStyle": "dashed",
                "borderColor": f"{CYAN}44", "borderRadius": "10px",
                "textAlign": "center", "padding": "20px", "cursor": "pointer",
            },
            accept=".csv,.xlsx",
            className="upload-zone",
        ),
        html.Div(id="import-status", className="mt-3"),
        html.Div(id="import-preview"),
        html.Div([
            dbc.Button("Import rows", id="import-confirm", color="success", size="sm",
                       className="me-2", disabled=True),
            dbc.Button("Reset", id="import-reset", color="secondary", size="sm", outline=True),
        ]),
        dcc.Store(id="import-batch"),
    ], color=CYAN)


def _form():
    return section("ADD SALE", [
        dbc.Row([
            dbc.Col(dbc.Input(id="sales-name", placeholder="Product name", type="text"), md=6),
            dbc.Col(dbc.Input(id="sales-value", placeholder="Amount", type="number", step="any"), md=3),
            dbc.Col([
                dbc.Button("Save", id="sales-submit", color="primary", className="me-2"),
                dbc.Button("Cancel", id="sales-cancel-edit", color="secondary", outline=True),
            ], md=3),
        ], className="g-2"),
        dcc.Store(id="sales-edit-id"),
    ], color=GREEN, header_right=html.Span(id="sales-form-title", style={"color": GRAY,
                                                                         "fontSize": "12px"}))


def layout(settings):
    """Build the Sales page; the list is filled by the first poll tick."""
    return html.Div([
        html.Div(id="sales-status"),
        html.Div(id="sales-toast"),

        sales_kpis(),

        _import_zone(),
        _form(),

        section("SALES", [
            dbc.Input(id="sales-search", placeholder="Search name or amount...", type="text",
                      debounce=True, className="mb-3"),
            html.Div(id="sales-table"),
        ], color=ORANGE),

        dcc.ConfirmDialog(id="sales-confirm-delete",
                          message="Delete this sale? This cannot be undone."),
        dcc.Store(id="sales-pending-delete"),
        dcc.Store(id="sales-records"),
        dcc.Store(id="sales-feed-gen"),
        dcc.Interval(id="sales-poll", interval=settings.change_poll_ms),
    ])
