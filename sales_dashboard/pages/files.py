"""Files page — categorized file repository plus the personal user-files bucket."""
from dash import html, dcc
import dash_bootstrap_components as dbc

from sales_dashboard.theme import *
from sales_dashboard.config import CATEGORY_ALL, FILE_CATEGORIES
from sales_dashboard.components.cards import section


def _dropzone(upload_id, text, color):
    return dcc.Upload(
        id=upload_id,
        children=html.Div([
            html.Span(text + " "),
            html.A("Click to Browse", style={"color": color, "textDecoration": "underline"}),
        ], style={"color": GRAY, "fontSize": "13px"}),
        style={
            "width": "100%", "borderWidth": "2px", "borderStyle": "dashed",
            "borderColor": f"{color}44", "borderRadius": "10px",
            "textAlign": "center", "padding": "20px", "cursor": "pointer",
        },
        className="upload-zone",
    )


def layout(settings):
    """Build the Files page."""
    limit_mb = settings.max_file_size // (1024 * 1024)
    upload_choices = [c for c in FILE_CATEGORIES if c != CATEGORY_ALL]
    return html.Div([
        html.Div(id="file-status"),
        html.Div(id="file-toast"),

        section("UPLOAD TO REPOSITORY", [
            dbc.Row([
                dbc.Col(dcc.Dropdown(
                    id="file-upload-category",
                    options=[{"label": c, "value": c} for c in upload_choices],
                    value=upload_choices[-1], clearable=False, style={"color": "#111"},
                ), md=4),
                dbc.Col(html.Small(f"Max {limit_mb} MB per file.",
                                   style={"color": DARKGRAY}), md=8,
                        className="d-flex align-items-center"),
            ], className="g-2 mb-3"),
            _dropzone("file-upload", "Drag & Drop or", PURPLE),
        ], color=PURPLE),

        section("FILE REPOSITORY", [
            dbc.Row([
                dbc.Col(dbc.Input(id="file-search", placeholder="Search files...",
                                  type="text", debounce=True), md=8),
                dbc.Col(dcc.Dropdown(
                    id="file-filter-category",
                    options=[{"label": c, "value": c} for c in FILE_CATEGORIES],
                    value=CATEGORY_ALL, clearable=False, style={"color": "#111"},
                ), md=4),
            ], className="g-2 mb-3"),
            dcc.Loading(html.Div(id="file-table"), type="dot", color=PURPLE),
        ], color=PURPLE),

        section("MY FILES", [
            _dropzone("user-file-upload", "Drop a file for your personal bucket or", TEAL),
            html.Div(id="user-file-status", className="mt-3"),
            html.Div(id="user-file-list", className="mt-2"),
            dcc.Download(id="user-file-download-data"),
        ], color=TEAL),

        dbc.Modal([
            dbc.ModalHeader(dbc.ModalTitle(id="file-preview-title")),
            dbc.ModalBody(id="file-preview-body"),
        ], id="file-preview-modal", size="xl", is_open=False),

        dcc.ConfirmDialog(id="file-confirm-delete",
                          message="Delete this file? The stored copy is removed too."),
        dcc.Store(id="file-pending-delete"),
        dcc.Store(id="file-records"),
        dcc.Store(id="files-feed-gen"),
        dcc.Interval(id="files-poll", interval=settings.change_poll_ms),
    ])
