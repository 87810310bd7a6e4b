"""Sales page callbacks — list polling, form submit/edit, confirmed delete, spreadsheet import."""
import logging

from dash import Input, Output, State, callback_context, no_update, ALL

from sales_dashboard.callbacks.helpers import open_backend, decode_upload, toast
from sales_dashboard.components.cards import money, status_alert, failure_panel
from sales_dashboard.components.tables import sales_table, import_preview_table
from sales_dashboard.config import SALES_TABLE
from sales_dashboard.controllers.sales import SalesController
from sales_dashboard.errors import DashboardError, user_message
from sales_dashboard.ingest import normalize_extension, parse_import_file
from sales_dashboard.models import ImportBatch

logger = logging.getLogger(__name__)

VIEW = "sales"


def _controller(services):
    return SalesController(open_backend(services).sales)


def _listing(services, controller):
    """(records store, feed generation, status) after a refresh attempt."""
    gen = services.watcher(SALES_TABLE, VIEW).generation
    return controller.records_state(), gen, failure_panel(controller)


def register_callbacks(app, services):
    # ── Poll: re-list when the change feed moved ──────────────────────────
    @app.callback(
        Output("sales-records", "data"),
        Output("sales-feed-gen", "data"),
        Output("sales-status", "children"),
        Input("sales-poll", "n_intervals"),
        State("sales-feed-gen", "data"),
    )
    def poll_sales(n_intervals, seen_gen):
        watcher = services.watcher(SALES_TABLE, VIEW)
        if seen_gen is not None and watcher.generation == seen_gen:
            return no_update, no_update, no_update
        gen = watcher.generation
        controller = _controller(services)
        controller.refresh()
        return controller.records_state(), gen, failure_panel(controller)

    # ── Render table + KPI pills from the cached list ─────────────────────
    @app.callback(
        Output("sales-table", "children"),
        Output("sales-total", "children"),
        Output("sales-average", "children"),
        Output("sales-count", "children"),
        Input("sales-records", "data"),
        Input("sales-search", "value"),
    )
    def render_sales(records, search):
        controller = SalesController(store=None)
        controller.load_records(records)
        stats = controller.stats
        return (
            sales_table(controller.filtered(search or ""), searching=bool(search)),
            money(stats.total),
            money(stats.average),
            str(stats.count),
        )

    # ── Submit (create or update) ─────────────────────────────────────────
    @app.callback(
        Output("sales-records", "data", allow_duplicate=True),
        Output("sales-feed-gen", "data", allow_duplicate=True),
        Output("sales-status", "children", allow_duplicate=True),
        Output("sales-toast", "children", allow_duplicate=True),
        Output("sales-name", "value", allow_duplicate=True),
        Output("sales-value", "value", allow_duplicate=True),
        Output("sales-edit-id", "data", allow_duplicate=True),
        Input("sales-submit", "n_clicks"),
        State("sales-name", "value"),
        State("sales-value", "value"),
        State("sales-edit-id", "data"),
        prevent_initial_call=True,
    )
    def submit_sale(n_clicks, name, value, edit_id):
        if not n_clicks:
            return (no_update,) * 7
        controller = _controller(services)
        controller.set_draft(name, value, edit_id)
        if not controller.submit():
            return no_update, no_update, failure_panel(controller), \
                no_update, no_update, no_update, no_update
        records, gen, status = _listing(services, controller)
        note = toast("Sale updated" if edit_id is not None else "Sale added", "Sales")
        return records, gen, status, note, "", None, None

    # ── Edit / cancel edit ────────────────────────────────────────────────
    @app.callback(
        Output("sales-name", "value", allow_duplicate=True),
        Output("sales-value", "value", allow_duplicate=True),
        Output("sales-edit-id", "data", allow_duplicate=True),
        Input({"type": "sales-edit", "index": ALL}, "n_clicks"),
        Input("sales-cancel-edit", "n_clicks"),
        State("sales-records", "data"),
        prevent_initial_call=True,
    )
    def edit_sale(edit_clicks, cancel_clicks, records):
        trigger = callback_context.triggered_id
        if trigger == "sales-cancel-edit":
            return "", None, None
        if not isinstance(trigger, dict) or not any(edit_clicks):
            return no_update, no_update, no_update
        controller = SalesController(store=None)
        controller.load_records(records)
        match = [r for r in controller.records if r.id == trigger["index"]]
        if not match:
            return no_update, no_update, no_update
        controller.edit(match[0])
        return controller.draft.name, controller.draft.value, controller.draft.id

    @app.callback(
        Output("sales-form-title", "children"),
        Output("sales-submit", "children"),
        Input("sales-edit-id", "data"),
    )
    def form_title(edit_id):
        if edit_id is None:
            return "New sale", "Save"
        return f"Editing #{edit_id}", "Update"

    # ── Delete: request → confirm / cancel ────────────────────────────────
    @app.callback(
        Output("sales-pending-delete", "data"),
        Output("sales-confirm-delete", "displayed"),
        Input({"type": "sales-delete", "index": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def request_delete(delete_clicks):
        trigger = callback_context.triggered_id
        if not isinstance(trigger, dict) or not any(delete_clicks):
            return no_update, no_update
        return trigger["index"], True

    @app.callback(
        Output("sales-records", "data", allow_duplicate=True),
        Output("sales-feed-gen", "data", allow_duplicate=True),
        Output("sales-status", "children", allow_duplicate=True),
        Output("sales-pending-delete", "data", allow_duplicate=True),
        Output("sales-edit-id", "data", allow_duplicate=True),
        Input("sales-confirm-delete", "submit_n_clicks"),
        Input("sales-confirm-delete", "cancel_n_clicks"),
        State("sales-pending-delete", "data"),
        State("sales-edit-id", "data"),
        prevent_initial_call=True,
    )
    def resolve_delete(submit_clicks, cancel_clicks, pending, edit_id):
        if pending is None:
            return no_update, no_update, no_update, no_update, no_update
        if callback_context.triggered[0]["prop_id"].endswith("cancel_n_clicks"):
            return no_update, no_update, no_update, None, no_update
        controller = _controller(services)
        controller.request_delete(pending)
        if not controller.confirm_delete():
            return no_update, no_update, failure_panel(controller), None, no_update
        records, gen, status = _listing(services, controller)
        return records, gen, status, None, (None if edit_id == pending else no_update)

    # ── Import: parse → preview → commit / reset ──────────────────────────
    @app.callback(
        Output("import-batch", "data"),
        Output("import-preview", "children"),
        Output("import-status", "children"),
        Output("import-confirm", "disabled"),
        Input("import-upload", "contents"),
        State("import-upload", "filename"),
        prevent_initial_call=True,
    )
    def parse_import(contents, filename):
        if contents is None:
            return no_update, no_update, no_update, no_update
        _, data = decode_upload(contents)
        try:
            batch = parse_import_file(data, normalize_extension(filename), source=filename)
        except DashboardError as e:
            return None, None, status_alert(user_message(e, f"Could not import {filename}")), True
        return (
            batch.to_store(),
            import_preview_table(batch),
            status_alert(f"{len(batch)} rows ready to import", color="info"),
            False,
        )

    @app.callback(
        Output("sales-records", "data", allow_duplicate=True),
        Output("sales-feed-gen", "data", allow_duplicate=True),
        Output("import-batch", "data", allow_duplicate=True),
        Output("import-preview", "children", allow_duplicate=True),
        Output("import-status", "children", allow_duplicate=True),
        Output("import-confirm", "disabled", allow_duplicate=True),
        Output("import-upload", "contents"),
        Input("import-confirm", "n_clicks"),
        Input("import-reset", "n_clicks"),
        State("import-batch", "data"),
        prevent_initial_call=True,
    )
    def finish_import(confirm_clicks, reset_clicks, batch_data):
        trigger = callback_context.triggered_id
        if trigger == "import-reset":
            return no_update, no_update, None, None, None, True, None
        if not confirm_clicks or not batch_data:
            return (no_update,) * 7
        controller = _controller(services)
        count = controller.commit_import(ImportBatch.from_store(batch_data))
        if controller.error:
            return no_update, no_update, no_update, no_update, failure_panel(controller), \
                no_update, no_update
        records, gen, _ = _listing(services, controller)
        done = status_alert(f"Imported {count} rows", color="success")
        return records, gen, None, None, done, True, None
