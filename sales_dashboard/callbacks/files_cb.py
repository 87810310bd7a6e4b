"""Files page callbacks — repository upload/filter/delete/category/preview and the user-files bucket."""
import logging

from dash import html, dcc, Input, Output, State, callback_context, no_update, ALL

from sales_dashboard.theme import *
from sales_dashboard.callbacks.helpers import open_backend, decode_upload, toast
from sales_dashboard.components.cards import failure_panel
from sales_dashboard.components.tables import files_table, bucket_listing
from sales_dashboard.config import FILES_TABLE
from sales_dashboard.controllers.files import FileRepositoryController, UserFilesController
from sales_dashboard.models import FileRecord

logger = logging.getLogger(__name__)

VIEW = "files"


def repository(services, backend=None):
    backend = backend or open_backend(services)
    return FileRepositoryController(backend.files, backend.reports, backend.identity,
                                    services.settings.max_file_size)


def _records(data):
    return [FileRecord.from_row(r) for r in (data or [])]


def _find(data, file_id):
    for rec in _records(data):
        if rec.id == file_id:
            return rec
    return None


def preview_body(record):
    """Modal content for a previewable file: inline image or embedded document."""
    if (record.type or "").startswith("image/"):
        return html.Img(src=record.url, style={"maxWidth": "100%", "maxHeight": "75vh",
                                               "display": "block", "margin": "0 auto"})
    return html.Iframe(src=record.url, style={"width": "100%", "height": "75vh",
                                              "border": "none", "backgroundColor": WHITE})


def register_callbacks(app, services):
    def _listing(controller, gen):
        return [f.to_store() for f in controller.files], gen, failure_panel(controller)

    # ── Poll ──────────────────────────────────────────────────────────────
    @app.callback(
        Output("file-records", "data"),
        Output("files-feed-gen", "data"),
        Output("file-status", "children"),
        Input("files-poll", "n_intervals"),
        State("files-feed-gen", "data"),
    )
    def poll_files(n_intervals, seen_gen):
        watcher = services.watcher(FILES_TABLE, VIEW)
        if seen_gen is not None and watcher.generation == seen_gen:
            return no_update, no_update, no_update
        gen = watcher.generation
        controller = repository(services)
        controller.refresh()
        return _listing(controller, gen)

    @app.callback(
        Output("file-table", "children"),
        Input("file-records", "data"),
        Input("file-filter-category", "value"),
        Input("file-search", "value"),
    )
    def render_files(data, category, search):
        controller = FileRepositoryController(None, None, None)
        controller.files = _records(data)
        return files_table(controller.filtered(category, search or ""))

    # ── Upload ────────────────────────────────────────────────────────────
    @app.callback(
        Output("file-records", "data", allow_duplicate=True),
        Output("files-feed-gen", "data", allow_duplicate=True),
        Output("file-status", "children", allow_duplicate=True),
        Output("file-toast", "children", allow_duplicate=True),
        Output("file-upload", "contents"),
        Input("file-upload", "contents"),
        State("file-upload", "filename"),
        State("file-upload-category", "value"),
        prevent_initial_call=True,
    )
    def upload_file(contents, filename, category):
        if contents is None:
            return (no_update,) * 5
        mime, data = decode_upload(contents)
        controller = repository(services)
        record = controller.upload(filename, data, mime or None, category)
        if record is None:
            return no_update, no_update, failure_panel(controller), no_update, None
        gen = services.watcher(FILES_TABLE, VIEW).generation
        records, gen, status = _listing(controller, gen)
        return records, gen, status, toast(f"Uploaded {filename}", "Files"), None

    # ── Delete: request → confirm / cancel ────────────────────────────────
    @app.callback(
        Output("file-pending-delete", "data"),
        Output("file-confirm-delete", "displayed"),
        Input({"type": "file-delete", "index": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def request_delete(clicks):
        trigger = callback_context.triggered_id
        if not isinstance(trigger, dict) or not any(clicks):
            return no_update, no_update
        return trigger["index"], True

    @app.callback(
        Output("file-records", "data", allow_duplicate=True),
        Output("files-feed-gen", "data", allow_duplicate=True),
        Output("file-status", "children", allow_duplicate=True),
        Output("file-pending-delete", "data", allow_duplicate=True),
        Input("file-confirm-delete", "submit_n_clicks"),
        Input("file-confirm-delete", "cancel_n_clicks"),
        State("file-pending-delete", "data"),
        State("file-records", "data"),
        prevent_initial_call=True,
    )
    def resolve_delete(submit_clicks, cancel_clicks, pending, data):
        if pending is None:
            return no_update, no_update, no_update, no_update
        if callback_context.triggered[0]["prop_id"].endswith("cancel_n_clicks"):
            return no_update, no_update, no_update, None
        record = _find(data, pending)
        if record is None:
            return no_update, no_update, no_update, None
        controller = repository(services)
        controller.request_delete(record)
        if not controller.confirm_delete():
            return no_update, no_update, failure_panel(controller), None
        gen = services.watcher(FILES_TABLE, VIEW).generation
        records, gen, status = _listing(controller, gen)
        return records, gen, status, None

    # ── Category change ───────────────────────────────────────────────────
    @app.callback(
        Output("file-records", "data", allow_duplicate=True),
        Output("files-feed-gen", "data", allow_duplicate=True),
        Output("file-status", "children", allow_duplicate=True),
        Input({"type": "file-category", "index": ALL}, "value"),
        State("file-records", "data"),
        prevent_initial_call=True,
    )
    def change_category(values, data):
        trigger = callback_context.triggered_id
        if not isinstance(trigger, dict):
            return no_update, no_update, no_update
        record = _find(data, trigger["index"])
        category = callback_context.triggered[0]["value"]
        # dropdowns fire with their initial value whenever the table re-renders
        if record is None or not category or category == record.category:
            return no_update, no_update, no_update
        controller = repository(services)
        controller.update_category(record, category)
        gen = services.watcher(FILES_TABLE, VIEW).generation
        return _listing(controller, gen)

    # ── Preview ───────────────────────────────────────────────────────────
    @app.callback(
        Output("file-preview-modal", "is_open"),
        Output("file-preview-title", "children"),
        Output("file-preview-body", "children"),
        Input({"type": "file-preview", "index": ALL}, "n_clicks"),
        State("file-records", "data"),
        prevent_initial_call=True,
    )
    def open_preview(clicks, data):
        trigger = callback_context.triggered_id
        if not isinstance(trigger, dict) or not any(clicks):
            return no_update, no_update, no_update
        record = _find(data, trigger["index"])
        if record is None:
            return no_update, no_update, no_update
        return True, record.name, preview_body(record)

    # ── User files bucket ─────────────────────────────────────────────────
    @app.callback(
        Output("user-file-list", "children"),
        Output("user-file-status", "children"),
        Output("user-file-upload", "contents"),
        Input("user-file-upload", "contents"),
        State("user-file-upload", "filename"),
    )
    def user_files(contents, filename):
        backend = open_backend(services)
        controller = UserFilesController(backend.user_files, services.settings.max_file_size)
        status = None
        if contents is not None:
            mime, data = decode_upload(contents)
            if controller.upload(filename, data, mime or None) is None:
                status = failure_panel(controller)
                controller.refresh()
        else:
            controller.refresh()
        if status is None:
            status = failure_panel(controller)
        return bucket_listing(controller.files), status, None

    @app.callback(
        Output("user-file-download-data", "data"),
        Output("user-file-status", "children", allow_duplicate=True),
        Input({"type": "user-file-download", "index": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def download_user_file(clicks):
        trigger = callback_context.triggered_id
        if not isinstance(trigger, dict) or not any(clicks):
            return no_update, no_update
        name = trigger["index"]
        controller = UserFilesController(open_backend(services).user_files)
        data = controller.download(name)
        if data is None:
            return no_update, failure_panel(controller)
        return dcc.send_bytes(data, name.split("_", 1)[-1]), None
