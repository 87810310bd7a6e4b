"""Overview chart callbacks — poll the sales feed and bind the figure for this tab."""
from dash import Input, Output, State, no_update

from sales_dashboard.callbacks.helpers import open_backend
from sales_dashboard.components.cards import failure_panel
from sales_dashboard.config import SALES_TABLE
from sales_dashboard.controllers.sales import SalesController
from sales_dashboard.models import SalesRecord

VIEW = "overview"


def load_chart_records(services):
    """SalesController refreshed oldest first, so categories keep their first-sale order."""
    controller = SalesController(open_backend(services).sales)
    controller.refresh(order_by="created_at", ascending=True)
    return controller


def register_callbacks(app, services):
    @app.callback(
        Output("chart-records", "data"),
        Output("chart-feed-gen", "data"),
        Output("chart-status", "children"),
        Input("chart-poll", "n_intervals"),
        State("chart-feed-gen", "data"),
    )
    def poll_chart(n_intervals, seen_gen):
        watcher = services.watcher(SALES_TABLE, VIEW)
        if seen_gen is not None and watcher.generation == seen_gen:
            return no_update, no_update, no_update
        gen = watcher.generation
        controller = load_chart_records(services)
        return controller.records_state(), gen, failure_panel(controller)

    @app.callback(
        Output("sales-chart", "figure"),
        Input("chart-records", "data"),
        Input("chart-mode", "value"),
        State("chart-view-id", "data"),
    )
    def bind_chart(records, mode, view_id):
        records = [SalesRecord.from_row(r) for r in (records or [])]
        return services.chart_binding(view_id).bind(records, mode or "bar")
