"""Settings page callbacks — profile save and avatar upload."""
from dash import Input, Output, State, no_update

from sales_dashboard.callbacks.helpers import open_backend, decode_upload, toast
from sales_dashboard.components.cards import failure_panel
from sales_dashboard.components.thumbnail import avatar, initials_for
from sales_dashboard.controllers.profile import ProfileController, preferences_from_form
from sales_dashboard.errors import Unauthenticated


def active_profile(services):
    """Activated ProfileController for the caller, or None when signed out."""
    backend = open_backend(services)
    controller = ProfileController(backend.identity, backend.profiles, backend.avatars,
                                   services.settings.max_avatar_size)
    try:
        controller.activate()
    except Unauthenticated:
        return None
    return controller


def register_callbacks(app, services):
    @app.callback(
        Output("profile-status", "children"),
        Output("profile-toast", "children"),
        Output("redirect", "href", allow_duplicate=True),
        Input("profile-save", "n_clicks"),
        State("profile-name", "value"),
        State("profile-company", "value"),
        State("profile-preferences", "value"),
        prevent_initial_call=True,
    )
    def save_profile(n_clicks, name, company, prefs):
        if not n_clicks:
            return no_update, no_update, no_update
        controller = active_profile(services)
        if controller is None:
            return no_update, no_update, "/login"
        if controller.profile is None or not controller.save(name, company,
                                                             preferences_from_form(prefs)):
            return failure_panel(controller), no_update, no_update
        return None, toast("Profile saved", "Settings"), no_update

    @app.callback(
        Output("profile-avatar", "children"),
        Output("profile-status", "children", allow_duplicate=True),
        Output("redirect", "href", allow_duplicate=True),
        Input("avatar-upload", "contents"),
        State("avatar-upload", "filename"),
        prevent_initial_call=True,
    )
    def upload_avatar(contents, filename):
        if contents is None:
            return no_update, no_update, no_update
        controller = active_profile(services)
        if controller is None:
            return no_update, no_update, "/login"
        if controller.profile is None:
            return no_update, failure_panel(controller), no_update
        mime, data = decode_upload(contents)
        url = controller.update_avatar(filename, data, mime)
        if url is None:
            return no_update, failure_panel(controller), no_update
        initials = initials_for(controller.profile.name, controller.user.email)
        return avatar(url, initials, size=96), None, no_update
