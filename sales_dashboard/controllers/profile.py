"""
Profile / settings controller.

activate() resolves the signed-in identity and get-or-creates its profile
row. Avatar changes go through the same store-then-commit saga as the file
repository, so a failed profile patch never leaves an orphaned image behind.
"""

import logging

from sales_dashboard.config import MAX_AVATAR_SIZE
from sales_dashboard.controllers.common import ErrorState
from sales_dashboard.errors import Conflict, DashboardError, Unauthenticated, UnsupportedFormat
from sales_dashboard.models import Preferences, Profile
from sales_dashboard.saga import upload_then_commit
from sales_dashboard.store.blobs import check_size, make_object_key

logger = logging.getLogger(__name__)


class ProfileController(ErrorState):
    def __init__(self, identity, profiles, avatars, max_avatar_size=MAX_AVATAR_SIZE):
        self.identity = identity
        self.profiles = profiles
        self.avatars = avatars
        self.max_avatar_size = max_avatar_size
        self.user = None
        self.profile = None

    @property
    def role(self):
        return self.profile.role if self.profile else None

    def activate(self):
        """Load (or lazily create) the caller's profile.

        Raises Unauthenticated when nobody is signed in; the page redirects.
        Any other failure is kept inline and None is returned.
        """
        self._clear()
        try:
            user = self.identity.current_user()
        except DashboardError as e:
            self._fail(e, "Could not check your session")
            return None
        if user is None:
            raise Unauthenticated()
        self.user = user
        try:
            self.profile = self._get_or_create(user.id)
        except DashboardError as e:
            self._fail(e, "Failed to load profile")
            return None
        return self.profile

    def _get_or_create(self, user_id):
        row = self.profiles.get(user_id)
        if row is not None:
            return Profile.from_row(row)
        defaults = Profile.defaults_for(user_id)
        try:
            self.profiles.upsert(defaults.to_row(), on_conflict="id", ignore_duplicates=True)
        except Conflict:
            # another activation inserted the row first
            logger.info("Profile %s already exists, reusing it", user_id)
        row = self.profiles.get(user_id)
        return Profile.from_row(row) if row is not None else defaults

    def save(self, name, company, preferences=None):
        self._clear()
        if self.profile is None:
            raise Unauthenticated()
        preferences = preferences or self.profile.preferences
        patch = {"name": name or "", "company": company or "", "preferences": preferences.to_json()}
        try:
            self.profiles.update(self.profile.id, patch)
        except DashboardError as e:
            self._fail(e, "Save failed")
            return False
        self.profile.name = patch["name"]
        self.profile.company = patch["company"]
        self.profile.preferences = preferences
        return True

    def update_avatar(self, filename, data, content_type):
        """Upload an image (<= 5 MiB) then point avatar_url at it; returns the new URL or None."""
        self._clear()
        if self.profile is None:
            raise Unauthenticated()
        try:
            if not (content_type or "").startswith("image/"):
                raise UnsupportedFormat("Please choose an image file")
            check_size(len(data), self.max_avatar_size)
            key = make_object_key(filename, prefix=f"avatars/{self.profile.id}")

            def _commit(url):
                self.profiles.update(self.profile.id, {"avatar_url": url})
                return url

            url = upload_then_commit(self.avatars, key, data, content_type, _commit)
        except DashboardError as e:
            self._fail(e, "Avatar upload failed")
            return None
        self.profile.avatar_url = url
        return url


def preferences_from_form(values):
    """Checklist values from the settings page -> Preferences."""
    values = values or []
    return Preferences(notifications="notifications" in values, theme="theme" in values)
