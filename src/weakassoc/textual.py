"""Textual integration for weakassoc. Opt-in — requires textual.

Widget associations are scoped to their App: the App is the storage carrier,
so every widget's sidecar data disappears with forget_app() or with the App
itself. Widgets are resolved by selector; NoMatches from the query is
handled here, not at callsites.
"""

from textual.css.query import NoMatches

from weakassoc import associate, associated, remove_store
from weakassoc.keys import DEFAULT


def _query(app, selector):
    try:
        return app.query_one(selector)
    except NoMatches:
        return None


def associate_widget(app, selector, value, subkey=DEFAULT):
    """associate() against the widget matching selector, scoped to app.

    Returns value, or None if no widget matched (nothing is stored).
    """
    widget = _query(app, selector)
    if widget is None:
        return None
    return associate(value, widget, subkey, storage=app)


def associated_widget(app, selector, subkey=DEFAULT, default=None):
    """associated() for the widget matching selector; default if none matched."""
    widget = _query(app, selector)
    if widget is None:
        return default
    return associated(widget, subkey, storage=app, default=default)


def forget_app(app):
    """Drop every widget association scoped to app. Call on shutdown."""
    return remove_store(app)
