"""
peer_review.i18n

Locale negotiation package.

Responsibilities:
- Parse `Accept-Language` headers and pick a supported locale.
- Make the negotiated locale available to the request being served.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only negotiation lives here; message catalogs are rendered by the front end.
