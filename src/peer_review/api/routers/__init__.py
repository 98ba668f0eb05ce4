"""
peer_review.api.routers

Router package.
"""

# Package marker.
