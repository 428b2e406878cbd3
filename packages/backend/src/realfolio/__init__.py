"""Realfolio — backend for a real-estate agent's portfolio site.

Authentication, property listings, media content entries and a singleton
site settings document, served as a REST API.
"""

__version__ = "0.1.0"
