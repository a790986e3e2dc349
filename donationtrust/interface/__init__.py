"""Mini README: Web interface for DonationTrust.

Exports the FastAPI application factory serving the JSON API, the public
transparency page and the admin panel.
"""

from .web_app import create_application

__all__ = ["create_application"]
