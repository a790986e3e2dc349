"""Mini README: Core package initializer for the DonationTrust ledger.

DonationTrust records donations and expenses against categorised projects
and publishes the resulting totals to the public. Subpackages split the
system into ``store`` (relational persistence), ``ledger`` (records and the
stats aggregation), ``auth`` (admin credentials) and ``interface`` (the web
application). Only the logging helper is re-exported here so importing the
package stays free of database and web framework imports.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
