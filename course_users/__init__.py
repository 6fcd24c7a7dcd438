"""Course Users - admin report of enrolled users with CSV export."""

__version__ = "0.1.0"
