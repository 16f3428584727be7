"""Route metrics and navigation backend for the fleet traffic map."""

__version__ = "0.1.0"
