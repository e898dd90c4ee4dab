"""Election tabulation for Instant Runoff, Open Party List and MPO elections."""

__version__ = "0.1.0"
