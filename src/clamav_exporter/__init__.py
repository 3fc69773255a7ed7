"""clamav-exporter: Prometheus exporter for the ClamAV daemon."""

__version__ = "0.1.0"
