"""Monitor, decode and log status messages from a PCI video tracker."""

__version__ = "0.1.0"