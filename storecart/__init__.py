"""storecart - stock-validated shopping cart state with durable snapshots."""

__version__ = "0.1.0"
