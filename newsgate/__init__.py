"""newsgate - RSS headlines over TN3270."""

__version__ = "0.1.0"
