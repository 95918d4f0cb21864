"""NEWS2 and q-SOFA early-warning scores kept in sync with a live vital signs snapshot."""

__version__ = "0.1.0"
