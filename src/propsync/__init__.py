"""propsync - best-effort database script sync for the property builder backend."""

__version__ = "0.1.0"
