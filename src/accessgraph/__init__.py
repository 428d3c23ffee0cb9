"""accessgraph - authorization resolution over roles, permissions and access grants."""

__version__ = "0.1.0"
