"""MCP server, command line entry point and async client for the Kagi search APIs."""

__version__ = "0.0.25"
__all__ = ["__version__"]