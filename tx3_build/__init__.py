"""Build tooling for tx3 protocols: binding generation and TRP resolution."""

__version__ = "0.1.0"
