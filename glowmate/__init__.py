"""GlowMate backend: accounts, waitlist and skin profiles."""

__version__ = "0.1.0"
