"""WhatsApp-style lead screening chat."""

__version__ = "0.1.0"
