"""Event-protocol messages, trust score generators and reputation tracking."""

__version__ = "0.1.0"

__all__ = ["identity", "messages", "parsing", "predict", "tsg", "tsg_message", "verdict"]