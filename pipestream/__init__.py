"""Messages, metadata stores, pipes, monitors, sinks and Kafka offset metadata for stream processing."""

__version__ = "0.1.0"