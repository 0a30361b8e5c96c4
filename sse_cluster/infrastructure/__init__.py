"""Infrastructure adapters: logging, streams, brokers and connection management."""
