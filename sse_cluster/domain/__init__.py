"""Domain layer: message types and the ports infrastructure implements."""
