"""Core building blocks: configuration, logging, protocols and wiring."""
