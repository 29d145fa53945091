"""Adapters binding eventrelay protocols to concrete SDKs and runtimes."""
