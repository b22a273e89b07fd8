"""HTTP API for the PayE engine."""
