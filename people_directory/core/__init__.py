"""Configuration and logging setup shared by the client and the console."""
