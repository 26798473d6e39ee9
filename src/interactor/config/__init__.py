"""Configuration: settings discovery, loading, and logging setup."""
