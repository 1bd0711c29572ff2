"""Runtime support: persisted settings."""
