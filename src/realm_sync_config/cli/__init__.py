"""Command line tools for realm_sync_config."""
