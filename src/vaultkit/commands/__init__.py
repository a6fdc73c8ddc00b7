"""Built-in CLI commands for vaultkit."""
