"""Configuration — shopledger.toml sections, settings merge, logging setup."""
