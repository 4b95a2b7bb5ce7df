"""Configuration from CLI arguments, environment variables and the config file."""
