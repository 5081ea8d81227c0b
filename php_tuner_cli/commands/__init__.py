"""php-tuner CLI commands."""
