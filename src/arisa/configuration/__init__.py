"""
Configuration management for Arisa.

- **app_configuration.py**: YAML configuration loader for global settings such
  as input/output limits, per-command cooldown windows, cache TTLs, the
  cooldown sweep schedule, HTTP client settings and footer quotes. Falls back
  to defaults on missing or malformed config files.
"""
