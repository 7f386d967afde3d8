"""
Discord wiring for Arisa.

- **app_context.py**: The ``AppContext`` holding the configuration, cooldown
  tracker, lookup caches, HTTP client and schedulers. Built once at startup
  and injected into every cog.

- **command_helpers.py**: Input size and cooldown guards plus the embed
  shortcuts every command replies with.

- **cogs/**: Slash command groups and event listeners.
"""
