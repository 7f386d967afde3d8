"""
Arisa - a Discord utility bot for nerds

Arisa exposes small, independent slash commands for everyday developer chores
(hashing, encodings, timestamps, colours, UUIDs) and lookups against external
references (GitHub, NVD, OpenJDK JEPs, the JVM instruction set).

Core Components:

- **Cooldowns**: Per (command, user) rate limiting with a background sweep
  that keeps the tracker from growing without bound
- **Lookup caches**: One TTL cache per external data source so repeated
  lookups do not hit the network
- **Cogs**: Slash command groups that validate input, consult the cooldown
  tracker, and format results as embeds

Usage:
    from arisa.main import main
    main()  # Starts the bot
"""
