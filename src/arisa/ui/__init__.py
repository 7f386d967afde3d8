"""
Presentation helpers.

- **embeds.py**: Catppuccin-coloured embed builders with quote footers,
  code-block formatting and output truncation.
"""
