"""sandlevel sandbox resolution: levels and structured modes."""
