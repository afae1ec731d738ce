"""slash.lat - pixel-accurate blade slashing game."""
