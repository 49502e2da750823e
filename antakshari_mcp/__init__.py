"""Shloka Antakshari: verse matching and turn resolution for a Sanskrit verse game."""
