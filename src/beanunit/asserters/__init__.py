"""Contract asserters: accessor round-trips, equals/hash, immutable construction."""
