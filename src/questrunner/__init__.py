"""Hero quest scheduling for the on-chain questing game."""
