"""PGN-to-plane dataset generation for RookNet move-prediction models."""
