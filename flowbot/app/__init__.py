"""Runtime wiring."""
