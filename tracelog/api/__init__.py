"""HTTP surface used to exercise the log transport."""
