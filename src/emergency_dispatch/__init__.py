"""Emergency incident dispatch fan-out."""
