"""Systems - play-wide logic: assignments and the passing game."""
