"""Domain values and pure manifest edits."""
