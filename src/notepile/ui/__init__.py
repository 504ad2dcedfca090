"""Qt widgets for the note viewer."""
