"""Constants shared by scripts/ and tests/ (reference build scenarios)."""
