"""Campus internship and CRT administration portal."""
