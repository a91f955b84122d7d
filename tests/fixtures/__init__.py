"""Sample classes the asserters are exercised against."""
