"""Static analysis of action scripts."""
