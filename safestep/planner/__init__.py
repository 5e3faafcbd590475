"""Route acquisition, plausibility and cross-mode checks."""
