"""Pure quota calculators: short window, weekly window, billing cycle."""
