"""Domain core: game records, rules, errors and runtime settings."""
