"""Step functions used by the command dispatcher."""
