"""Hook execution engine core."""
