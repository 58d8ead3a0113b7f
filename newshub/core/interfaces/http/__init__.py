"""HTTP plumbing shared by all modules."""
