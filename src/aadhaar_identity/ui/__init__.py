"""User interfaces: CLI, shared helpers and workflows."""
