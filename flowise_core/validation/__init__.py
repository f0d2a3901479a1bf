"""Parameter, edge and whole-workflow validation."""
