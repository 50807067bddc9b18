"""Pure domain layer: copy item model, ports and services."""
