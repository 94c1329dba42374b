"""Timeline editing model and filter compilation for a non-linear video editor."""
