"""Infrastructure services implementing the domain's outbound interfaces."""
