"""Site routes that back the marketplace pages."""
