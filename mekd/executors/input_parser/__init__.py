"""Form input parsing and as-you-type normalization."""
