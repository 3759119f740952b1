"""One Line A Day - daily one-line journal with streak analytics."""
