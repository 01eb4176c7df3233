"""QueryPad: store, tag and share short query snippets behind a JWT-protected API."""
