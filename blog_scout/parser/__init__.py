"""HTML body, media and hashtag extraction."""
