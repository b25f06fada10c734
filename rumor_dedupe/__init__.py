"""Content deduplication engine for scraped news and rumor items."""
