"""StockMeta: bulk stock-photo metadata generation service."""
