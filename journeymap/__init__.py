"""Journey map engine — step sequences, AI draft merging and chart projection."""
