"""Fetching, decoding and orchestration of blog post crawls."""
