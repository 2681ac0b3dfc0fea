"""Load tests.

Focus on throughput and latency of the embeddings endpoint under concurrent
callers. Requests are serialized through one engine, so latency grows with
concurrency; these tests make that visible.
"""
