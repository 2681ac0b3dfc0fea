"""Load testing with Locust for the embedding service.

Run with ``locust -f tests/load/locustfile.py --host http://localhost:8081``.
"""

import random
from locust import HttpUser, task, between

SENTENCES = [
    "Natural gas Henry Hub futures contract",
    "The quick brown fox jumps over the lazy dog",
    "Embeddings map text into a vector space",
    "US Treasury 10-year bond yield",
    "Self-hosted inference keeps data on premises",
    "Gold futures commodity contract",
]


class EmbeddingServiceUser(HttpUser):
    """Load test user for the embeddings endpoint."""

    wait_time = between(1, 3)
    host = "http://localhost:8081"

    def on_start(self):
        """Setup for each user."""
        response = self.client.get("/health")
        if response.status_code != 200:
            raise Exception("Embedding service not available")

    @task(6)
    def embed_single(self):
        """Test single-string embedding."""
        payload = {"input": random.choice(SENTENCES)}

        with self.client.post("/v1/embeddings", json=payload, catch_response=True) as response:
            if response.status_code == 200:
                data = response.json()
                if len(data.get("data", [])) == 1 and data["data"][0]["embedding"]:
                    response.success()
                else:
                    response.failure("Incorrect embedding response")
            else:
                response.failure(f"HTTP {response.status_code}")

    @task(3)
    def embed_batch(self):
        """Test batch embedding."""
        batch_size = random.randint(2, 16)
        payload = {"input": [random.choice(SENTENCES) for _ in range(batch_size)]}

        with self.client.post("/v1/embeddings", json=payload, catch_response=True) as response:
            if response.status_code == 200:
                data = response.json()
                indexes = [item["index"] for item in data.get("data", [])]
                if indexes == list(range(batch_size)):
                    response.success()
                else:
                    response.failure("Batch response out of order")
            else:
                response.failure(f"HTTP {response.status_code}")

    @task(1)
    def list_models(self):
        """Test list models endpoint."""
        with self.client.get("/models", catch_response=True) as response:
            if response.status_code == 200:
                response.success()
            else:
                response.failure(f"HTTP {response.status_code}")

    @task(1)
    def scrape_metrics(self):
        """Test metrics endpoint."""
        with self.client.get("/metrics", catch_response=True) as response:
            if response.status_code == 200:
                response.success()
            else:
                response.failure(f"HTTP {response.status_code}")
