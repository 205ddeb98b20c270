"""Uploads both labeled buckets as one training batch."""

from __future__ import annotations

from ..audio.types import LabeledBatch
from ..store.sample_store import LABELED_BUCKETS, SampleStore
from .logger import LogBuffer
from .network import ClassifierClient, is_training_success


class TrainingOrchestrator:
    def __init__(self, store: SampleStore, client: ClassifierClient, logger: LogBuffer) -> None:
        self.store = store
        self.client = client
        self.logger = logger

    def build_batch(self) -> LabeledBatch:
        samples = []
        labels = []
        for label, bucket in enumerate(LABELED_BUCKETS):
            bucket_samples = self.store.list_samples(bucket)
            samples.extend(bucket_samples)
            labels.extend([label] * len(bucket_samples))
        return LabeledBatch(samples=samples, labels=labels)

    def train_all(self) -> str:
        batch = self.build_batch()
        self.logger.add(f"Sending {len(batch)} sample(s) for training")
        response = self.client.train_network(batch.samples, batch.labels)
        if is_training_success(response):
            self.store.delete_all()
            self.logger.add("Training succeeded; local samples cleared")
        else:
            self.logger.add(f"Training response: {response}")
        return response


__all__ = ["TrainingOrchestrator"]
