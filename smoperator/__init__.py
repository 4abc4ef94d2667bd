"""SageMaker custom resource types, reconciliation helpers, an in-memory Kubernetes client and a batch transform job reconciler."""

__version__ = "0.1.0"