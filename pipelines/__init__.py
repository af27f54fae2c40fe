"""
Pipelines — runnable entry points that drive the ingestion package.

Each module exposes a ``main(argv)`` so it can be invoked with
``python -m pipelines.<name>`` or called directly from tests.
"""
