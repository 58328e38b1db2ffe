"""
Core request building and execution.
"""
from .request_builder import RequestBuilder, merge_parameters
from .incomplete_request import IncompleteRequest
from .network import Network, PipelineState

__all__ = [
    "RequestBuilder",
    "merge_parameters",
    "IncompleteRequest",
    "Network",
    "PipelineState",
]
