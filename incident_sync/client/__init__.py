"""Client side: connection reconciler, classifier, board actions, socket transport."""

from .actions import build_incident, describe_incident, move_to_bucket
from .classifier import IncidentBucket, bucket_for, classify, classify_all
from .reconciler import ConnectionReconciler, ConnectionStatus, ReconcilerState, reduce
from .socket_client import IncidentSocketClient

__all__ = [
    "build_incident",
    "describe_incident",
    "move_to_bucket",
    "IncidentBucket",
    "bucket_for",
    "classify",
    "classify_all",
    "ConnectionReconciler",
    "ConnectionStatus",
    "ReconcilerState",
    "reduce",
    "IncidentSocketClient",
]
