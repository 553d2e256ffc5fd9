from .models import Connection, ContainerState, Workload, WorkloadKey, WorkloadRef
from .monitor import Monitor

__version__ = "0.1.0"

__all__ = ["Connection", "ContainerState", "Workload", "WorkloadKey", "WorkloadRef", "Monitor"]
