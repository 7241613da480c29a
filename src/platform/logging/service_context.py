"""
Service context extraction for distributed logging.

Identifies the emitting process so logs from several instances sharing one
Redis/PostgreSQL can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'seat-reservation')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers expose a stable hostname; fall back to PID for local runs
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
