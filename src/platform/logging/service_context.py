"""
Service context extraction for distributed logging.

Every stateless handler instance tags its log lines with
``{service}@{env}:{instance}`` so interleaved logs from a pool of
instances can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'play-arena-service')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    instance_id = os.getenv('HOSTNAME', '')
    if instance_id:
        # Container hostnames are long hashes, first 8 chars are enough
        instance_id = instance_id[:8]
    else:
        instance_id = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance_id}'
