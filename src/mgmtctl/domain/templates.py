"""Address templates of the JCA subsystem and of deployment assignments."""

from __future__ import annotations

from mgmtctl.domain.address import AddressTemplate, ResourceAddress
from mgmtctl.domain.types import ThreadPoolVariant

# --- JCA subsystem ---

JCA_TEMPLATE = AddressTemplate.of("{selected.profile}/subsystem=jca")
ARCHIVE_VALIDATION_TEMPLATE = JCA_TEMPLATE.append("archive-validation=archive-validation")
BEAN_VALIDATION_TEMPLATE = JCA_TEMPLATE.append("bean-validation=bean-validation")
TRACER_TEMPLATE = JCA_TEMPLATE.append("tracer=tracer")
WORKMANAGER_TEMPLATE = JCA_TEMPLATE.append("workmanager=*")
DISTRIBUTED_WORKMANAGER_TEMPLATE = JCA_TEMPLATE.append("distributed-workmanager=*")
WORKMANAGER_LRT_TEMPLATE = WORKMANAGER_TEMPLATE.append(
    f"{ThreadPoolVariant.LONG_RUNNING.child_type}=*"
)
WORKMANAGER_SRT_TEMPLATE = WORKMANAGER_TEMPLATE.append(
    f"{ThreadPoolVariant.SHORT_RUNNING.child_type}=*"
)

# --- Deployments ---

DEPLOYMENT_TEMPLATE = AddressTemplate.of("deployment=*")
SERVER_GROUP_TEMPLATE = AddressTemplate.of("server-group=*")
SERVER_GROUP_DEPLOYMENT_TEMPLATE = SERVER_GROUP_TEMPLATE.append("deployment=*")


def thread_pool_metadata_template(variant: ThreadPoolVariant) -> AddressTemplate:
    if variant is ThreadPoolVariant.LONG_RUNNING:
        return WORKMANAGER_LRT_TEMPLATE
    return WORKMANAGER_SRT_TEMPLATE


def thread_pool_address(
    workmanager: ResourceAddress, variant: ThreadPoolVariant, name: str
) -> ResourceAddress:
    """Address of one thread pool below a resolved (distributed) work manager.

    *name* becomes a segment value as is, so it may contain any character.
    """
    return workmanager.append(variant.child_type, name)
