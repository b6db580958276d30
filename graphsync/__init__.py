"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the project's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from graphsync._cogs.configs.configuration import (
    Settings,
    NetworkingSettings,
    ApiSettings,
    ReconcilingSettings,
)
from graphsync._cogs.helpers.typedefs import (
    Logger,
)
from graphsync._cogs.helpers.versions import (
    version as __version__,
)
from graphsync._cogs.structs.credentials import (
    ConnectionInfo,
    LoginError,
)
from graphsync._cogs.structs.values import (
    ABSENT,
    Absent,
    Value,
    is_empty,
    flatten_reference_ids,
)
from graphsync._cogs.structs.fields import (
    NEXT_LINK_FIELD,
    VALUE_FIELD,
    ID_FIELD,
    is_metadata_field,
    is_type_discriminator_field,
    is_paging_field,
)
from graphsync._cogs.structs.normalization import (
    normalize,
    canonicalize,
)
from graphsync._cogs.structs.merging import (
    UpdateOptions,
    merge,
    update,
)
from graphsync._cogs.structs.diffs import (
    diff,
)
from graphsync._cogs.structs.dicts import (
    export_values,
)
from graphsync._cogs.clients.auth import (
    APIContext,
)
from graphsync._cogs.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from graphsync._cogs.clients.fetching import (
    read_obj,
    list_objs,
    list_ref_ids,
)
from graphsync._cogs.clients.creating import (
    create_obj,
)
from graphsync._cogs.clients.patching import (
    patch_obj,
)
from graphsync._cogs.clients.deleting import (
    delete_obj,
)
from graphsync._cogs.clients.invoking import (
    call_action,
)
from graphsync._core.actions.loggers import (
    LogFormat,
    ResourceLogger,
    configure as configure_logging,
)
from graphsync._core.engines.memberships import (
    MembershipPlan,
    MembershipFailure,
    MembershipOperation,
    MembershipSyncError,
    plan_membership,
    apply_membership,
    sync_membership,
    read_membership,
)
from graphsync._core.engines.resources import (
    Reconciliation,
    create_resource,
    read_resource,
    update_resource,
    delete_resource,
)

__all__ = [
    'Settings', 'NetworkingSettings', 'ApiSettings', 'ReconcilingSettings',
    'Logger',
    'ConnectionInfo', 'LoginError',
    'ABSENT', 'Absent', 'Value', 'is_empty', 'flatten_reference_ids',
    'NEXT_LINK_FIELD', 'VALUE_FIELD', 'ID_FIELD',
    'is_metadata_field', 'is_type_discriminator_field', 'is_paging_field',
    'normalize', 'canonicalize',
    'UpdateOptions', 'merge', 'update',
    'diff',
    'export_values',
    'APIContext',
    'APIError', 'APIUnauthorizedError', 'APIForbiddenError',
    'APINotFoundError', 'APIConflictError',
    'read_obj', 'list_objs', 'list_ref_ids',
    'create_obj', 'patch_obj', 'delete_obj', 'call_action',
    'LogFormat', 'ResourceLogger', 'configure_logging',
    'MembershipPlan', 'MembershipFailure', 'MembershipOperation', 'MembershipSyncError',
    'plan_membership', 'apply_membership', 'sync_membership', 'read_membership',
    'Reconciliation', 'create_resource', 'read_resource', 'update_resource', 'delete_resource',
]
