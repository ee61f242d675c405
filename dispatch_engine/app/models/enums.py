"""
Agency, dispatch and role enumerations.

Defines the closed value sets the authorization engine reasons about,
plus the named status and bypass-role sets derived from them.
"""

import enum


class AgencyType(str, enum.Enum):
    """
    Agency type enumeration.
    
    Types:
        FORWARDER: Top of the network, may send to and receive from any agency
        AGENCY: Regular agency, constrained by the ownership hierarchy
    """
    FORWARDER = "FORWARDER"
    AGENCY = "AGENCY"


class DispatchStatus(str, enum.Enum):
    """
    Dispatch status enumeration.
    
    Status flow:
        DRAFT → LOADING → DISPATCHED → RECEIVING → RECEIVED
        DISPATCHED/RECEIVING → DISCREPANCY when reception does not match
    """
    DRAFT = "DRAFT"  # Created, no parcels yet
    LOADING = "LOADING"  # Parcels being added
    DISPATCHED = "DISPATCHED"  # Sent, in transit
    RECEIVING = "RECEIVING"  # Some parcels received at destination
    RECEIVED = "RECEIVED"  # All parcels received
    DISCREPANCY = "DISCREPANCY"  # Reception did not match the manifest


class UserRole(str, enum.Enum):
    """
    User role enumeration, most privileged first.
    
    Roles:
        ROOT: Platform owner, bypasses every dispatch restriction
        ADMINISTRATOR: Platform administrator, may act on any agency's dispatches
        FORWARDER_ADMIN .. USER: Roles scoped to the actor's own agency
    """
    ROOT = "ROOT"
    ADMINISTRATOR = "ADMINISTRATOR"
    FORWARDER_ADMIN = "FORWARDER_ADMIN"
    CARRIER_ADMIN = "CARRIER_ADMIN"
    FORWARDER_RESELLER = "FORWARDER_RESELLER"
    AGENCY_SUPERVISOR = "AGENCY_SUPERVISOR"
    AGENCY_ADMIN = "AGENCY_ADMIN"
    AGENCY_SALES = "AGENCY_SALES"
    MESSENGER = "MESSENGER"
    USER = "USER"


# Parcels can only be added/removed while the dispatch is in one of these
MODIFIABLE_DISPATCH_STATUSES = frozenset({
    DispatchStatus.DRAFT,
    DispatchStatus.LOADING,
})

IMMUTABLE_DISPATCH_STATUSES = frozenset({
    DispatchStatus.DISPATCHED,
    DispatchStatus.RECEIVING,
    DispatchStatus.RECEIVED,
    DispatchStatus.DISCREPANCY,
})

# Dispatch reached its destination; the receiver now holds the parcels
ARRIVED_DISPATCH_STATUSES = frozenset({
    DispatchStatus.RECEIVED,
    DispatchStatus.DISCREPANCY,
})

# May modify a dispatch regardless of its status
STATUS_BYPASS_ROLES = frozenset({UserRole.ROOT})

# May modify a dispatch regardless of the sender agency
ADMIN_BYPASS_ROLES = frozenset({UserRole.ROOT, UserRole.ADMINISTRATOR})
