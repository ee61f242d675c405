"""
Agency hierarchy resolution.

Computes descendant sets and ancestor chains by walking parent links
through an AgencyDirectory. Nothing is cached: every call re-reads the
hierarchy, since agencies can be re-parented between requests.
"""

from collections import deque
from typing import List, Optional, Set

from dispatch_engine.app.core.config import settings
from dispatch_engine.app.core.exceptions import HierarchyIntegrityError
from dispatch_engine.app.core.logging import get_logger
from dispatch_engine.app.services.agency_directory import AgencyDirectory

logger = get_logger("hierarchy")


async def descendants_of(ctx: AgencyDirectory, agency_id: int) -> Set[int]:
    """
    Get all agencies transitively parented by an agency.

    Breadth-first expansion, one directory lookup per visited node.

    Args:
        ctx: Agency directory for the current execution context
        agency_id: Root of the subtree

    Returns:
        Set of descendant agency IDs (empty for a leaf)

    Raises:
        HierarchyIntegrityError: If a node is reached twice (cycle in parent links)
    """
    descendants: Set[int] = set()
    queue = deque([agency_id])

    while queue:
        current_id = queue.popleft()
        for child_id in await ctx.get_direct_children(current_id):
            if child_id == agency_id or child_id in descendants:
                logger.error(
                    "Cycle detected while expanding descendants",
                    extra={"agency_id": agency_id, "revisited_agency_id": child_id}
                )
                raise HierarchyIntegrityError(
                    agency_id,
                    f"Agency {child_id} is reachable twice below agency {agency_id}; "
                    f"parent links contain a cycle"
                )
            descendants.add(child_id)
            queue.append(child_id)

    return descendants


async def ancestors_of(ctx: AgencyDirectory, agency_id: int) -> List[int]:
    """
    Get the parent chain of an agency, nearest first.

    Follows parent_agency_id until an agency has no parent or cannot be
    found. The walk is bounded by settings.hierarchy_max_depth.

    Args:
        ctx: Agency directory for the current execution context
        agency_id: Agency whose ancestors to list

    Returns:
        [parent, grandparent, ...] up to the root; empty for a root

    Raises:
        HierarchyIntegrityError: On a cycle or a chain longer than the depth bound
    """
    chain: List[int] = []
    visited = {agency_id}
    current_id = agency_id

    while True:
        agency = await ctx.get_agency(current_id)
        if agency is None or agency.parent_agency_id is None:
            return chain

        parent_id = agency.parent_agency_id
        if parent_id in visited:
            logger.error(
                "Cycle detected while walking ancestors",
                extra={"agency_id": agency_id, "revisited_agency_id": parent_id}
            )
            raise HierarchyIntegrityError(
                agency_id,
                f"Agency {parent_id} appears twice above agency {agency_id}; "
                f"parent links contain a cycle"
            )
        if len(chain) >= settings.hierarchy_max_depth:
            logger.error(
                "Ancestor chain exceeds depth bound",
                extra={"agency_id": agency_id, "max_depth": settings.hierarchy_max_depth}
            )
            raise HierarchyIntegrityError(
                agency_id,
                f"Ancestor chain of agency {agency_id} is deeper than "
                f"{settings.hierarchy_max_depth} levels"
            )

        chain.append(parent_id)
        visited.add(parent_id)
        current_id = parent_id


async def is_descendant(ctx: AgencyDirectory, ancestor_id: int, candidate_id: int) -> bool:
    """True if candidate_id lies anywhere below ancestor_id."""
    return candidate_id in await descendants_of(ctx, ancestor_id)


async def is_ancestor(ctx: AgencyDirectory, descendant_id: int, candidate_id: int) -> bool:
    """True if candidate_id lies anywhere above descendant_id."""
    return candidate_id in await ancestors_of(ctx, descendant_id)


async def ancestor_level(ctx: AgencyDirectory, agency_id: int, ancestor_id: int) -> Optional[int]:
    """
    Distance from an agency up to one of its ancestors.

    Returns:
        1 for the parent, 2 for the grandparent, and so on;
        None if ancestor_id is not above agency_id
    """
    chain = await ancestors_of(ctx, agency_id)
    if ancestor_id not in chain:
        return None
    return chain.index(ancestor_id) + 1
