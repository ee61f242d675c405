"""
Tests for agency hierarchy resolution.

Covers descendant closure, ancestor chains, and fail-closed behaviour on
corrupted parent links.
"""

import pytest

from dispatch_engine.app.core.config import settings
from dispatch_engine.app.core.exceptions import HierarchyIntegrityError
from dispatch_engine.app.models.agency import Agency
from dispatch_engine.app.services.hierarchy import (
    ancestor_level,
    ancestors_of,
    descendants_of,
    is_ancestor,
    is_descendant,
)


async def build_binary_tree(make_agency, depth: int):
    """Build a full binary tree, returning (root_id, ids grouped by level)."""
    root = await make_agency("Root")
    levels = [[root]]
    for level in range(depth):
        next_level = []
        for parent_id in levels[-1]:
            for branch in range(2):
                next_level.append(
                    await make_agency(f"L{level + 1}-{parent_id}-{branch}", parent_agency_id=parent_id)
                )
        levels.append(next_level)
    return root, levels


# TEST 1: Descendant closure of a depth-3 binary tree
@pytest.mark.asyncio
async def test_descendants_of_binary_tree(ctx, make_agency):
    """Depth 3, branching 2: 2 children + 4 grandchildren + 8 great-grandchildren."""
    root, levels = await build_binary_tree(make_agency, depth=3)

    descendants = await descendants_of(ctx, root)

    assert len(descendants) == 14
    assert descendants == set(levels[1]) | set(levels[2]) | set(levels[3])
    assert root not in descendants


@pytest.mark.asyncio
async def test_descendants_of_leaf_is_empty(ctx, make_agency):
    root, levels = await build_binary_tree(make_agency, depth=3)

    for leaf in levels[3]:
        assert await descendants_of(ctx, leaf) == set()


@pytest.mark.asyncio
async def test_descendants_of_subtree(ctx, make_agency):
    """A mid-level node only sees its own subtree."""
    root, levels = await build_binary_tree(make_agency, depth=2)
    left = levels[1][0]

    assert await descendants_of(ctx, left) == {levels[2][0], levels[2][1]}


@pytest.mark.asyncio
async def test_descendants_of_unknown_agency_is_empty(ctx):
    assert await descendants_of(ctx, 999) == set()


# TEST 2: Ancestor chain
@pytest.mark.asyncio
async def test_ancestors_of_nearest_first(ctx, network):
    chain = await ancestors_of(ctx, network["local"])

    assert chain == [network["regional"], network["forwarder"]]


@pytest.mark.asyncio
async def test_ancestors_of_root_is_empty(ctx, network):
    assert await ancestors_of(ctx, network["forwarder"]) == []
    assert await ancestors_of(ctx, network["independent"]) == []


@pytest.mark.asyncio
async def test_ancestors_of_unknown_agency_is_empty(ctx):
    assert await ancestors_of(ctx, 999) == []


@pytest.mark.asyncio
async def test_is_descendant_and_is_ancestor(ctx, network):
    assert await is_descendant(ctx, network["forwarder"], network["local"]) is True
    assert await is_descendant(ctx, network["local"], network["forwarder"]) is False
    assert await is_ancestor(ctx, network["local"], network["forwarder"]) is True
    assert await is_ancestor(ctx, network["local"], network["sibling"]) is False


@pytest.mark.asyncio
async def test_ancestor_level(ctx, network):
    assert await ancestor_level(ctx, network["local"], network["regional"]) == 1
    assert await ancestor_level(ctx, network["local"], network["forwarder"]) == 2
    assert await ancestor_level(ctx, network["local"], network["sibling"]) is None


# TEST 3: Hierarchy is re-read on every call
@pytest.mark.asyncio
async def test_reparenting_is_visible_immediately(ctx, db_session, network):
    """Moving an agency changes the next resolution; nothing is cached."""
    assert network["local"] in await descendants_of(ctx, network["regional"])

    local = await db_session.get(Agency, network["local"])
    local.parent_agency_id = network["independent"]
    await db_session.commit()

    assert network["local"] not in await descendants_of(ctx, network["regional"])
    assert await ancestors_of(ctx, network["local"]) == [network["independent"]]


# TEST 4: Corrupted hierarchies fail closed
@pytest.fixture
async def cyclic_pair(db_session, make_agency):
    """Two agencies parented by each other."""
    first = await make_agency("First")
    second = await make_agency("Second", parent_agency_id=first)

    agency = await db_session.get(Agency, first)
    agency.parent_agency_id = second
    await db_session.commit()
    return first, second


@pytest.mark.asyncio
async def test_ancestors_of_cycle_raises(ctx, cyclic_pair):
    first, second = cyclic_pair

    with pytest.raises(HierarchyIntegrityError) as exc_info:
        await ancestors_of(ctx, first)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details["agency_id"] == first


@pytest.mark.asyncio
async def test_descendants_of_cycle_raises(ctx, cyclic_pair):
    first, second = cyclic_pair

    with pytest.raises(HierarchyIntegrityError):
        await descendants_of(ctx, first)


@pytest.mark.asyncio
async def test_ancestors_of_depth_bound(ctx, make_agency, monkeypatch):
    """A chain deeper than the configured bound is rejected."""
    monkeypatch.setattr(settings, "hierarchy_max_depth", 2)

    parent_id = None
    for index in range(4):
        parent_id = await make_agency(f"Level {index}", parent_agency_id=parent_id)

    with pytest.raises(HierarchyIntegrityError):
        await ancestors_of(ctx, parent_id)


@pytest.mark.asyncio
async def test_ancestors_of_chain_at_depth_bound(ctx, make_agency, monkeypatch):
    """Exactly hierarchy_max_depth ancestors is still a valid chain."""
    monkeypatch.setattr(settings, "hierarchy_max_depth", 3)

    chain = []
    parent_id = None
    for index in range(4):
        parent_id = await make_agency(f"Level {index}", parent_agency_id=parent_id)
        chain.append(parent_id)

    assert await ancestors_of(ctx, parent_id) == list(reversed(chain[:-1]))
