"""Shared pytest fixtures for the quickbom test suite.

Provides:
- fake: in-memory Supabase client (see fakes.py)
- catalog: a small seeded catalog of materials, assemblies and groups
- client: AsyncClient with get_supabase overridden to return the fake
"""

import pytest
from httpx import ASGITransport, AsyncClient

from fakes import FakeSupabase
from quickbom.database.supabase_client import get_supabase


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def catalog(fake: FakeSupabase) -> FakeSupabase:
    """Two categories, three materials, four assemblies and two catalog groups.

    Unit costs: Lighting circuit 200, Power circuit 150, Water line 100, Drain line 60.
    """
    fake.seed("assembly_categories", [
        {"id": 1, "name": "Electrical"},
        {"id": 2, "name": "Sanitary & Plumbing"},
    ])
    fake.seed("materials", [
        {"id": 1, "name": "Cable 2.5mm", "part_number": "CB-25", "manufacturer": "Acme", "unit": "m", "price": 100},
        {"id": 2, "name": "Breaker 16A", "part_number": "BR-16", "manufacturer": "Acme", "unit": "pcs", "price": 150},
        {"id": 3, "name": "PVC Pipe", "part_number": "PP-20", "manufacturer": "Flow", "unit": "m", "price": 20},
    ])
    fake.seed("assemblies", [
        {"id": 1, "name": "Lighting circuit", "category_id": 1, "module": "ELECTRICAL"},
        {"id": 2, "name": "Power circuit", "category_id": 1, "module": "ELECTRICAL"},
        {"id": 3, "name": "Water line", "category_id": 2, "module": "INSTALLATION"},
        {"id": 4, "name": "Drain line", "category_id": 2, "module": "INSTALLATION"},
    ])
    fake.seed("assembly_materials", [
        {"assembly_id": 1, "material_id": 1, "quantity": 2},
        {"assembly_id": 2, "material_id": 2, "quantity": 1},
        {"assembly_id": 3, "material_id": 3, "quantity": 5},
        {"assembly_id": 4, "material_id": 3, "quantity": 3},
    ])
    fake.seed("assembly_groups", [
        {"id": "g-circuit", "name": "Circuit", "group_type": "CHOOSE_ONE", "category_id": 1, "sort_order": 0},
        {"id": "g-plumbing", "name": "Plumbing", "group_type": "CONFLICT", "category_id": 2, "sort_order": 0},
    ])
    fake.seed("assembly_group_items", [
        {"group_id": "g-circuit", "assembly_id": 1, "quantity": 1, "conflicts_with": [], "is_default": False, "sort_order": 0},
        {"group_id": "g-circuit", "assembly_id": 2, "quantity": 1, "conflicts_with": [], "is_default": True, "sort_order": 1},
        {"group_id": "g-plumbing", "assembly_id": 3, "quantity": 1, "conflicts_with": [4], "is_default": False, "sort_order": 0},
        {"group_id": "g-plumbing", "assembly_id": 4, "quantity": 2, "conflicts_with": [3], "is_default": False, "sort_order": 1},
    ])
    return fake


@pytest.fixture
async def client(fake: FakeSupabase):
    """AsyncClient with get_supabase overridden to use the in-memory fake."""
    from quickbom.main import app

    app.dependency_overrides[get_supabase] = lambda: fake
    app.state.supabase = fake
    app.state.limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.supabase = None
