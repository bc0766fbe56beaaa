# -*- coding: utf-8 -*-
"""
Fixtures HTTP: app FastAPI sobre el engine sqlite del test.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.shared.database import dispose_database, init_database


@pytest.fixture
async def client(seeded, engine):
    from app.main import create_app

    init_database(engine)
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await dispose_database()
