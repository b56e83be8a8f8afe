import asyncio

import pytest

from imperial import Nation, PlayerDescriptor
from imperial.exceptions import GameNotFoundError
from server.database import session_scope
from server.registry import GameRegistry


def test_registry_create_apply_remove():
    async def scenario():
        registry = GameRegistry()
        gid = await registry.create_game([PlayerDescriptor("alice", Nation.AH)])

        session = await registry.get(gid)
        first = session.game.available_actions[0]
        assert await registry.apply(gid, first)
        assert len(session.game.log) == 2

        assert await registry.remove(gid)
        with pytest.raises(GameNotFoundError):
            await registry.get(gid)

    asyncio.run(scenario())


def test_concurrent_actions_are_serialized():
    async def scenario():
        registry = GameRegistry()
        gid = await registry.create_game([PlayerDescriptor("alice"), PlayerDescriptor("bob")])
        session = await registry.get(gid)
        first = session.game.available_actions[0]

        results = await asyncio.gather(registry.apply(gid, first), registry.apply(gid, first))

        # the second copy is no longer legal once the first is applied
        assert sorted(results) == [False, True]

    asyncio.run(scenario())


def test_unconnected_log_store_keeps_games_in_memory():
    async def scenario():
        with pytest.raises(RuntimeError):
            async with session_scope():
                pass

        registry = GameRegistry(persist=True)
        gid = await registry.create_game([PlayerDescriptor("alice"), PlayerDescriptor("bob")])
        session = await registry.get(gid)

        assert await registry.apply(gid, session.game.available_actions[0])
        assert session.persisted_length == 0
        with pytest.raises(GameNotFoundError):
            await registry.get("missing")

    asyncio.run(scenario())
