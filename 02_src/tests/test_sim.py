"""Tests for the demo traffic generator."""

import asyncio

import pytest

from ipc_tracker.models import Direction
from sim import Sim


class TestSim:
    """Tests for Sim scenario."""

    @pytest.mark.asyncio
    async def test_run_once_covers_every_direction(self, installed, host):
        """Test the scripted scenario produces traffic in every direction."""
        sim = Sim(host, installed, rounds=2)

        assert await sim.run_once() == 2

        events = await installed.get_events()
        directions = {e.direction for e in events}
        assert Direction.REQUESTER_TO_COORDINATOR in directions
        assert Direction.COORDINATOR_TO_REQUESTER in directions
        assert Direction.COORDINATOR_TO_WORKER in directions
        assert Direction.WORKER_TO_COORDINATOR in directions
        assert Direction.COORDINATOR in directions

    @pytest.mark.asyncio
    async def test_round_trips_are_linked(self, installed, host):
        """Test every invoke in the scenario is correlated."""
        await Sim(host, installed, rounds=1).run_once()

        events = await installed.get_events()
        invokes = [
            e for e in events
            if e.direction == Direction.REQUESTER_TO_COORDINATOR and e.method == "invoke"
        ]
        assert invokes
        assert all(e.linked_serial_number is not None for e in invokes)

    @pytest.mark.asyncio
    async def test_teardown_reported(self, installed, host):
        """Test handler removals at the end of the scenario are captured."""
        await Sim(host, installed, rounds=1).run_once()

        events = await installed.get_events()
        removals = {(e.channel, e.method) for e in events if e.direction == Direction.COORDINATOR}
        assert ("ping", "remove_all_listeners") in removals
        assert ("get-user", "remove_handler") in removals
        assert ("hello", "remove_handler") in removals

    @pytest.mark.asyncio
    async def test_start_stop(self, installed, host):
        """Test the background scenario can be started and stopped."""
        sim = Sim(host, installed, rounds=1, delay=(0, 0))

        await sim.start()
        await asyncio.sleep(0.05)
        await sim.stop()

        assert await installed.get_events()
