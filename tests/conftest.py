import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
import simpy

from liftsim.core.lift import Lift
from liftsim.infrastructure.message_broker import MessageBroker


@pytest.fixture
def env():
    return simpy.Environment()


@pytest.fixture
def broker(env):
    return MessageBroker(env)


@pytest.fixture
def lift(env, broker):
    return Lift(env, min_floor=0, max_floor=10, start_floor=0, broker=broker)


@pytest.fixture
def events(broker):
    """Every message published on the broker, in order"""
    received = []
    broker.subscribe(lambda topic, message: received.append(message))
    return received
