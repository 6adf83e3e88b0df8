"""Shared fixtures for animgroups tests."""

import pytest

from animgroups.collection import AnimationGroupCollection
from animgroups.config import AppConfig
from animgroups.scene.memory import MemoryScene


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def scene() -> MemoryScene:
    """Torso with Arm and Leg children, plus a free-standing Prop."""
    s = MemoryScene(ticks_per_frame=160, range_start=0, range_end=160 * 50)
    s.add_node("Torso")
    s.add_node("Arm", parent="Torso")
    s.add_node("Leg", parent="Torso")
    s.add_node("Prop")
    return s


@pytest.fixture
def groups(scene: MemoryScene, app_config: AppConfig) -> AnimationGroupCollection:
    return AnimationGroupCollection(scene, app_config=app_config)

