"""
Scene state
===========

The story has three scenes in a fixed order. Moving past either end is a
no-op: transitions saturate instead of wrapping or raising.

`next_scene` / `previous_scene` are pure functions; `SceneModel` is the
small owner object the controller mutates.
"""

from __future__ import annotations
from dataclasses import dataclass

from .models import Scene

FIRST_SCENE = min(Scene)
LAST_SCENE = max(Scene)


def clamp_scene(index: int) -> Scene:
    return Scene(max(int(FIRST_SCENE), min(int(LAST_SCENE), int(index))))

def next_scene(scene: Scene) -> Scene:
    return clamp_scene(int(scene) + 1)

def previous_scene(scene: Scene) -> Scene:
    return clamp_scene(int(scene) - 1)


@dataclass
class SceneModel:
    """Holds the current scene."""
    scene: Scene = FIRST_SCENE

    def current(self) -> Scene:
        return self.scene

    def advance(self) -> Scene:
        self.scene = next_scene(self.scene)
        return self.scene

    def retreat(self) -> Scene:
        self.scene = previous_scene(self.scene)
        return self.scene

    def goto(self, index: int) -> Scene:
        self.scene = clamp_scene(index)
        return self.scene

    @property
    def can_advance(self) -> bool:
        return self.scene < LAST_SCENE

    @property
    def can_retreat(self) -> bool:
        return self.scene > FIRST_SCENE
