"""A minimal entity store with observers attached through a component."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

log = logging.getLogger(__name__)


class EntityNotFound(KeyError):
    """Raised when an entity id does not exist."""


@dataclass
class Observer:
    """Runs ``callback(event, entity)`` when ``event_type`` is triggered on ``target``."""

    event_type: type
    callback: Callable[[Any, int], None]
    target: int | None = None


@dataclass(eq=False)
class Observe:
    """Component that spawns an observer entity watching its owner when inserted.

    Replacing or removing the component despawns the observer it spawned.
    """

    event_type: type
    callback: Callable[[Any, int], None]
    observer_entity: int | None = field(default=None, init=False)


class World:
    """Entities holding at most one component of each type."""

    def __init__(self) -> None:
        self._entities: dict[int, dict[type, Any]] = {}
        self._ids = itertools.count()

    def _components(self, entity: int) -> dict[type, Any]:
        try:
            return self._entities[entity]
        except KeyError:
            raise EntityNotFound(entity) from None

    def spawn(self, *args: Any) -> int:
        entity = next(self._ids)
        self._entities[entity] = {}
        self.insert(entity, *args)
        return entity

    def insert(self, entity: int, *args: Any) -> int:
        components = self._components(entity)
        for component in args:
            old = components.get(type(component))
            if old is not None:
                self._on_replace(entity, old)
            components[type(component)] = component
            self._on_insert(entity, component)
        return entity

    def remove(self, entity: int, component_type: type) -> Any:
        components = self._components(entity)
        old = components.get(component_type)
        if old is not None:
            self._on_replace(entity, old)
            del components[component_type]
        return old

    def despawn(self, entity: int) -> None:
        self._components(entity)
        del self._entities[entity]
        watchers = [
            e
            for e, comps in self._entities.items()
            if Observer in comps and comps[Observer].target == entity
        ]
        for watcher in watchers:
            self._entities.pop(watcher, None)

    def get(self, entity: int, component_type: type) -> Any:
        return self._components(entity).get(component_type)

    def observe(self, entity: int, event_type: type, callback: Callable[[Any, int], None]) -> int:
        self._components(entity)
        return self.spawn(Observer(event_type, callback, entity))

    def trigger(self, event: Any, entity: int) -> None:
        self._components(entity)
        observers = [
            comps[Observer]
            for comps in self._entities.values()
            if Observer in comps
            and comps[Observer].target == entity
            and isinstance(event, comps[Observer].event_type)
        ]
        for observer in observers:
            observer.callback(event, entity)

    def observer_count(self) -> int:
        return sum(1 for comps in self._entities.values() if Observer in comps)

    def _on_insert(self, entity: int, component: Any) -> None:
        if not isinstance(component, Observe):
            return
        if component.observer_entity is not None:
            log.error("Invalid `Observe` component is added")
            return
        component.observer_entity = self.spawn(
            Observer(component.event_type, component.callback, entity)
        )

    def _on_replace(self, entity: int, component: Any) -> None:
        if not isinstance(component, Observe):
            return
        if component.observer_entity is None:
            log.error("Invalid `Observe` component is replaced or removed")
            return
        self._entities.pop(component.observer_entity, None)