"""Effect list reducer for the effects panel of one clip."""

from dataclasses import dataclass
from typing import Any, Callable, Union

from pydantic import BaseModel, Field

from splice.render.effects import clamp_effect_params, reset_effect_params
from splice.schemas.effects import ClipEffect


class EffectsState(BaseModel):
    effects: list[ClipEffect] = Field(default_factory=list)
    selected_effect_id: str | None = None


# =============================================================================
# Actions
# =============================================================================


@dataclass(frozen=True)
class SetEffects:
    effects: list[ClipEffect]


@dataclass(frozen=True)
class AddEffect:
    effect: ClipEffect


@dataclass(frozen=True)
class UpdateEffect:
    effect_id: str
    params: dict[str, float]


@dataclass(frozen=True)
class RemoveEffect:
    effect_id: str


@dataclass(frozen=True)
class ReorderEffects:
    effect_ids: list[str]  # New order; position becomes the effect's order


@dataclass(frozen=True)
class SelectEffect:
    effect_id: str | None


@dataclass(frozen=True)
class ToggleEffect:
    effect_id: str


@dataclass(frozen=True)
class ResetEffect:
    effect_id: str


EffectsAction = Union[
    SetEffects,
    AddEffect,
    UpdateEffect,
    RemoveEffect,
    ReorderEffects,
    SelectEffect,
    ToggleEffect,
    ResetEffect,
]


# =============================================================================
# Handlers
# =============================================================================


def _map_effect(
    state: EffectsState,
    effect_id: str,
    update: Callable[[ClipEffect], ClipEffect],
) -> EffectsState:
    effects = [update(e) if e.id == effect_id else e for e in state.effects]
    return state.model_copy(update={"effects": effects})


def _set_effects(state: EffectsState, action: SetEffects) -> EffectsState:
    return state.model_copy(update={"effects": list(action.effects)})


def _add_effect(state: EffectsState, action: AddEffect) -> EffectsState:
    return state.model_copy(
        update={"effects": [*state.effects, action.effect], "selected_effect_id": action.effect.id}
    )


def _update_effect(state: EffectsState, action: UpdateEffect) -> EffectsState:
    def update(effect: ClipEffect) -> ClipEffect:
        params = {**effect.params, **clamp_effect_params(effect.type, action.params)}
        return effect.model_copy(update={"params": params})

    return _map_effect(state, action.effect_id, update)


def _remove_effect(state: EffectsState, action: RemoveEffect) -> EffectsState:
    selected = state.selected_effect_id
    if selected == action.effect_id:
        selected = None
    return state.model_copy(
        update={
            "effects": [e for e in state.effects if e.id != action.effect_id],
            "selected_effect_id": selected,
        }
    )


def _reorder_effects(state: EffectsState, action: ReorderEffects) -> EffectsState:
    position = {effect_id: i for i, effect_id in enumerate(action.effect_ids)}
    effects = [
        e.model_copy(update={"order": position[e.id]}) if e.id in position else e
        for e in state.effects
    ]
    effects.sort(key=lambda e: e.order)
    return state.model_copy(update={"effects": effects})


def _select_effect(state: EffectsState, action: SelectEffect) -> EffectsState:
    return state.model_copy(update={"selected_effect_id": action.effect_id})


def _toggle_effect(state: EffectsState, action: ToggleEffect) -> EffectsState:
    return _map_effect(
        state, action.effect_id, lambda e: e.model_copy(update={"enabled": not e.enabled})
    )


def _reset_effect(state: EffectsState, action: ResetEffect) -> EffectsState:
    return _map_effect(state, action.effect_id, reset_effect_params)


_HANDLERS: dict[type, Callable[[EffectsState, Any], EffectsState]] = {
    SetEffects: _set_effects,
    AddEffect: _add_effect,
    UpdateEffect: _update_effect,
    RemoveEffect: _remove_effect,
    ReorderEffects: _reorder_effects,
    SelectEffect: _select_effect,
    ToggleEffect: _toggle_effect,
    ResetEffect: _reset_effect,
}


def apply_effects_action(state: EffectsState, action: EffectsAction) -> EffectsState:
    """Apply one action and return the resulting state."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported effects action: {type(action).__name__}")
    return handler(state, action)
