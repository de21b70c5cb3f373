"""Form session: the form state machine wired to the validation engine.

A FormSession owns one FormState and serializes every transition through the
reducer. Whenever a transition changes the values, the rule set is run
against the new values and the outcome replaces the errors, so errors are
always derived from the current values.

Usage:
    from formstate import FormSession
    from formstate.validation.rules import is_present, is_true

    session = FormSession(
        schema={"name": [is_present()], "tos": [is_true()]},
        on_submit=save_signup,
        initial_values={"name": "", "tos": False},
    )
    session.handle_field_change({"name": "name", "value": "Ada"})
    session.handle_field_change({"name": "tos", "type": "checkbox", "checked": True})
    result = await session.submit()
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from formstate.config import FormConfig
from formstate.form.lifecycle import SessionLifecycle
from formstate.form.reducer import apply, initial_state, touches_values
from formstate.form.types import (
    ChangeField,
    Command,
    FieldChange,
    FormState,
    Reset,
    SetErrors,
    SetValues,
)
from formstate.validation.engine import validate
from formstate.validation.types import RuleSet

logger = logging.getLogger(__name__)

# Submit action: (values, *extra) -> result, sync or async
SubmitAction: TypeAlias = Callable[..., Awaitable[Any] | Any]
InitialValues: TypeAlias = Mapping[str, Any] | Callable[[], Mapping[str, Any]]


@dataclass(frozen=True)
class FormSnapshot:
    """What the rendering layer reads after each transition.

    Attributes:
        state: The current FormState
        submitting: True while the submit action is pending
        disabled: submitting or the disabled override or the state has errors
    """

    state: FormState
    submitting: bool
    disabled: bool


Listener: TypeAlias = Callable[[FormSnapshot], None]


class FormSession:
    """One form session: state, reactive validation, submit and lifecycle.

    Args:
        schema: Field name -> ordered rules. Treated as an immutable value.
        on_submit: Called with the current values (plus any extra arguments
            given to ``submit``) when a submit is allowed
        initial_values: A mapping, or a zero-argument callable producing one.
            A callable is evaluated at creation and at every default reset.
        disabled_override: Force ``disabled`` on (defaults to config)
        show_all_errors: Treat every field as visited (defaults to config)
        config: Session defaults; ``FormConfig()`` when omitted
        label: Name used in log messages
    """

    def __init__(
        self,
        schema: RuleSet,
        on_submit: SubmitAction,
        initial_values: InitialValues,
        *,
        disabled_override: bool | None = None,
        show_all_errors: bool | None = None,
        config: FormConfig | None = None,
        label: str = "form",
    ):
        config = config or FormConfig()
        self.schema = schema
        self.on_submit = on_submit
        self.disabled_override = (
            config.disabled if disabled_override is None else disabled_override
        )
        self.show_all_errors = (
            config.show_all_errors if show_all_errors is None else show_all_errors
        )
        self.label = label
        self.lifecycle = SessionLifecycle(label)

        self._initial_values = initial_values
        self._listeners: list[Listener] = []
        self._submitting = False
        self._dispatch = self.lifecycle.guard(self._apply)
        self._set_submitting = self.lifecycle.guard(self._write_submitting)

        self._state = self._with_fresh_errors(initial_state(self._resolve_initial_values()))

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def values(self) -> dict[str, Any]:
        return self._state.values

    @property
    def errors(self) -> dict[str, list[str]]:
        return self._state.errors

    @property
    def visited(self) -> dict[str, bool]:
        return self._state.visited

    @property
    def has_errors(self) -> bool:
        return self._state.has_errors

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def disabled(self) -> bool:
        return self._submitting or self.disabled_override or self._state.has_errors

    @property
    def is_live(self) -> bool:
        return self.lifecycle.is_live

    def is_visited(self, name: str) -> bool:
        """True when errors for ``name`` should be shown to the user."""
        return self.show_all_errors or self._state.visited.get(name, False)

    def visible_errors(self, name: str) -> list[str]:
        """Errors for ``name`` if it has been visited, else an empty list."""
        if not self.is_visited(name):
            return []
        return list(self._state.errors.get(name, []))

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot(
            state=self._state,
            submitting=self._submitting,
            disabled=self.disabled,
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def handle_field_change(self, change: FieldChange | Mapping[str, Any]) -> None:
        """Apply a field change from the rendering layer.

        Accepts a FieldChange or a raw target descriptor
        (see ``FieldChange.from_target``).
        """
        if not isinstance(change, FieldChange):
            change = FieldChange.from_target(change)
        self._dispatch(ChangeField(change))

    def set_values(self, values: Mapping[str, Any]) -> None:
        self._dispatch(SetValues(values))

    def set_errors(self, errors: Mapping[str, list[str]]) -> None:
        """Replace the errors until the next values change re-derives them."""
        self._dispatch(SetErrors(errors))

    def reset(self, values: Mapping[str, Any] | None = None) -> None:
        """Reset to ``values`` (default: the initial values, re-evaluated).

        Clears errors, visited flags and the submitting flag; errors are then
        re-derived from the reset values.
        """
        if values is None:
            values = self._resolve_initial_values()
        self._set_submitting(False)
        self._dispatch(Reset(values))

    async def submit(self, *args: Any, **kwargs: Any) -> Any:
        """Run the submit action if the form has no errors.

        Returns:
            The action's result, or None when the submit was refused because
            errors are present or the session is closed (the action is not
            called).

        Raises:
            Whatever the submit action raises, after ``submitting`` is cleared.
        """
        if not self.lifecycle.is_live:
            logger.debug("Session '%s' is closed; submit ignored", self.label)
            return None

        self._set_submitting(True)

        if self._state.errors:
            logger.info(
                "Submit of '%s' refused; failing fields: %s",
                self.label,
                ", ".join(self._state.errors),
            )
            self._set_submitting(False)
            return None

        try:
            result = self.on_submit(dict(self._state.values), *args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            self._set_submitting(False)

    # -------------------------------------------------------------------------
    # Listeners and lifecycle
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every transition.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """End the session; later writes (including a settling submit) are dropped."""
        self.lifecycle.close()
        self._listeners.clear()

    async def __aenter__(self) -> "FormSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _resolve_initial_values(self) -> Mapping[str, Any]:
        if callable(self._initial_values):
            return self._initial_values()
        return self._initial_values

    def _with_fresh_errors(self, state: FormState) -> FormState:
        errors = validate(self.schema, state.values).fold(lambda failures: failures, dict)
        return apply(state, SetErrors(errors))

    def _apply(self, command: Command) -> None:
        state = apply(self._state, command)
        if touches_values(command):
            state = self._with_fresh_errors(state)
        self._state = state
        self._notify()

    def _write_submitting(self, value: bool) -> None:
        if self._submitting == value:
            return
        self._submitting = value
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(
                    "Listener %r of '%s' failed: %s",
                    listener,
                    self.label,
                    e,
                )
