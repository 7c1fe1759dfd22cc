import logging
from pathlib import Path

import yaml
from transitions import Machine


class CaptureFSM:
    """
    Finite State Machine for one document capture-to-upload cycle.
    Loads its structure from states.yaml for easy modification.
    """

    def __init__(self, config_path=None, callbacks=None, crop_enabled=True):
        """
        :param config_path: Optional path to the YAML FSM definition.
        :param callbacks: Optional dict of callbacks for state entry actions.
                          Example: {"on_enter_capturing": some_function}
                          The special key "on_state_change" receives (old, new)
                          after every completed transition.
        :param crop_enabled: Whether capture_done goes through the cropping state.
        """
        self.log = logging.getLogger("CaptureFSM")
        self.config_path = config_path or Path(__file__).parent / "states.yaml"
        self.callbacks = callbacks or {}
        self.crop_enabled = crop_enabled
        self._previous_state = None

        with open(self.config_path, "r") as f:
            fsm_config = yaml.safe_load(f)

        states = fsm_config.get("states", [])
        transitions = fsm_config.get("transitions", [])
        initial = fsm_config.get("initial", "awaiting_permission")

        # Validate callbacks
        for name, func in self.callbacks.items():
            if not callable(func):
                raise ValueError(f"Callback '{name}' must be callable, got {type(func)}")
            if not name.startswith("on_"):
                raise ValueError(f"Callback name '{name}' should start with 'on_' (e.g., 'on_enter_capturing')")

        # queued: triggers fired from inside an on_enter callback run after
        # the current transition has finished
        self.machine = Machine(
            model=self,
            states=states,
            transitions=transitions,
            initial=initial,
            auto_transitions=False,
            queued=True,
            before_state_change="_remember_state",
            after_state_change="_announce_state",
        )

        for name, func in self.callbacks.items():
            for kind in ("enter", "exit"):
                prefix = f"on_{kind}_"
                if name.startswith(prefix):
                    self.machine.get_state(name[len(prefix):]).add_callback(kind, func)

    # -------------------- Condition Methods --------------------
    # Referenced in states.yaml as conditions for transitions

    def is_crop_enabled(self):
        return bool(self.crop_enabled)

    # -------------------- Helper Methods --------------------

    def _remember_state(self):
        self._previous_state = self.state

    def _announce_state(self):
        self.log.debug("%s -> %s", self._previous_state, self.state)
        listener = self.callbacks.get("on_state_change")
        if listener is not None:
            listener(self._previous_state, self.state)

    def in_state(self, *states):
        return self.state in states
