from dataclasses import dataclass
from types import MappingProxyType

from rich.markup import escape

from config.config_loader import DEFAULT_CONFIG


class InvalidArgument(ValueError):
    """Raised when a user-supplied value cannot be used to build the machine."""


@dataclass(frozen=True)
class Transition:
    on: str
    to: str
    write: str
    direction: str

    @property
    def result(self):
        return [self.to, self.write, self.direction]

    def describe(self, from_state):
        return f"∂({from_state}, {self.on}) = ({self.to}, {self.write}, {self.direction})"


@dataclass(frozen=True)
class MachineDefinition:
    start: str
    accept: str
    reject: str
    alphabet: tuple
    delta: MappingProxyType


class TransitionTable:
    """Transitions grouped by origin state, at most one per (state, symbol)."""

    def __init__(self):
        self._by_state = {}

    def __len__(self):
        return sum(len(transitions) for transitions in self._by_state.values())

    def __contains__(self, key):
        from_state, on = key
        return self.find(from_state, on) is not None

    def find(self, from_state, on):
        for transition in self._by_state.get(from_state, []):
            if transition.on == on:
                return transition
        return None

    def insert(self, from_state, transition):
        if (from_state, transition.on) in self:
            return False
        self._by_state.setdefault(from_state, []).append(transition)
        return True

    def remove(self, from_state, on):
        transition = self.find(from_state, on)
        if transition is None:
            return None
        remaining = [t for t in self._by_state[from_state] if t.on != on]
        if remaining:
            self._by_state[from_state] = remaining
        else:
            # Empty groups are dropped.
            del self._by_state[from_state]
        return transition

    def states(self):
        return list(self._by_state.keys())

    def transitions_from(self, from_state):
        return list(self._by_state.get(from_state, []))

    def describe(self):
        lines = []
        for from_state, transitions in self._by_state.items():
            lines.extend(t.describe(from_state) for t in transitions)
        return lines

    def snapshot(self):
        return MappingProxyType({state: tuple(ts) for state, ts in self._by_state.items()})


class MachineBuilder:
    def __init__(self, config=None, logger=None, console=None):
        self.config = config or DEFAULT_CONFIG
        self.logger = logger
        self.console = console
        self.blank = self.config["blank_symbol"]
        self.directions = self.config["directions"]
        self.states = []
        self.start = None
        self.accept = None
        self.reject = None
        self.alphabet = []
        self.table = TransitionTable()

    # === States ===
    def initialize(self, num_states):
        try:
            count = int(str(num_states).strip())
        except ValueError:
            raise InvalidArgument("Invalid positive integer.")
        if count < 0:
            raise InvalidArgument("Invalid positive integer.")
        if count < self.config["min_states"]:
            raise InvalidArgument(f"Input must be >={self.config['min_states']}.")

        self.states = [str(i) for i in range(count)]
        return list(self.states)

    def _require_state(self, state, role):
        if state not in self.states:
            raise InvalidArgument(f"Unknown {role} state: {state}")

    def set_start(self, state):
        self._require_state(state, "start")
        self.start = state

    def set_accept(self, state):
        self._require_state(state, "accept")
        self.accept = state

    def reject_candidates(self):
        return [state for state in self.states if state != self.accept]

    def set_reject(self, state):
        self._require_state(state, "reject")
        if state == self.accept:
            raise InvalidArgument("Reject state must differ from the accept state.")
        self.reject = state

    def label_state(self, state):
        if state == self.accept:
            return f"{state} (accept)"
        if state == self.reject:
            return f"{state} (reject)"
        return state

    # === Alphabet ===
    def set_alphabet(self, raw):
        if not raw:
            raise InvalidArgument("Input should be nonempty.")
        if " " in raw:
            raise InvalidArgument("Input should contain no spaces.")
        if self.blank in raw:
            raise InvalidArgument("Input should contain no underscores.")

        self.alphabet = list(raw)
        return list(self.alphabet)

    def symbols(self):
        """Selectable tape symbols: the declared alphabet (deduplicated) plus blank."""
        return list(dict.fromkeys(self.alphabet + [self.blank]))

    # === Transitions ===
    def direction_code(self, direction):
        if direction in self.directions:
            return self.directions[direction]
        if direction in self.directions.values():
            return direction
        raise InvalidArgument(f"Unknown direction: {direction}")

    def add_transition(self, from_state, to_state, on, write, direction):
        transition = Transition(on=on, to=to_state, write=write, direction=self.direction_code(direction))
        if not self.table.insert(from_state, transition):
            self._report(f"[yellow]Duplicate transition from state {escape(from_state)} on input {escape(on)}.[/yellow]")
            self._log("duplicate", from_state, on, transition.result)
            return False

        self._log("add", from_state, on, transition.result)
        return True

    def remove_transition(self, from_state, on):
        removed = self.table.remove(from_state, on)
        if removed is not None:
            self._log("remove", from_state, on, removed.result)
        return removed

    def has_transitions(self):
        return len(self.table) > 0

    def states_with_transitions(self):
        return self.table.states()

    def transitions_from(self, from_state):
        return self.table.transitions_from(from_state)

    def describe(self):
        return self.table.describe()

    def finalize(self):
        if None in (self.start, self.accept, self.reject) or not self.alphabet:
            raise InvalidArgument("Start, accept, reject and alphabet must be set before finalizing.")
        return MachineDefinition(
            start=self.start,
            accept=self.accept,
            reject=self.reject,
            alphabet=tuple(self.alphabet),
            delta=self.table.snapshot(),
        )

    def _report(self, message):
        if self.console is not None:
            self.console.print(message)

    def _log(self, event, from_state, on, result):
        if self.logger is not None:
            self.logger.log_transition(event, from_state, on, result)
