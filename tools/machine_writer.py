# tools/machine_writer.py

import json
from pathlib import Path


class MachineWriteError(Exception):
    """Raised when a machine definition cannot be encoded or written."""


def _state_order(state):
    # States are stringified integers; fall back to lexical order otherwise.
    return (0, int(state), "") if state.isdigit() else (1, 0, state)


def machine_to_dict(machine):
    """Build the JSON-ready document for a finalized MachineDefinition."""
    delta = []
    for from_state in sorted(machine.delta.keys(), key=_state_order):
        transitions = machine.delta[from_state]
        if not transitions:
            continue
        delta.append({
            "from": from_state,
            "to": [{"result": t.result, "on": t.on} for t in transitions],
        })

    return {
        "start": machine.start,
        "accept": machine.accept,
        "reject": machine.reject,
        "delta": delta,
    }


def encode_machine(machine):
    try:
        return json.dumps(machine_to_dict(machine), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise MachineWriteError("Error formatting Turing Machine as JSON.") from e


def write_machine(machine, output_path):
    """Append the encoded machine to output_path. Existing contents are never truncated."""
    payload = encode_machine(machine)
    try:
        with open(Path(output_path), "a", encoding="utf-8") as f:
            f.write(payload)
    except OSError as e:
        raise MachineWriteError("Error writing the Turing Machine to the file.") from e
    return payload
