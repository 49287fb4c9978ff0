# app.py

import argparse
import sys

from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, InvalidResponse, Prompt

from config.config_loader import load_config
from logger.logger import build_logger
from machine.turing_machine import InvalidArgument, MachineBuilder
from tools.machine_writer import MachineWriteError, write_machine

console = Console()

MENU_OPTIONS = {
    "add": "Add a transition.",
    "remove": "Remove a transition.",
    "finish": "Finish.",
}

class RawPrompt(Prompt):
    """Free-text prompt that keeps leading and trailing whitespace."""

    def process_response(self, value):
        value = value.rstrip("\r\n")
        if self.choices is not None and not self.check_choice(value):
            raise InvalidResponse(self.illegal_choice_message)
        return value

# === Machine setup prompts ===
def prompt_states(builder, console, stream=None):
    while True:
        count = IntPrompt.ask("How many states in your Turing Machine?", console=console, stream=stream)
        try:
            return builder.initialize(count)
        except InvalidArgument as e:
            console.print(f"[red]{escape(str(e))}[/red]")

def prompt_roles(builder, console, stream=None):
    start = Prompt.ask("Which state is your start state?", choices=builder.states, console=console, stream=stream)
    builder.set_start(start)

    accept = Prompt.ask("Which state is your accept state?", choices=builder.states, console=console, stream=stream)
    builder.set_accept(accept)

    reject = Prompt.ask(
        "Which state is your reject state?",
        choices=builder.reject_candidates(),
        console=console,
        stream=stream,
    )
    builder.set_reject(reject)

def prompt_alphabet(builder, console, stream=None):
    blank = builder.blank
    while True:
        raw = RawPrompt.ask(
            f"What is the tape alphabet? Please enter a sequence of characters, not including '{blank}'",
            console=console,
            stream=stream,
        )
        try:
            return builder.set_alphabet(raw)
        except InvalidArgument as e:
            console.print(f"[red]{escape(str(e))}[/red]")

def prompt_output(console, stream=None):
    while True:
        path = RawPrompt.ask("Which file would you like to write your new Turing Machine to?", console=console, stream=stream)
        if path:
            return path
        console.print("[red]Expecting nonempty string.[/red]")

# === Transition loop ===
def show_transitions(builder, console):
    for line in builder.describe():
        console.print(escape(line), highlight=False)

def menu_options(builder):
    options = ["add"]
    if builder.has_transitions():
        options.append("remove")
    options.append("finish")
    return options

def prompt_menu(builder, console, stream=None):
    options = menu_options(builder)
    for key in options:
        console.print(f"{escape(f'[{key}]')} {MENU_OPTIONS[key]}")
    return Prompt.ask("What would you like to do?", choices=options, console=console, stream=stream)

def _state_prompt(builder, label, console, stream):
    labels = ", ".join(builder.label_state(state) for state in builder.states)
    return Prompt.ask(
        f"{label} ({escape(labels)})",
        choices=builder.states,
        show_choices=False,
        console=console,
        stream=stream,
    )

def handle_add(builder, console, stream=None):
    blank = builder.blank
    symbols = builder.symbols()

    from_state = _state_prompt(builder, "From which state?", console, stream)
    to_state = _state_prompt(builder, "To which state?", console, stream)
    on = Prompt.ask(f"On what input? '{blank}' for blank", choices=symbols, console=console, stream=stream)
    write = Prompt.ask(
        f"What symbol does the head write? '{blank}' for blank",
        choices=symbols,
        console=console,
        stream=stream,
    )
    direction = Prompt.ask(
        "What direction does the head move?",
        choices=list(builder.directions.keys()),
        console=console,
        stream=stream,
    )

    return builder.add_transition(from_state, to_state, on, write, direction)

def handle_remove(builder, console, stream=None):
    from_state = Prompt.ask(
        "Which state would you like to remove a transition from?",
        choices=builder.states_with_transitions(),
        console=console,
        stream=stream,
    )

    transitions = builder.transitions_from(from_state)
    for transition in transitions:
        console.print(f"  {escape(transition.on)}: {escape(transition.describe(from_state))}", highlight=False)

    on = Prompt.ask(
        "Which transition would you like to remove? Enter its input symbol",
        choices=[t.on for t in transitions],
        console=console,
        stream=stream,
    )
    return builder.remove_transition(from_state, on)

def run_transition_loop(builder, console, stream=None):
    while True:
        show_transitions(builder, console)
        choice = prompt_menu(builder, console, stream)

        if choice == "finish":
            break
        elif choice == "remove":
            handle_remove(builder, console, stream)
        elif choice == "add":
            handle_add(builder, console, stream)

# === Session ===
def run_session(config=None, console=console, stream=None):
    """Collect a machine interactively and append it to the chosen file. Returns the output path."""
    config = config or load_config()
    logger = build_logger(config)
    builder = MachineBuilder(config, logger=logger, console=console)

    prompt_states(builder, console, stream)
    prompt_roles(builder, console, stream)
    prompt_alphabet(builder, console, stream)
    run_transition_loop(builder, console, stream)

    machine = builder.finalize()

    output_path = prompt_output(console, stream)
    write_machine(machine, output_path)
    if logger is not None:
        logger.log_written(output_path, len(builder.table))

    console.print(f"Successfully wrote Turing Machine to {escape(output_path)}.", highlight=False, soft_wrap=True)
    return output_path

def main(argv=None):
    parser = argparse.ArgumentParser(description="Interactive builder for single-tape deterministic Turing machines")
    parser.parse_args(argv)

    try:
        run_session()
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Failed to process input. Aborting.[/red]")
        sys.exit(1)
    except MachineWriteError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

if __name__ == "__main__":
    main()
