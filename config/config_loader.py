import json
import os

DEFAULT_CONFIG = {
    "blank_symbol": "_",
    "min_states": 2,
    "directions": {"Left": "L", "Right": "R"},
    "session_log_enabled": False,
    "output_directory": "logs/",
    "log_file_prefix": "tm_builder_",
}

# Expected types for validation
CONFIG_SCHEMA = {
    "blank_symbol": str,
    "min_states": int,
    "directions": dict,
    "session_log_enabled": bool,
    "output_directory": str,
    "log_file_prefix": str,
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        if not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    if len(config["blank_symbol"]) != 1 or config["blank_symbol"] == " ":
        raise ValueError("Blank symbol must be a single non-space character.")

    # bool is an int subclass; reject it explicitly
    if isinstance(config["min_states"], bool) or config["min_states"] < 2:
        raise ValueError("min_states must be an integer >= 2.")

    directions = config["directions"]
    if set(directions.keys()) != {"Left", "Right"}:
        raise ValueError("Directions must define exactly 'Left' and 'Right'.")
    if len(set(directions.values())) != 2:
        raise ValueError("Direction codes must be distinct.")

def load_config(overrides=None, path=None):
    """Merge overrides (and an optional JSON file) onto the defaults, then validate."""
    config = dict(DEFAULT_CONFIG)
    config["directions"] = dict(DEFAULT_CONFIG["directions"])

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")
        with open(path, "r", encoding="utf-8") as f:
            config.update(json.load(f))

    if overrides:
        config.update(overrides)

    validate_config(config)

    if config["session_log_enabled"]:
        os.makedirs(config["output_directory"], exist_ok=True)

    return config
