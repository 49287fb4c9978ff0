import json
import os
from datetime import datetime, timezone

class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="tm_builder_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def log(self, entry: dict):
        """Append a single entry to the session log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_transition(self, event, from_state, on, result):
        self.log({
            "event": event,
            "from": from_state,
            "on": on,
            "result": list(result),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def log_written(self, path, transition_count):
        self.log({
            "event": "written",
            "path": str(path),
            "transitions": transition_count,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })


def build_logger(config):
    """Return a JSONLogger when session logging is enabled, else None."""
    if not config.get("session_log_enabled"):
        return None
    return JSONLogger(config["output_directory"], config["log_file_prefix"])
