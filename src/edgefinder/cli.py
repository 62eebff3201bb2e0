# src/edgefinder/cli.py
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from edgefinder.analysis import run_backtest, scan_opportunities
from edgefinder.utils.betting_math import BettingInputError
from edgefinder.utils.config import DEFAULT_CONFIG_PATH, load_raw_config, validate_config
from edgefinder.utils.config_schema import Config
from edgefinder.utils.decorators import with_logging
from edgefinder.utils.logger import log_error, log_info, log_success

COMMANDS = ("scan", "backtest", "dashboard")


@with_logging
def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point. Arguments are 'key=value' overrides applied to the config,
    e.g. 'command=scan scanner.only_positive_ev=true'.
    """
    argv = sys.argv[1:] if argv is None else argv
    args = dict(arg.split("=", 1) for arg in argv if "=" in arg)

    args.pop("log_level", None)
    config_path = args.pop("config_path", DEFAULT_CONFIG_PATH)
    overrides = [f"{key}={value}" for key, value in args.items()]

    cfg = load_raw_config(config_path, overrides)
    try:
        config = Config(**validate_config(cfg))
    except ValidationError:
        log_error("Invalid configuration; see the errors above.")
        return 1

    command = cfg.get("command")
    if not command:
        log_error(
            "No command specified. Use 'command=<name>', e.g. 'edgefinder command=scan'"
        )
        return 1

    log_info(f"Running command: {command}")

    try:
        if command == "scan":
            scan_opportunities.main(config)

        elif command == "backtest":
            run_backtest.main(config)

        elif command == "dashboard":
            script_path = Path(__file__).resolve().parent / "dashboard/run_dashboard.py"
            subprocess.run(
                ["streamlit", "run", str(script_path), "--", f"config_path={config_path}"],
                check=True,
            )

        else:
            log_error(f"Unknown command: {command}. Choose one of: {', '.join(COMMANDS)}")
            return 1
    except BettingInputError as e:
        log_error(f"Invalid input: {e}")
        return 1

    log_success(f"Command '{command}' finished successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
