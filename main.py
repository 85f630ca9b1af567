#!/usr/bin/env python3
"""ibc_monitor – polling tools for IBC boilers.

Entry point for the CSV data logger, the console status report, the error
log dump and the email monitor.

Usage
-----
    python main.py status   -u http://192.168.10.2/
    python main.py errorlog -u http://192.168.10.2/ --last 10
    python main.py logger   -u http://192.168.10.2/ -f boiler.csv -i 5
    python main.py monitor  -u http://192.168.10.2/ -o daily.csv \\
        -f boiler@example.com -t me@example.com -s smtp.example.com
"""

from __future__ import annotations

import argparse
import copy
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from configs.loaders import load_boiler_config, load_monitor_config, load_runtime_config
from core.boiler_client import BoilerClient
from core.exceptions import BoilerConnectionError, BoilerResponseError, ConfigError, StorageError
from core.logging_setup import setup_logging
from health.alert_reporter import AlertReporter
from integration.email_notifier import EmailNotifier
from integration.report_renderer import render_status_text
from pipeline.data_logger import DataLoggerLoop
from pipeline.monitor import BoilerMonitor
from storage.csv_logger import CsvLogger
from storage.cycle_log import CycleLog

logger = logging.getLogger("ibc_monitor")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-u", "--url",
        help='URL of the boiler, e.g. -u "http://192.168.10.2/" (default: boiler.yaml)',
    )

    parser = argparse.ArgumentParser(description="IBC boiler polling tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", parents=[common], help="Print the boiler and load status")

    p_err = sub.add_parser("errorlog", parents=[common],
                           help="Print the boiler error log with decoded faults")
    p_err.add_argument("-n", "--last", type=int, help="Only the N most recent entries")

    p_log = sub.add_parser("logger", parents=[common],
                           help="Append extended boiler detail to a CSV file")
    p_log.add_argument("-f", "--file", dest="output_file", help="Output CSV file")
    p_log.add_argument("-i", "--interval", type=int, help="Minutes between log rows")

    p_mon = sub.add_parser("monitor", parents=[common],
                           help="Email alerts, daily cycle log and weekly summary")
    p_mon.add_argument("-o", "--csvOutputFile", dest="daily_log_file", help="Path to csv of daily cycles")
    p_mon.add_argument("-w", "--ignoreWarnings", dest="ignore_warnings", action="store_true",
                       default=None, help="Do not send alerts for warnings")
    p_mon.add_argument("-f", "--emailFrom", dest="email_from", help="FROM address")
    p_mon.add_argument("-t", "--emailTo", dest="email_to", action="append",
                       help="TO address; may be repeated")
    p_mon.add_argument("-s", "--emailServer", dest="email_server", help="SMTP server")
    p_mon.add_argument("--emailServerPort", dest="email_port", type=int, help="SMTP port")
    p_mon.add_argument("-l", "--emailUser", dest="email_user", help="SMTP user name")
    p_mon.add_argument("-p", "--emailPass", dest="email_password", help="SMTP password")
    p_mon.add_argument("-m", "--emailMuteMinutes", dest="mute_minutes", type=int,
                       help="Minutes to wait between alert emails")
    p_mon.add_argument("--emailOnStart", dest="email_on_start", action="store_true",
                       default=None, help="Send a status email on startup")
    return parser


def make_client(args: argparse.Namespace, boiler_cfg: Dict[str, Any]) -> BoilerClient:
    url = args.url or boiler_cfg.get("url")
    if not url:
        raise ConfigError("No boiler URL given (use -u or boiler.yaml)")
    return BoilerClient(
        url,
        timeout=boiler_cfg.get("timeout_s", 10),
        retries=boiler_cfg.get("retries", 1),
        retry_delay=boiler_cfg.get("retry_delay_s", 1),
    )


def merge_monitor_config(args: argparse.Namespace, monitor_cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay monitor CLI flags on the ``monitor.yaml`` content."""
    cfg = copy.deepcopy(monitor_cfg)
    email = cfg.setdefault("email", {})
    for key in ("daily_log_file", "ignore_warnings", "mute_minutes", "email_on_start"):
        value = getattr(args, key, None)
        if value is not None:
            cfg[key] = value
    for arg, key in (
        ("email_from", "from"),
        ("email_to", "to"),
        ("email_server", "server"),
        ("email_port", "port"),
        ("email_user", "user"),
        ("email_password", "password"),
    ):
        value = getattr(args, arg, None)
        if value is not None:
            email[key] = value

    missing = [k for k in ("from", "to", "server") if not email.get(k)]
    if not cfg.get("daily_log_file"):
        missing.append("daily_log_file")
    if missing:
        raise ConfigError(f"Missing monitor settings: {', '.join(missing)}")
    return cfg


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_status(client: BoilerClient) -> int:
    try:
        boiler = client.get_boiler_data()
        detail = client.get_boiler_ext_detail_data()
        loads = client.get_load_status_data()
    except (BoilerConnectionError, BoilerResponseError) as exc:
        print(f"Error retrieving data: {exc}")
        return 1
    sys.stdout.write(render_status_text(boiler, detail, loads))
    return 0


def cmd_errorlog(client: BoilerClient, last: Optional[int]) -> int:
    try:
        count = client.get_boiler_log_data().log_entries
        first = max(0, count - last) if last else 0
        for index in range(first, count):
            entry = client.get_boiler_error_log_entry(index)
            print(f"{index:4d}  {entry.date} {entry.time}  {entry.fault_description}")
    except (BoilerConnectionError, BoilerResponseError) as exc:
        print(f"Error retrieving data: {exc}")
        return 1
    return 0


def cmd_logger(client: BoilerClient, args: argparse.Namespace, runtime_cfg: Dict[str, Any]) -> int:
    cfg = runtime_cfg.get("data_logger", {})
    output_file = args.output_file or cfg.get("output_file")
    interval = args.interval or cfg.get("interval_min")
    if not output_file or not interval:
        raise ConfigError("The logger needs an output file (-f) and an interval (-i)")

    loop = DataLoggerLoop(client, CsvLogger(output_file), interval_s=float(interval) * 60)
    _install_signal_handlers(loop.stop)
    loop.run()
    return 0


def cmd_monitor(client: BoilerClient, args: argparse.Namespace, monitor_cfg: Dict[str, Any]) -> int:
    cfg = merge_monitor_config(args, monitor_cfg)
    monitor = BoilerMonitor(
        cfg,
        client=client,
        cycle_log=CycleLog(cfg["daily_log_file"]),
        notifier=EmailNotifier(cfg["email"]),
        reporter=AlertReporter(),
    )
    _install_signal_handlers(monitor.stop)
    monitor.run()
    return 0


def _install_signal_handlers(stop) -> None:
    def signal_handler(sig, frame):
        logger.info("Signal %d received, stopping...", sig)
        stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    boiler_cfg = load_boiler_config()
    runtime_cfg = load_runtime_config()
    setup_logging(runtime_cfg.get("logging", {}))

    try:
        with make_client(args, boiler_cfg) as client:
            if args.command == "status":
                return cmd_status(client)
            if args.command == "errorlog":
                return cmd_errorlog(client, args.last)
            if args.command == "logger":
                return cmd_logger(client, args, runtime_cfg)
            return cmd_monitor(client, args, load_monitor_config())
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2
    except StorageError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
